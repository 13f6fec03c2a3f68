from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    food_item_id: int
    rating: int
    comment: Optional[str] = None
    image_path: Optional[str] = None
    date: Optional[datetime] = None
