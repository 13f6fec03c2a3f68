from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FoodItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: Optional[float] = None
    restaurant_id: int
    image_path: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
