from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RestaurantCreate(BaseModel):
    """Schema for creating a restaurant.

    ``name`` is optional at the schema level so that a missing name is
    reported by the validation pipeline like every other required field.
    """
    name: Optional[str] = Field(None, max_length=255, description="Name of the restaurant")
    location: Optional[str] = Field(None, max_length=255, description="Address or area")


class RestaurantUpdate(BaseModel):
    """Schema for updating a restaurant. Only the keys sent by the client are applied."""
    name: Optional[str] = Field(None, max_length=255, description="Name of the restaurant")
    location: Optional[str] = Field(None, max_length=255, description="Address or area")


class RestaurantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
