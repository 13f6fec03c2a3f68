from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_attachment_manager, get_current_user
from app.db.async_session import get_async_db
from app.schemas.auth import CurrentUser
from app.schemas.base import MessageResponse
from app.schemas.restaurant import RestaurantCreate, RestaurantResponse, RestaurantUpdate
from app.services.attachments import AttachmentManager
from app.services.restaurant import restaurant_service

router = APIRouter()


@router.post("", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    restaurant_data: RestaurantCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Any:
    """Create a new restaurant."""
    return await restaurant_service.create(db, restaurant_data.model_dump(exclude_unset=True))


@router.get("", response_model=List[RestaurantResponse])
async def list_restaurants(db: AsyncSession = Depends(get_async_db)) -> Any:
    """List all restaurants, newest first."""
    return await restaurant_service.list(db)


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
async def get_restaurant(restaurant_id: int, db: AsyncSession = Depends(get_async_db)) -> Any:
    return await restaurant_service.get(db, restaurant_id)


@router.put("/{restaurant_id}", response_model=RestaurantResponse)
async def update_restaurant(
    restaurant_id: int,
    restaurant_data: RestaurantUpdate,
    db: AsyncSession = Depends(get_async_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Any:
    """Update a restaurant. Fields left out of the body keep their value."""
    return await restaurant_service.update(db, restaurant_id, restaurant_data.model_dump(exclude_unset=True))


@router.delete("/{restaurant_id}", response_model=MessageResponse)
async def delete_restaurant(
    restaurant_id: int,
    db: AsyncSession = Depends(get_async_db),
    current_user: CurrentUser = Depends(get_current_user),
    attachments: AttachmentManager = Depends(get_attachment_manager),
) -> Any:
    """
    Delete a restaurant together with its food items and their reviews.
    Images owned by any of the removed records are deleted from disk.
    """
    await restaurant_service.delete(db, restaurant_id, attachments=attachments)
    return MessageResponse(message="Restaurant deleted successfully.")
