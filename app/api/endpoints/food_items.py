from typing import Any, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_attachment_manager, get_current_user
from app.db.async_session import get_async_db
from app.schemas.auth import CurrentUser
from app.schemas.base import MessageResponse
from app.schemas.food_item import FoodItemResponse
from app.services.attachments import AttachmentManager
from app.services.catalog import present_fields
from app.services.food_item import food_item_service

router = APIRouter()


@router.post("", response_model=FoodItemResponse, status_code=status.HTTP_201_CREATED)
async def create_food_item(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[float] = Form(None, allow_inf_nan=False),
    restaurant_id: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_async_db),
    current_user: CurrentUser = Depends(get_current_user),
    attachments: AttachmentManager = Depends(get_attachment_manager),
) -> Any:
    """Create a food item (multipart form, optional image)."""
    fields = present_fields(
        name=name,
        description=description,
        price=price,
        restaurant_id=restaurant_id,
    )
    return await food_item_service.create(db, fields, upload=image, attachments=attachments)


@router.get("", response_model=List[FoodItemResponse])
async def list_food_items(db: AsyncSession = Depends(get_async_db)) -> Any:
    return await food_item_service.list(db)


@router.get("/{food_item_id}", response_model=FoodItemResponse)
async def get_food_item(food_item_id: int, db: AsyncSession = Depends(get_async_db)) -> Any:
    return await food_item_service.get(db, food_item_id)


@router.put("/{food_item_id}", response_model=FoodItemResponse)
async def update_food_item(
    food_item_id: int,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[float] = Form(None, allow_inf_nan=False),
    restaurant_id: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_async_db),
    current_user: CurrentUser = Depends(get_current_user),
    attachments: AttachmentManager = Depends(get_attachment_manager),
) -> Any:
    """
    Update a food item. Only the form fields sent are applied; a new image
    replaces the stored one and the old file is deleted.
    """
    changes = present_fields(
        name=name,
        description=description,
        price=price,
        restaurant_id=restaurant_id,
    )
    return await food_item_service.update(db, food_item_id, changes, upload=image, attachments=attachments)


@router.delete("/{food_item_id}", response_model=MessageResponse)
async def delete_food_item(
    food_item_id: int,
    db: AsyncSession = Depends(get_async_db),
    current_user: CurrentUser = Depends(get_current_user),
    attachments: AttachmentManager = Depends(get_attachment_manager),
) -> Any:
    """Delete a food item and its reviews, along with their images."""
    await food_item_service.delete(db, food_item_id, attachments=attachments)
    return MessageResponse(message="Food item deleted successfully.")
