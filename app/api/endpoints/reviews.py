from typing import Any, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_attachment_manager, get_current_user
from app.db.async_session import get_async_db
from app.schemas.auth import CurrentUser
from app.schemas.base import MessageResponse
from app.schemas.review import ReviewResponse
from app.services.attachments import AttachmentManager
from app.services.catalog import present_fields
from app.services.review import review_service

router = APIRouter()


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    food_item_id: Optional[int] = Form(None),
    rating: Optional[int] = Form(None),
    comment: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_async_db),
    current_user: CurrentUser = Depends(get_current_user),
    attachments: AttachmentManager = Depends(get_attachment_manager),
) -> Any:
    """Review a food item with a 1-5 rating, an optional comment and an optional photo."""
    fields = present_fields(food_item_id=food_item_id, rating=rating, comment=comment)
    return await review_service.create(db, fields, upload=image, attachments=attachments)


@router.get("", response_model=List[ReviewResponse])
async def list_reviews(db: AsyncSession = Depends(get_async_db)) -> Any:
    """List all reviews, most recent first."""
    return await review_service.list(db)


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(review_id: int, db: AsyncSession = Depends(get_async_db)) -> Any:
    return await review_service.get(db, review_id)


@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: int,
    food_item_id: Optional[int] = Form(None),
    rating: Optional[int] = Form(None),
    comment: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_async_db),
    current_user: CurrentUser = Depends(get_current_user),
    attachments: AttachmentManager = Depends(get_attachment_manager),
) -> Any:
    changes = present_fields(food_item_id=food_item_id, rating=rating, comment=comment)
    return await review_service.update(db, review_id, changes, upload=image, attachments=attachments)


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: int,
    db: AsyncSession = Depends(get_async_db),
    current_user: CurrentUser = Depends(get_current_user),
    attachments: AttachmentManager = Depends(get_attachment_manager),
) -> Any:
    await review_service.delete(db, review_id, attachments=attachments)
    return MessageResponse(message="Review deleted successfully.")
