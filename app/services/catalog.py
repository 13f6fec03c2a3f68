"""
Shared write flow for catalog entities.

``CatalogService`` wraps an entity store and its validation rules and owns
the attachment lifecycle around each write:

- create: stage upload -> validate -> persist; discard the staged file on any failure
- update: stage upload -> existence -> validate -> persist; release the replaced file
- delete: existence -> collect owned images (own and cascaded) -> delete -> release
"""

from typing import Any, Dict, Generic, List, Mapping, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.attachments import AttachmentManager
from app.services.base import ModelType
from app.services.validation import EntityRules, load_existing, validate_create, validate_update
from app.utils.logger import catalog_logger


class CatalogService(Generic[ModelType]):
    """Create/read/update/delete for one catalog kind."""

    # Column holding the record's image path, None for kinds without images
    image_field: Optional[str] = None

    def __init__(self, rules: EntityRules):
        self.rules = rules
        self.store = rules.store
        self.kind = rules.kind

    async def list(self, db: AsyncSession) -> List[ModelType]:
        return await self.store.get_multi(db)

    async def get(self, db: AsyncSession, id: int) -> ModelType:
        return await self.store.get_or_404(db, id)

    async def create(
        self,
        db: AsyncSession,
        fields: Mapping[str, Any],
        *,
        upload: Optional[UploadFile] = None,
        attachments: Optional[AttachmentManager] = None,
    ) -> ModelType:
        staged = await self._stage(upload, attachments)

        try:
            values = await validate_create(db, self.rules, fields)
            if staged:
                values[self.image_field] = staged
            db_obj = await self.store.create(db, obj_in=values)
        except Exception:
            await self._discard(staged, attachments)
            raise

        catalog_logger.success(f"{self.kind} created", context="create", id=db_obj.id)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        id: int,
        changes: Mapping[str, Any],
        *,
        upload: Optional[UploadFile] = None,
        attachments: Optional[AttachmentManager] = None,
    ) -> ModelType:
        staged = await self._stage(upload, attachments)

        try:
            existing = await load_existing(db, self.rules, id)
            previous_image = getattr(existing, self.image_field) if self.image_field else None
            values = await validate_update(db, self.rules, existing, changes)
            if staged:
                values[self.image_field] = staged
            db_obj = await self.store.update(db, db_obj=existing, obj_in=values)
        except Exception:
            await self._discard(staged, attachments)
            raise

        if staged and previous_image and previous_image != staged and attachments is not None:
            await attachments.release(previous_image)

        catalog_logger.info(f"{self.kind} updated", context="update", id=id, fields=sorted(values))
        return db_obj

    async def delete(
        self,
        db: AsyncSession,
        id: int,
        *,
        attachments: Optional[AttachmentManager] = None,
    ) -> None:
        existing = await load_existing(db, self.rules, id)
        owned_images = await self.collect_images(db, existing)

        await self.store.delete(db, id=id)

        released = 0
        if attachments is not None:
            released = await attachments.release_many(owned_images)

        catalog_logger.info(f"{self.kind} deleted", context="delete", id=id, images_released=released)

    async def collect_images(self, db: AsyncSession, db_obj: ModelType) -> List[str]:
        """
        Image paths owned by ``db_obj`` and by every row its deletion cascades to.

        Kinds with dependents extend this.
        """
        if self.image_field and getattr(db_obj, self.image_field):
            return [getattr(db_obj, self.image_field)]
        return []

    async def _stage(
        self,
        upload: Optional[UploadFile],
        attachments: Optional[AttachmentManager],
    ) -> Optional[str]:
        if upload is None or self.image_field is None or attachments is None:
            return None
        return await attachments.stage(upload, field="image")

    async def _discard(self, staged: Optional[str], attachments: Optional[AttachmentManager]) -> None:
        if staged and attachments is not None:
            await attachments.discard(staged)
            catalog_logger.warning(f"{self.kind} write rejected, staged upload removed", context="discard", path=staged)


def present_fields(**fields: Any) -> Dict[str, Any]:
    """
    Build a presence-tagged mapping from form values.

    A value of None (or an empty text field) means the client did not send it.
    """
    result = {}
    for name, value in fields.items():
        if value is None:
            continue
        if isinstance(value, str) and value == "":
            continue
        result[name] = value
    return result
