from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.food_item import FoodItem
from app.models.review import Review
from app.services.base import AsyncBaseService
from app.services.catalog import CatalogService
from app.services.restaurant import restaurant_store
from app.services.validation import EntityRules

food_item_store = AsyncBaseService(FoodItem, "Food item")

food_item_rules = EntityRules(
    kind="Food item",
    store=food_item_store,
    required=("name", "restaurant_id"),
    references={"restaurant_id": restaurant_store},
)


class FoodItemService(CatalogService[FoodItem]):
    image_field = "image_path"

    async def collect_images(self, db: AsyncSession, db_obj: FoodItem) -> List[str]:
        from app.services.review import review_store

        images = await super().collect_images(db, db_obj)
        reviews = await review_store.get_multi_where(db, Review.food_item_id == db_obj.id)
        images.extend(review.image_path for review in reviews if review.image_path)
        return images


food_item_service = FoodItemService(food_item_rules)
