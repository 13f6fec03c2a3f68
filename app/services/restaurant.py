from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.food_item import FoodItem
from app.models.restaurant import Restaurant
from app.models.review import Review
from app.services.base import AsyncBaseService
from app.services.catalog import CatalogService
from app.services.validation import EntityRules

restaurant_store = AsyncBaseService(Restaurant, "Restaurant")

restaurant_rules = EntityRules(
    kind="Restaurant",
    store=restaurant_store,
    required=("name",),
)


class RestaurantService(CatalogService[Restaurant]):
    """Restaurants carry no image of their own but own their menu's images."""

    async def collect_images(self, db: AsyncSession, db_obj: Restaurant) -> List[str]:
        # Local import: food_item imports this module for its reference rules
        from app.services.food_item import food_item_store
        from app.services.review import review_store

        food_items = await food_item_store.get_multi_where(db, FoodItem.restaurant_id == db_obj.id)
        food_item_ids = [item.id for item in food_items]

        images = [item.image_path for item in food_items if item.image_path]
        if food_item_ids:
            reviews = await review_store.get_multi_where(db, Review.food_item_id.in_(food_item_ids))
            images.extend(review.image_path for review in reviews if review.image_path)
        return images


restaurant_service = RestaurantService(restaurant_rules)
