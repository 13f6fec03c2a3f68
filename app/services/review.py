from app.models.review import Review
from app.services.base import AsyncBaseService
from app.services.catalog import CatalogService
from app.services.food_item import food_item_store
from app.services.validation import EntityRules

RATING_MIN = 1
RATING_MAX = 5

review_store = AsyncBaseService(Review, "Review", order_by=("-date", "-id"))

review_rules = EntityRules(
    kind="Review",
    store=review_store,
    required=("food_item_id", "rating"),
    references={"food_item_id": food_item_store},
    ranges={"rating": (RATING_MIN, RATING_MAX)},
)


class ReviewService(CatalogService[Review]):
    image_field = "image_path"


review_service = ReviewService(review_rules)
