"""Database models."""

# Import all models here to ensure they're recognized by SQLAlchemy
from app.models.food_item import FoodItem
from app.models.restaurant import Restaurant
from app.models.review import Review
from app.models.user import User

__all__ = [
    "User",
    "Restaurant",
    "FoodItem",
    "Review",
]
