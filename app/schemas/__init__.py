"""Pydantic schemas for request and response validation."""

# Auth schemas
from .auth import (
    CurrentUser,
    Token,
    TokenPayload,
    UserLogin,
    UserRegister,
    UserResponse,
)

# Catalog schemas
from .base import MessageResponse
from .food_item import FoodItemResponse
from .restaurant import RestaurantCreate, RestaurantResponse, RestaurantUpdate
from .review import ReviewResponse

__all__ = [
    "CurrentUser",
    "Token",
    "TokenPayload",
    "UserLogin",
    "UserRegister",
    "UserResponse",
    "MessageResponse",
    "FoodItemResponse",
    "RestaurantCreate",
    "RestaurantResponse",
    "RestaurantUpdate",
    "ReviewResponse",
]
