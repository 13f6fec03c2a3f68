from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Registration schemas
class UserRegister(BaseModel):
    username: str = Field(..., max_length=150, description="Unique login name")
    password: str = Field(..., description="Plain password, stored only as a bcrypt hash")


class UserResponse(BaseModel):
    """Public identity of a user. Never carries the password or its hash."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    created_at: Optional[datetime] = None


# Login schemas
class UserLogin(BaseModel):
    username: str
    password: str


# Token schemas
class Token(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int


class TokenPayload(BaseModel):
    sub: str
    username: str
    exp: int


class CurrentUser(BaseModel):
    """Identity bound to a verified bearer token."""
    id: int
    username: str
