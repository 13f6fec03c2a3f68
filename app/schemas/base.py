from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by delete endpoints."""
    message: str
