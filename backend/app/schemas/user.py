"""User Schemas — response contracts for the users API.

Invariants:
    - UserResponse mirrors the persisted columns exactly
    - Request bodies are multipart form fields, validated in core/enforce_user.py
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """Public representation of a User row."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    age: int
    image_path: str
    created_at: datetime


class MessageResponse(BaseModel):
    message: str
