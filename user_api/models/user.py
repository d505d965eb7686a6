"""
user_api/models/user.py

Purpose: User data model

- Plain data struct for a stored user
- Maps MongoDB documents (`_id`, ObjectId) to the wire shape (`id`, str)
- Field names match the JSON contract (createdAt / updatedAt)
"""

from datetime import datetime
from typing import Optional, Dict, Any

from pydantic import BaseModel, Field

# Fields a client may write; everything else in a body is discarded
USER_FIELDS = ("name", "email", "age", "phone")


class User(BaseModel):
    """A persisted user as returned by the API."""

    id: str = Field(..., description="Store-assigned identifier (ObjectId hex)")
    name: str
    email: str
    age: Optional[int] = None
    phone: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "id": "65a1f0c2e4b0a1b2c3d4e5f6",
                "name": "Jane Doe",
                "email": "jane@example.com",
                "age": 28,
                "phone": "+1 555 0100",
                "createdAt": "2024-01-12T10:15:30.123000Z",
                "updatedAt": "2024-01-12T10:15:30.123000Z"
            }
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "User":
        """
        Builds a User from a raw MongoDB document.

        Args:
            document: Document as returned by the driver (with `_id`)

        Returns:
            User instance
        """
        return cls(
            id=str(document["_id"]),
            name=document["name"],
            email=document["email"],
            age=document.get("age"),
            phone=document.get("phone"),
            createdAt=document["createdAt"],
            updatedAt=document["updatedAt"],
        )
