from pydantic import BaseModel
from typing import Optional, Any, List

from user_api.models.user import User

class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    success: bool = False
    message: str
    error: Optional[str] = None
    code: str
    details: Optional[Any] = None

class UserResponse(BaseModel):
    """
    Single user envelope used by create, read, update and delete.
    """
    success: bool = True
    message: str
    data: User

class UserListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[User]
