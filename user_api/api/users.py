"""
user_api/api/users.py

Purpose: User CRUD endpoints

- GET    /users       list all users
- GET    /users/{id}  fetch one user
- POST   /users       create a user
- PUT    /users/{id}  partial update
- DELETE /users/{id}  remove a user

Handlers only translate HTTP to repository calls; failures are raised as
UserApiError subclasses and rendered by the registered exception handlers.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from user_api.api.deps import get_json_body, get_user_repository
from user_api.schemas.response import UserListResponse, UserResponse
from user_api.services.user_service import UserRepository

router = APIRouter()


@router.get("/users", response_model=UserListResponse)
async def list_users(repository: UserRepository = Depends(get_user_repository)):
    """Returns every user."""
    users = await repository.list_all()
    return UserListResponse(count=len(users), data=users)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, repository: UserRepository = Depends(get_user_repository)):
    user = await repository.get_by_id(user_id)
    return UserResponse(message="User fetched successfully", data=user)


@router.post("/users", response_model=UserResponse, status_code=201)
async def create_user(
    payload: Dict[str, Any] = Depends(get_json_body),
    repository: UserRepository = Depends(get_user_repository),
):
    """
    Creates a user from `{name, email, age?, phone?}`.

    Unknown fields are ignored. The email is stored trimmed and lower-cased.
    """
    user = await repository.create(payload)
    return UserResponse(message="User created successfully", data=user)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    payload: Dict[str, Any] = Depends(get_json_body),
    repository: UserRepository = Depends(get_user_repository),
):
    """
    Updates only the supplied fields of a user.

    Sending null for age or phone clears it.
    """
    user = await repository.update_by_id(user_id, payload)
    return UserResponse(message="User updated successfully", data=user)


@router.delete("/users/{user_id}", response_model=UserResponse)
async def delete_user(user_id: str, repository: UserRepository = Depends(get_user_repository)):
    user = await repository.delete_by_id(user_id)
    return UserResponse(message="User deleted successfully", data=user)
