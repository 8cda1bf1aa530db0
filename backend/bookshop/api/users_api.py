# backend/bookshop/api/users_api.py

from fastapi import APIRouter, HTTPException, status, Depends
from typing import List

from bookshop.dependencies import get_admin_user, get_user_repo
from bookshop.models.common import Message
from bookshop.models.user import User, UserCreate, UserUpdate
from bookshop.repositories.user_repository import UserRepository

router = APIRouter(tags=["users"], dependencies=[Depends(get_admin_user)])

@router.get("/users", response_model=List[User])
def get_all_users(user_repo: UserRepository = Depends(get_user_repo)):
    try:
        return user_repo.get_all_users()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch users: {str(e)}")

@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(user_create: UserCreate, user_repo: UserRepository = Depends(get_user_repo)):
    """Create a user of any role (staff accounts, other admins)."""
    try:
        return user_repo.create_user(
            user_email=user_create.user_email,
            username=user_create.username,
            password=user_create.password,
            phone_number=user_create.phone_number,
            user_type=user_create.user_type.value,
            branch=user_create.branch,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create user: {str(e)}")

@router.get("/users/{user_id}", response_model=User)
def get_user(user_id: str, user_repo: UserRepository = Depends(get_user_repo)):
    user = user_repo.get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.put("/users/{user_id}", response_model=User)
def update_user(user_id: str, update: UserUpdate, user_repo: UserRepository = Depends(get_user_repo)):
    fields = update.model_dump(exclude_none=True, mode="json")
    try:
        user = user_repo.update_user(user_id, fields)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update user: {str(e)}")
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.delete("/users/{user_id}", response_model=Message)
def delete_user(user_id: str, admin_user: User = Depends(get_admin_user),
                user_repo: UserRepository = Depends(get_user_repo)):
    if user_id == admin_user.user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete yourself")
    try:
        deleted = user_repo.delete_user(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete user: {str(e)}")
    if not deleted:
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User deleted successfully"}
