# backend/bookshop/api/auth.py

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm # For login endpoint
from datetime import timedelta

from pydantic import BaseModel

from bookshop.core.security import verify_password, create_access_token, ACCESS_TOKEN_EXPIRE_MINUTES
from bookshop.dependencies import get_current_user, get_user_repo
from bookshop.models.user import User, UserRegister, UserType
from bookshop.repositories.user_repository import UserRepository

router = APIRouter(tags=["auth"])

# Response model for token (standard for OAuth2)
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register_user(user_create: UserRegister, user_repo: UserRepository = Depends(get_user_repo)):
    """Self-service registration; always creates a Customer account."""
    try:
        return user_repo.create_user(
            user_email=user_create.user_email,
            username=user_create.username,
            password=user_create.password,
            phone_number=user_create.phone_number,
            user_type=UserType.CUSTOMER.value,
        )
    except ValueError as e: # duplicate e-mail
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to register user: {e}")

@router.post("/token", response_model=Token)
def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends(),
                           user_repo: UserRepository = Depends(get_user_repo)):
    """Password login; the OAuth2 ``username`` field carries the e-mail address."""
    user_data = user_repo.get_user_by_email(form_data.username)

    if not user_data or not verify_password(form_data.password, user_data["password_hash"]):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        user_id=user_data["user_id"],
        user_type=user_data["user_type"],
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/users/me", response_model=User)
def read_users_me(current_user: User = Depends(get_current_user)):
    """
    Returns the details of the currently authenticated user.
    This endpoint requires a valid JWT access token.
    """
    return current_user
