# backend/bookshop/dependencies.py

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from bookshop.core.security import SECRET_KEY, ALGORITHM
from bookshop.database import Database
from bookshop.models.user import User
from bookshop.repositories.branch_repository import BranchRepository
from bookshop.repositories.cart_repository import CartRepository
from bookshop.repositories.category_repository import CategoryRepository
from bookshop.repositories.favorites_repository import FavoritesRepository
from bookshop.repositories.feedback_repository import FeedbackRepository
from bookshop.repositories.offer_repository import OfferRepository
from bookshop.repositories.order_repository import OrderRepository
from bookshop.repositories.product_repository import ProductRepository
from bookshop.repositories.reservation_repository import ReservationRepository
from bookshop.repositories.user_repository import UserRepository
from bookshop.services.order_service import OrderService

# OAuth2PasswordBearer will be used to extract the token from the Authorization header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/token")


def get_db(request: Request) -> Database:
    """The pool created at startup and stored on the application state."""
    return request.app.state.db

def get_user_repo(db: Database = Depends(get_db)) -> UserRepository:
    return UserRepository(db)

def get_product_repo(db: Database = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)

def get_category_repo(db: Database = Depends(get_db)) -> CategoryRepository:
    return CategoryRepository(db)

def get_branch_repo(db: Database = Depends(get_db)) -> BranchRepository:
    return BranchRepository(db)

def get_cart_repo(db: Database = Depends(get_db)) -> CartRepository:
    return CartRepository(db)

def get_favorites_repo(db: Database = Depends(get_db)) -> FavoritesRepository:
    return FavoritesRepository(db)

def get_order_repo(db: Database = Depends(get_db)) -> OrderRepository:
    return OrderRepository(db)

def get_feedback_repo(db: Database = Depends(get_db)) -> FeedbackRepository:
    return FeedbackRepository(db)

def get_offer_repo(db: Database = Depends(get_db)) -> OfferRepository:
    return OfferRepository(db)

def get_reservation_repo(db: Database = Depends(get_db)) -> ReservationRepository:
    return ReservationRepository(db)

def get_order_service(order_repo: OrderRepository = Depends(get_order_repo),
                      user_repo: UserRepository = Depends(get_user_repo)) -> OrderService:
    return OrderService(order_repo, user_repo)


# Dependency to get the current user from the token
def get_current_user(token: str = Depends(oauth2_scheme),
                     user_repo: UserRepository = Depends(get_user_repo)) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id: str = payload.get("sub")
        if user_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user_data = user_repo.get_user_by_id(user_id)
    if user_data is None:
        raise credentials_exception
    return User(**user_data)

def get_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """Dependency to ensure only admin users can access admin endpoints"""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user
