# backend/bookshop/api/favorites_api.py

from fastapi import APIRouter, HTTPException, Depends
from typing import List

from bookshop.dependencies import get_current_user, get_favorites_repo, get_product_repo
from bookshop.models.product import Product
from bookshop.models.user import User
from bookshop.repositories.favorites_repository import FavoritesRepository
from bookshop.repositories.product_repository import ProductRepository

router = APIRouter(tags=["favorites"])

@router.get("/favorites", response_model=List[Product])
def get_favorites(current_user: User = Depends(get_current_user),
                  favorites_repo: FavoritesRepository = Depends(get_favorites_repo)):
    """Get all favorite products for the user"""
    try:
        return favorites_repo.get_favorites(current_user.user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get favorites: {str(e)}")

@router.post("/favorites/add/{product_id}")
def add_favorite(product_id: str, current_user: User = Depends(get_current_user),
                 favorites_repo: FavoritesRepository = Depends(get_favorites_repo),
                 product_repo: ProductRepository = Depends(get_product_repo)):
    """Add product to favorites"""
    if not product_repo.product_exists(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    try:
        success = favorites_repo.add_favorite(current_user.user_id, product_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to add to favorites: {str(e)}")
    if not success:
        raise HTTPException(status_code=500, detail="Failed to add to favorites")
    return {"success": True, "message": "Product added to favorites"}

@router.delete("/favorites/remove/{product_id}")
def remove_favorite(product_id: str, current_user: User = Depends(get_current_user),
                    favorites_repo: FavoritesRepository = Depends(get_favorites_repo)):
    """Remove product from favorites"""
    try:
        success = favorites_repo.remove_favorite(current_user.user_id, product_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to remove from favorites: {str(e)}")
    if not success:
        raise HTTPException(status_code=404, detail="Product not found in favorites")
    return {"success": True, "message": "Product removed from favorites"}

@router.post("/favorites/toggle/{product_id}")
def toggle_favorite(product_id: str, current_user: User = Depends(get_current_user),
                    favorites_repo: FavoritesRepository = Depends(get_favorites_repo),
                    product_repo: ProductRepository = Depends(get_product_repo)):
    """Toggle product in favorites (add if not exists, remove if exists)"""
    try:
        if favorites_repo.is_favorite(current_user.user_id, product_id):
            favorites_repo.remove_favorite(current_user.user_id, product_id)
            return {"success": True, "action": "removed", "isFavorite": False}

        if not product_repo.product_exists(product_id):
            raise HTTPException(status_code=404, detail="Product not found")
        favorites_repo.add_favorite(current_user.user_id, product_id)
        return {"success": True, "action": "added", "isFavorite": True}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to toggle favorite: {str(e)}")

@router.get("/favorites/check/{product_id}")
def check_favorite(product_id: str, current_user: User = Depends(get_current_user),
                   favorites_repo: FavoritesRepository = Depends(get_favorites_repo)):
    try:
        return {"isFavorite": favorites_repo.is_favorite(current_user.user_id, product_id)}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to check favorite: {str(e)}")
