# backend/bookshop/api/cart_api.py

from fastapi import APIRouter, HTTPException, Depends

from bookshop.dependencies import get_cart_repo, get_current_user, get_product_repo
from bookshop.models.cart import Cart, CartItemIn
from bookshop.models.user import User
from bookshop.repositories.cart_repository import CartRepository
from bookshop.repositories.product_repository import ProductRepository

router = APIRouter(tags=["cart"])

@router.get("/cart", response_model=Cart)
def get_cart(current_user: User = Depends(get_current_user), cart_repo: CartRepository = Depends(get_cart_repo)):
    """Get all items in the user's cart with the current total"""
    try:
        cart_items = cart_repo.get_cart_items(current_user.user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get cart: {str(e)}")
    total = sum(item["product_price"] * item["quantity"] for item in cart_items)
    return Cart(products=cart_items, total_amount=total)

@router.post("/cart/add")
def add_to_cart(item: CartItemIn, current_user: User = Depends(get_current_user),
                cart_repo: CartRepository = Depends(get_cart_repo),
                product_repo: ProductRepository = Depends(get_product_repo)):
    """Add a quantity of a product; an existing line is incremented"""
    if item.quantity <= 0:
        raise HTTPException(status_code=400, detail="quantity must be greater than 0")
    if not product_repo.product_exists(item.product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    try:
        success = cart_repo.add_to_cart(current_user.user_id, item.product_id, item.quantity)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to add to cart: {str(e)}")
    if not success:
        raise HTTPException(status_code=500, detail="Failed to add item to cart")
    return {"success": True, "message": "Item added to cart"}

@router.post("/cart/update")
def update_cart_item(item: CartItemIn, current_user: User = Depends(get_current_user),
                     cart_repo: CartRepository = Depends(get_cart_repo),
                     product_repo: ProductRepository = Depends(get_product_repo)):
    """Set a line's quantity; zero or less removes the line"""
    try:
        if item.quantity <= 0:
            cart_repo.remove_cart_item(current_user.user_id, item.product_id)
            return {"success": True, "message": "Item removed from cart"}

        if not product_repo.product_exists(item.product_id):
            raise HTTPException(status_code=404, detail="Product not found")
        success = cart_repo.set_quantity(current_user.user_id, item.product_id, item.quantity)
        if success:
            return {"success": True, "message": "Cart updated"}
        else:
            raise HTTPException(status_code=500, detail="Failed to update cart")
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update cart: {str(e)}")

@router.delete("/cart/remove/{product_id}")
def remove_from_cart(product_id: str, current_user: User = Depends(get_current_user),
                     cart_repo: CartRepository = Depends(get_cart_repo)):
    """Remove item from cart"""
    try:
        success = cart_repo.remove_cart_item(current_user.user_id, product_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to remove from cart: {str(e)}")
    if not success:
        raise HTTPException(status_code=404, detail="Item not found in cart")
    return {"success": True, "message": "Item removed from cart"}

@router.delete("/cart/clear")
def clear_cart(current_user: User = Depends(get_current_user), cart_repo: CartRepository = Depends(get_cart_repo)):
    try:
        removed = cart_repo.clear_cart(current_user.user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to clear cart: {str(e)}")
    return {"success": True, "message": "Cart cleared", "removed": removed}

@router.get("/cart/count")
def get_cart_count(current_user: User = Depends(get_current_user), cart_repo: CartRepository = Depends(get_cart_repo)):
    """Total units in the cart, for the header badge"""
    try:
        return {"count": cart_repo.get_cart_count(current_user.user_id)}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get cart count: {str(e)}")
