from fastapi import APIRouter, HTTPException, status, Depends, Query
from typing import List, Optional

from bookshop.dependencies import get_admin_user, get_product_repo
from bookshop.models.product import Product, ProductCreate
from bookshop.repositories.product_repository import ProductRepository

router = APIRouter(tags=["products"])

@router.get("/products", response_model=List[Product])
def get_all_products_api(category: Optional[str] = Query(None), product_repo: ProductRepository = Depends(get_product_repo)):
    try:
        return product_repo.get_all_products(category_name=category)
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to fetch products: {e}")

@router.get("/products/{product_id}", response_model=Product)
def get_product_api(product_id: str, product_repo: ProductRepository = Depends(get_product_repo)):
    try:
        product = product_repo.get_product_by_id(product_id)
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to fetch product: {e}")
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Product with ID {product_id} not found.")
    return product

@router.post("/products", response_model=Product, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(get_admin_user)])
def create_product_api(product: ProductCreate, product_repo: ProductRepository = Depends(get_product_repo)):
    try:
        new_product_data = product_repo.create_product(**product.model_dump())
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to create product: {e}")
    if not new_product_data:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve new product after insertion.")
    return new_product_data

@router.put("/products/{product_id}", response_model=Product, dependencies=[Depends(get_admin_user)])
def update_product_api(product_id: str, product: ProductCreate, # ProductCreate can serve as update payload
                       product_repo: ProductRepository = Depends(get_product_repo)):
    try:
        updated_product = product_repo.update_product(product_id, **product.model_dump())
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to update product: {e}")
    if not updated_product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Product with ID {product_id} not found.")
    return updated_product

@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(get_admin_user)])
def delete_product_api(product_id: str, product_repo: ProductRepository = Depends(get_product_repo)):
    try:
        deleted = product_repo.delete_product(product_id)
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to delete product: {e}")
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Product with ID {product_id} not found.")
