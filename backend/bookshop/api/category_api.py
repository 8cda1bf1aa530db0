from fastapi import APIRouter, HTTPException, status, Depends
from typing import List

from bookshop.dependencies import get_admin_user, get_category_repo
from bookshop.models.category import Category, CategoryCreate
from bookshop.repositories.category_repository import CategoryRepository

router = APIRouter(tags=["categories"])

@router.get("/categories", response_model=List[Category])
def get_all_categories_api(category_repo: CategoryRepository = Depends(get_category_repo)):
    try:
        return category_repo.get_all_categories()
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to fetch categories: {e}")

@router.get("/categories/{category_id}", response_model=Category)
def get_category_api(category_id: str, category_repo: CategoryRepository = Depends(get_category_repo)):
    category = category_repo.get_category_by_id(category_id)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Category with ID {category_id} not found.")
    return category

@router.post("/categories", response_model=Category, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(get_admin_user)])
def create_category_api(category: CategoryCreate, category_repo: CategoryRepository = Depends(get_category_repo)):
    try:
        return category_repo.create_category(**category.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to create category: {e}")

@router.put("/categories/{category_id}", response_model=Category, dependencies=[Depends(get_admin_user)])
def update_category_api(category_id: str, category: CategoryCreate,
                        category_repo: CategoryRepository = Depends(get_category_repo)):
    try:
        updated = category_repo.update_category(category_id, **category.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to update category: {e}")
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Category with ID {category_id} not found.")
    return updated

@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(get_admin_user)])
def delete_category_api(category_id: str, category_repo: CategoryRepository = Depends(get_category_repo)):
    try:
        deleted = category_repo.delete_category(category_id)
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to delete category: {e}")
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Category with ID {category_id} not found.")
