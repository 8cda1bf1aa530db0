from fastapi import APIRouter, HTTPException, status, Depends
from typing import List

from bookshop.dependencies import get_admin_user, get_branch_repo
from bookshop.models.branch import Branch, BranchCreate
from bookshop.repositories.branch_repository import BranchRepository

router = APIRouter(tags=["branches"])

@router.get("/branches", response_model=List[Branch])
def get_all_branches_api(branch_repo: BranchRepository = Depends(get_branch_repo)):
    try:
        return branch_repo.get_all_branches()
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to fetch branches: {e}")

@router.get("/branches/{branch_id}", response_model=Branch)
def get_branch_api(branch_id: str, branch_repo: BranchRepository = Depends(get_branch_repo)):
    branch = branch_repo.get_branch_by_id(branch_id)
    if not branch:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Branch with ID {branch_id} not found.")
    return branch

@router.post("/branches", response_model=Branch, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(get_admin_user)])
def create_branch_api(branch: BranchCreate, branch_repo: BranchRepository = Depends(get_branch_repo)):
    try:
        return branch_repo.create_branch(**branch.model_dump())
    except ValueError as e: # duplicate branch name
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to create branch: {e}")

@router.put("/branches/{branch_id}", response_model=Branch, dependencies=[Depends(get_admin_user)])
def update_branch_api(branch_id: str, branch: BranchCreate, branch_repo: BranchRepository = Depends(get_branch_repo)):
    try:
        updated = branch_repo.update_branch(branch_id, **branch.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to update branch: {e}")
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Branch with ID {branch_id} not found.")
    return updated

@router.delete("/branches/{branch_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(get_admin_user)])
def delete_branch_api(branch_id: str, branch_repo: BranchRepository = Depends(get_branch_repo)):
    try:
        deleted = branch_repo.delete_branch(branch_id)
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to delete branch: {e}")
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Branch with ID {branch_id} not found.")
