from fastapi import APIRouter, HTTPException, status, Depends, Query
from typing import List

from bookshop.dependencies import get_admin_user, get_offer_repo
from bookshop.models.offer import Offer, OfferCreate
from bookshop.repositories.offer_repository import OfferRepository

router = APIRouter(tags=["offers"])

@router.get("/offers", response_model=List[Offer])
def get_all_offers_api(active: bool = Query(False), offer_repo: OfferRepository = Depends(get_offer_repo)):
    """``?active=true`` returns only enabled offers that are valid right now."""
    try:
        return offer_repo.get_all_offers(active_only=active)
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to fetch offers: {e}")

@router.get("/offers/{offer_id}", response_model=Offer)
def get_offer_api(offer_id: str, offer_repo: OfferRepository = Depends(get_offer_repo)):
    offer = offer_repo.get_offer_by_id(offer_id)
    if not offer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Offer not found")
    return offer

@router.post("/offers", response_model=Offer, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(get_admin_user)])
def create_offer_api(offer: OfferCreate, offer_repo: OfferRepository = Depends(get_offer_repo)):
    try:
        return offer_repo.create_offer(**offer.model_dump())
    except ValueError as e: # duplicate title
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to create offer: {e}")

@router.put("/offers/{offer_id}", response_model=Offer, dependencies=[Depends(get_admin_user)])
def update_offer_api(offer_id: str, offer: OfferCreate, offer_repo: OfferRepository = Depends(get_offer_repo)):
    try:
        updated = offer_repo.update_offer(offer_id, **offer.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to update offer: {e}")
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Offer not found")
    return updated

@router.delete("/offers/{offer_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(get_admin_user)])
def delete_offer_api(offer_id: str, offer_repo: OfferRepository = Depends(get_offer_repo)):
    try:
        deleted = offer_repo.delete_offer(offer_id)
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to delete offer: {e}")
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Offer not found")
