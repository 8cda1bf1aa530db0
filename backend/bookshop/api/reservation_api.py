from fastapi import APIRouter, HTTPException, status, Depends, Query
from typing import List, Optional

from bookshop.dependencies import get_admin_user, get_reservation_repo
from bookshop.models.reservation import Reservation, ReservationCreate, ReservationStatusUpdate
from bookshop.repositories.reservation_repository import ReservationRepository

router = APIRouter(tags=["reservations"])

@router.post("/reservations", response_model=Reservation, status_code=status.HTTP_201_CREATED)
def create_reservation(reservation: ReservationCreate,
                       reservation_repo: ReservationRepository = Depends(get_reservation_repo)):
    """Book a visit; every new reservation starts as Pending"""
    try:
        return reservation_repo.create_reservation(**reservation.model_dump())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create reservation: {str(e)}")

@router.get("/reservations", response_model=List[Reservation], dependencies=[Depends(get_admin_user)])
def get_reservations(branch: Optional[str] = Query(None),
                     reservation_repo: ReservationRepository = Depends(get_reservation_repo)):
    try:
        return reservation_repo.get_reservations(branch=branch)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch reservations: {str(e)}")

@router.put("/reservations/{reservation_id}/status", response_model=Reservation,
            dependencies=[Depends(get_admin_user)])
def update_reservation_status(reservation_id: str, update: ReservationStatusUpdate,
                              reservation_repo: ReservationRepository = Depends(get_reservation_repo)):
    try:
        updated = reservation_repo.update_status(reservation_id, update.status.value)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update reservation: {str(e)}")
    if not updated:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return updated
