from fastapi import APIRouter, HTTPException, status, Depends
from typing import List

from bookshop.dependencies import get_admin_user, get_feedback_repo
from bookshop.models.feedback import Feedback, FeedbackCreate, FeedbackResponse
from bookshop.repositories.feedback_repository import FeedbackRepository

router = APIRouter(tags=["feedback"])

@router.post("/feedback", response_model=Feedback, status_code=status.HTTP_201_CREATED)
def submit_feedback(feedback: FeedbackCreate, feedback_repo: FeedbackRepository = Depends(get_feedback_repo)):
    try:
        return feedback_repo.create_feedback(**feedback.model_dump())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to submit feedback: {str(e)}")

@router.get("/feedback", response_model=List[Feedback], dependencies=[Depends(get_admin_user)])
def get_all_feedback(feedback_repo: FeedbackRepository = Depends(get_feedback_repo)):
    try:
        return feedback_repo.get_all_feedback()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch feedback: {str(e)}")

@router.put("/feedback/{feedback_id}/response", response_model=Feedback, dependencies=[Depends(get_admin_user)])
def respond_to_feedback(feedback_id: str, response: FeedbackResponse,
                        feedback_repo: FeedbackRepository = Depends(get_feedback_repo)):
    try:
        updated = feedback_repo.respond(feedback_id, response.staff_response)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to save response: {str(e)}")
    if not updated:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return updated
