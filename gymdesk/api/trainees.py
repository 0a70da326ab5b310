from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session
from typing import List, Optional
from datetime import datetime

from gymdesk.api.errors import handle_errors
from gymdesk.crud import trainee as trainee_crud
from gymdesk.database import get_session
from gymdesk.models.trainee import Trainee
from gymdesk.schemas.trainee import (
    AutoArchiveResult,
    MessageLink,
    TraineeCreate,
    TraineeResponse,
    TraineeUpdate,
)
from gymdesk.services.membership import membership_status
from gymdesk.services.messaging import invoice_message, whatsapp_link, whatsapp_digits

router = APIRouter(prefix="/trainees", tags=["trainees"])

def to_response(trainee: Trainee, now: Optional[datetime] = None) -> TraineeResponse:
    """Attach the derived membership status"""
    return TraineeResponse(
        **trainee.model_dump(),
        status=membership_status(trainee.membership_end_date, now)
    )

def _get_or_404(session: Session, trainee_id: int) -> Trainee:
    trainee = trainee_crud.get_trainee(session, trainee_id)
    if not trainee:
        raise HTTPException(status_code=404, detail="Trainee not found")
    return trainee

@router.get("/", response_model=List[TraineeResponse])
async def list_trainees(
    archived: bool = Query(False, description="List archived instead of active trainees"),
    search: Optional[str] = Query(None, description="Match name, phone or member ID"),
    session: Session = Depends(get_session)
) -> List[TraineeResponse]:
    """List one partition of the trainees"""
    with handle_errors("load trainees", session):
        trainees = trainee_crud.get_trainees(session, is_active=not archived, search=search)
    now = datetime.now()
    return [to_response(t, now) for t in trainees]

@router.post("/", response_model=TraineeResponse, status_code=status.HTTP_201_CREATED)
async def create_trainee(
    trainee: TraineeCreate,
    session: Session = Depends(get_session)
) -> TraineeResponse:
    """Add a trainee; the membership window starts now unless a start date is given"""
    with handle_errors("add trainee", session):
        db_trainee = trainee_crud.create_trainee(session, trainee)
    return to_response(db_trainee)

@router.post("/auto-archive", response_model=AutoArchiveResult)
async def auto_archive(session: Session = Depends(get_session)) -> AutoArchiveResult:
    """Archive memberships that expired more than the grace period ago"""
    with handle_errors("auto-archive trainees", session):
        archived_ids = trainee_crud.auto_archive_expired(session)
    return AutoArchiveResult(archived_count=len(archived_ids), archived_trainee_ids=archived_ids)

@router.get("/{trainee_id}", response_model=TraineeResponse)
async def get_trainee(trainee_id: int, session: Session = Depends(get_session)) -> TraineeResponse:
    return to_response(_get_or_404(session, trainee_id))

@router.patch("/{trainee_id}", response_model=TraineeResponse)
async def update_trainee(
    trainee_id: int,
    trainee: TraineeUpdate,
    session: Session = Depends(get_session)
) -> TraineeResponse:
    with handle_errors("update trainee", session):
        db_trainee = trainee_crud.update_trainee(session, trainee_id, trainee)
    return to_response(db_trainee)

@router.post("/{trainee_id}/archive", response_model=TraineeResponse)
async def archive_trainee(trainee_id: int, session: Session = Depends(get_session)) -> TraineeResponse:
    with handle_errors("archive trainee", session):
        db_trainee = trainee_crud.set_trainee_active(session, trainee_id, False)
    return to_response(db_trainee)

@router.post("/{trainee_id}/unarchive", response_model=TraineeResponse)
async def unarchive_trainee(trainee_id: int, session: Session = Depends(get_session)) -> TraineeResponse:
    with handle_errors("unarchive trainee", session):
        db_trainee = trainee_crud.set_trainee_active(session, trainee_id, True)
    return to_response(db_trainee)

@router.delete("/{trainee_id}")
async def delete_trainee(trainee_id: int, session: Session = Depends(get_session)):
    """Permanently delete a trainee with its attendance and plans"""
    with handle_errors("delete trainee", session):
        trainee_crud.delete_trainee(session, trainee_id)
    return {"message": "Trainee deleted successfully"}

@router.get("/{trainee_id}/invoice", response_model=MessageLink)
async def trainee_invoice(trainee_id: int, session: Session = Depends(get_session)) -> MessageLink:
    """Invoice text ready to send over WhatsApp"""
    trainee = _get_or_404(session, trainee_id)
    message = invoice_message(trainee)
    return MessageLink(
        phone=whatsapp_digits(trainee.phone_number),
        message=message,
        url=whatsapp_link(trainee.phone_number, message)
    )
