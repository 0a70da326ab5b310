from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session
from typing import List, Optional

from gymdesk.api.errors import handle_errors
from gymdesk.crud import trainer as trainer_crud
from gymdesk.database import get_session
from gymdesk.schemas.trainer import TrainerCreate, TrainerResponse, TrainerUpdate
from gymdesk.schemas.trainee import MessageLink
from gymdesk.services.messaging import trainer_contract_message, whatsapp_digits, whatsapp_link

router = APIRouter(prefix="/trainers", tags=["trainers"])

@router.get("/", response_model=List[TrainerResponse])
async def list_trainers(
    archived: bool = Query(False, description="List archived instead of active trainers"),
    search: Optional[str] = Query(None, description="Match name, phone, trainer ID or specialization"),
    session: Session = Depends(get_session)
) -> List[TrainerResponse]:
    with handle_errors("load trainers", session):
        return trainer_crud.get_trainers(session, is_active=not archived, search=search)

@router.post("/", response_model=TrainerResponse, status_code=status.HTTP_201_CREATED)
async def create_trainer(
    trainer: TrainerCreate,
    session: Session = Depends(get_session)
) -> TrainerResponse:
    with handle_errors("add trainer", session):
        return trainer_crud.create_trainer(session, trainer)

@router.get("/{trainer_id}", response_model=TrainerResponse)
async def get_trainer(trainer_id: int, session: Session = Depends(get_session)) -> TrainerResponse:
    trainer = trainer_crud.get_trainer(session, trainer_id)
    if not trainer:
        raise HTTPException(status_code=404, detail="Trainer not found")
    return trainer

@router.patch("/{trainer_id}", response_model=TrainerResponse)
async def update_trainer(
    trainer_id: int,
    trainer: TrainerUpdate,
    session: Session = Depends(get_session)
) -> TrainerResponse:
    with handle_errors("update trainer", session):
        return trainer_crud.update_trainer(session, trainer_id, trainer)

@router.post("/{trainer_id}/archive", response_model=TrainerResponse)
async def archive_trainer(trainer_id: int, session: Session = Depends(get_session)) -> TrainerResponse:
    with handle_errors("archive trainer", session):
        return trainer_crud.set_trainer_active(session, trainer_id, False)

@router.post("/{trainer_id}/unarchive", response_model=TrainerResponse)
async def unarchive_trainer(trainer_id: int, session: Session = Depends(get_session)) -> TrainerResponse:
    with handle_errors("unarchive trainer", session):
        return trainer_crud.set_trainer_active(session, trainer_id, True)

@router.delete("/{trainer_id}")
async def delete_trainer(trainer_id: int, session: Session = Depends(get_session)):
    """Delete a trainer and all of its attendance records"""
    with handle_errors("delete trainer", session):
        removed = trainer_crud.delete_trainer(session, trainer_id)
    return {"message": "Trainer deleted successfully", "attendance_records_deleted": removed}

@router.get("/{trainer_id}/contract", response_model=MessageLink)
async def trainer_contract(trainer_id: int, session: Session = Depends(get_session)) -> MessageLink:
    """Contract summary ready to send over WhatsApp"""
    trainer = trainer_crud.get_trainer(session, trainer_id)
    if not trainer:
        raise HTTPException(status_code=404, detail="Trainer not found")
    message = trainer_contract_message(trainer)
    return MessageLink(
        phone=whatsapp_digits(trainer.phone_number),
        message=message,
        url=whatsapp_link(trainer.phone_number, message)
    )
