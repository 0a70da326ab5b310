import logging
import re
from sqlmodel import Session, select, or_
from typing import List, Optional
from datetime import datetime

from gymdesk.config import settings
from gymdesk.errors import DuplicateRecord, NotFound, ValidationFailed
from gymdesk.models.attendance import TrainerAttendanceRecord
from gymdesk.models.trainee import Trainee
from gymdesk.models.trainer import Trainer
from gymdesk.schemas.trainer import TrainerCreate, TrainerUpdate
from gymdesk.services.live import live_queries, TRAINERS, TRAINEES, TRAINER_ATTENDANCE
from gymdesk.services.membership import validate_phone, check_immutable, reject_cleared_fields

logger = logging.getLogger(__name__)

def generate_unique_id(phone_number: str) -> str:
    """Trainer id from the last six digits of the phone number"""
    digits = re.sub(r"\D", "", phone_number)
    return f"{settings.TRAINER_ID_PREFIX}{digits[-6:]}"

def get_trainer(session: Session, trainer_id: int) -> Optional[Trainer]:
    """Get a trainer by ID"""
    return session.get(Trainer, trainer_id)

def get_trainers(
    session: Session,
    is_active: bool = True,
    search: Optional[str] = None
) -> List[Trainer]:
    """Get one partition (active or archived) of the trainers"""
    query = select(Trainer).where(Trainer.is_active == is_active)
    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        query = query.where(or_(
            Trainer.name.ilike(term),
            Trainer.phone_number.ilike(term),
            Trainer.unique_id.ilike(term),
            Trainer.specialization.ilike(term)
        ))
    query = query.order_by(Trainer.name)
    return list(session.exec(query).all())

def get_active_trainers(session: Session) -> List[Trainer]:
    return get_trainers(session, is_active=True)

def _check_phone_free(session: Session, phone_number: str, exclude_id: Optional[int] = None) -> None:
    query = select(Trainer).where(Trainer.phone_number == phone_number)
    for other in session.exec(query).all():
        if other.id != exclude_id:
            raise DuplicateRecord("Phone number already exists")

def create_trainer(session: Session, trainer: TrainerCreate) -> Trainer:
    """Create a new trainer after validating phone and uniqueness"""
    validate_phone(trainer.phone_number)
    _check_phone_free(session, trainer.phone_number)

    data = trainer.model_dump(exclude={"joining_date"})
    db_trainer = Trainer(
        **data,
        unique_id=generate_unique_id(trainer.phone_number),
        joining_date=trainer.joining_date or datetime.now(),
        is_active=True
    )
    session.add(db_trainer)
    session.commit()
    session.refresh(db_trainer)
    live_queries.publish(TRAINERS, session)
    return db_trainer

def update_trainer(session: Session, trainer_id: int, trainer: TrainerUpdate) -> Trainer:
    """Update a trainer; the phone number cannot change"""
    db_trainer = session.get(Trainer, trainer_id)
    if not db_trainer:
        raise NotFound("Trainer not found")

    changes = trainer.model_dump(exclude_unset=True)
    check_immutable(db_trainer.phone_number, changes.pop("phone_number", None), "Phone number")
    reject_cleared_fields(changes, nullable=("email",))
    if "name" in changes and not changes["name"]:
        raise ValidationFailed("Name is required")

    for key, value in changes.items():
        setattr(db_trainer, key, value)

    session.add(db_trainer)
    session.commit()
    session.refresh(db_trainer)
    live_queries.publish(TRAINERS, session)
    return db_trainer

def set_trainer_active(session: Session, trainer_id: int, is_active: bool) -> Trainer:
    """Archive (False) or unarchive (True) a trainer"""
    db_trainer = session.get(Trainer, trainer_id)
    if not db_trainer:
        raise NotFound("Trainer not found")

    db_trainer.is_active = is_active
    session.add(db_trainer)
    session.commit()
    session.refresh(db_trainer)
    live_queries.publish(TRAINERS, session)
    logger.info("Trainer %s %s", trainer_id, "unarchived" if is_active else "archived")
    return db_trainer

def delete_trainer(session: Session, trainer_id: int) -> int:
    """Delete a trainer, its attendance and its trainee assignments in one commit.

    Returns the number of attendance records removed.
    """
    db_trainer = session.get(Trainer, trainer_id)
    if not db_trainer:
        raise NotFound("Trainer not found")

    records = session.exec(
        select(TrainerAttendanceRecord).where(TrainerAttendanceRecord.trainer_id == trainer_id)
    ).all()
    for record in records:
        session.delete(record)

    assigned = session.exec(select(Trainee).where(Trainee.assigned_trainer_id == trainer_id)).all()
    for trainee in assigned:
        trainee.assigned_trainer_id = None
        session.add(trainee)

    session.delete(db_trainer)
    try:
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(
        "Deleted trainer %s with %d attendance records, unassigned %d trainees",
        trainer_id, len(records), len(assigned)
    )
    live_queries.publish(TRAINERS, session)
    live_queries.publish(TRAINER_ATTENDANCE, session)
    if assigned:
        live_queries.publish(TRAINEES, session)
    return len(records)
