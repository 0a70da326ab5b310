import logging
from sqlmodel import Session, select, or_
from typing import List, Optional
from datetime import datetime

from gymdesk.config import settings
from gymdesk.errors import NotFound
from gymdesk.models.attendance import AttendanceRecord
from gymdesk.models.plan import WorkoutPlan, DietPlan
from gymdesk.models.trainee import Trainee
from gymdesk.models.trainer import Trainer
from gymdesk.schemas.trainee import TraineeCreate, TraineeUpdate
from gymdesk.services import membership
from gymdesk.services.live import live_queries, TRAINEES, ATTENDANCE, WORKOUT_PLANS, DIET_PLANS

logger = logging.getLogger(__name__)

def auto_archive_reason() -> str:
    months = settings.AUTO_ARCHIVE_GRACE_MONTHS
    return f"Membership expired for more than {months} month{'' if months == 1 else 's'}"

def get_trainee(session: Session, trainee_id: int) -> Optional[Trainee]:
    """Get a trainee by ID"""
    return session.get(Trainee, trainee_id)

def get_trainees(
    session: Session,
    is_active: bool = True,
    search: Optional[str] = None
) -> List[Trainee]:
    """Get one partition (active or archived) of the trainees"""
    query = select(Trainee).where(Trainee.is_active == is_active)
    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        query = query.where(or_(
            Trainee.name.ilike(term),
            Trainee.phone_number.ilike(term),
            Trainee.member_id.ilike(term)
        ))
    query = query.order_by(Trainee.name)
    return list(session.exec(query).all())

def get_active_trainees(session: Session) -> List[Trainee]:
    return get_trainees(session, is_active=True)

def get_all_trainees(session: Session) -> List[Trainee]:
    """Every trainee, active and archived; used for uniqueness checks"""
    return list(session.exec(select(Trainee)).all())

def _trainer_exists(session: Session):
    return lambda trainer_id: session.get(Trainer, trainer_id) is not None

def _plans_for(session: Session, trainee_id: int) -> list:
    plans = list(session.exec(select(WorkoutPlan).where(WorkoutPlan.trainee_id == trainee_id)).all())
    plans += list(session.exec(select(DietPlan).where(DietPlan.trainee_id == trainee_id)).all())
    return plans

def _publish_trainee_change(session: Session, plans_touched: bool = False) -> None:
    live_queries.publish(TRAINEES, session)
    if plans_touched:
        live_queries.publish(WORKOUT_PLANS, session)
        live_queries.publish(DIET_PLANS, session)

def create_trainee(session: Session, trainee: TraineeCreate, now: Optional[datetime] = None) -> Trainee:
    """Validate and create a trainee with a freshly computed membership window"""
    member_id = (trainee.member_id or trainee.phone_number).strip()
    membership.validate_trainee(
        member_id,
        trainee.phone_number,
        trainee.membership_duration,
        trainee.special_training,
        trainee.assigned_trainer_id,
        get_all_trainees(session),
        _trainer_exists(session)
    )

    now = now or datetime.now()
    start_date = trainee.membership_start_date or now
    data = trainee.model_dump(exclude={"member_id", "membership_start_date"})
    if not trainee.special_training:
        data["assigned_trainer_id"] = None

    db_trainee = Trainee(
        **data,
        member_id=member_id,
        membership_start_date=start_date,
        membership_end_date=membership.compute_membership_window(start_date, trainee.membership_duration),
        is_active=True,
        created_at=now
    )
    session.add(db_trainee)
    session.commit()
    session.refresh(db_trainee)
    _publish_trainee_change(session)
    return db_trainee

def update_trainee(session: Session, trainee_id: int, trainee: TraineeUpdate) -> Trainee:
    """Update a trainee.

    Member id and phone are immutable once set. A duration change recomputes
    the end date from the original start date. A rename is copied onto the
    trainee's plans.
    """
    db_trainee = session.get(Trainee, trainee_id)
    if not db_trainee:
        raise NotFound("Trainee not found")

    changes = trainee.model_dump(exclude_unset=True)
    membership.check_immutable(db_trainee.member_id, changes.pop("member_id", None), "Member ID")
    membership.check_immutable(db_trainee.phone_number, changes.pop("phone_number", None), "Phone number")
    membership.reject_cleared_fields(changes, nullable=("assigned_trainer_id",))

    special_training = changes.get("special_training", db_trainee.special_training)
    membership.validate_trainee(
        db_trainee.member_id,
        db_trainee.phone_number,
        changes.get("membership_duration") or db_trainee.membership_duration,
        special_training,
        changes.get("assigned_trainer_id", db_trainee.assigned_trainer_id),
        get_all_trainees(session),
        _trainer_exists(session),
        exclude_id=trainee_id
    )
    if not special_training:
        changes["assigned_trainer_id"] = None

    new_duration = changes.get("membership_duration")
    if new_duration is not None and new_duration != db_trainee.membership_duration:
        changes["membership_end_date"] = membership.recompute_on_duration_change(db_trainee, new_duration)

    renamed = "name" in changes and changes["name"] != db_trainee.name
    for key, value in changes.items():
        setattr(db_trainee, key, value)
    session.add(db_trainee)

    if renamed:
        for plan in _plans_for(session, trainee_id):
            plan.trainee_name = db_trainee.name
            session.add(plan)

    session.commit()
    session.refresh(db_trainee)
    _publish_trainee_change(session, plans_touched=renamed)
    return db_trainee

def _set_active(session: Session, db_trainee: Trainee, is_active: bool, now: datetime) -> None:
    db_trainee.is_active = is_active
    if is_active:
        db_trainee.unarchived_at = now
    else:
        db_trainee.archived_at = now
    session.add(db_trainee)
    for plan in _plans_for(session, db_trainee.id):
        plan.is_active = is_active
        session.add(plan)

def set_trainee_active(session: Session, trainee_id: int, is_active: bool) -> Trainee:
    """Archive (False) or unarchive (True) a trainee together with its plans"""
    db_trainee = session.get(Trainee, trainee_id)
    if not db_trainee:
        raise NotFound("Trainee not found")

    _set_active(session, db_trainee, is_active, datetime.now())
    session.commit()
    session.refresh(db_trainee)
    logger.info("Trainee %s %s", trainee_id, "unarchived" if is_active else "archived")
    _publish_trainee_change(session, plans_touched=True)
    return db_trainee

def delete_trainee(session: Session, trainee_id: int) -> None:
    """Delete a trainee with its attendance and plans in one commit"""
    db_trainee = session.get(Trainee, trainee_id)
    if not db_trainee:
        raise NotFound("Trainee not found")

    records = session.exec(select(AttendanceRecord).where(AttendanceRecord.trainee_id == trainee_id)).all()
    plans = _plans_for(session, trainee_id)
    for row in list(records) + plans:
        session.delete(row)
    session.delete(db_trainee)
    try:
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(
        "Deleted trainee %s with %d attendance records and %d plans",
        trainee_id, len(records), len(plans)
    )
    _publish_trainee_change(session, plans_touched=bool(plans))
    live_queries.publish(ATTENDANCE, session)

def auto_archive_expired(session: Session, now: Optional[datetime] = None) -> List[int]:
    """Archive active trainees whose membership ended more than the grace period ago"""
    now = now or datetime.now()
    due = [t for t in get_active_trainees(session) if membership.is_due_for_auto_archive(t, now)]
    if not due:
        return []

    reason = auto_archive_reason()
    for db_trainee in due:
        _set_active(session, db_trainee, False, now)
        db_trainee.auto_archived_at = now
        db_trainee.auto_archived_reason = reason
    session.commit()

    archived_ids = [t.id for t in due]
    logger.info("Auto-archived %d trainees: %s", len(archived_ids), archived_ids)
    _publish_trainee_change(session, plans_touched=True)
    return archived_ids
