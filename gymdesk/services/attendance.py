"""
Attendance toggles and period statistics.

Records are keyed by (subject, calendar day). Only today's records can be
created or changed; the check lives here so every caller goes through it.

Trainee toggle cycle for a given day::

    no record --mark(s)--> s
    s --mark(s)--> no record
    s --mark(not s)--> not s   (updated in place)
"""
import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlmodel import Session

from gymdesk.crud import attendance as attendance_crud
from gymdesk.errors import NotFound, PreconditionFailed
from gymdesk.models.attendance import AttendanceRecord, TrainerAttendanceRecord
from gymdesk.models.trainee import Trainee
from gymdesk.models.trainer import Trainer
from gymdesk.schemas.attendance import AttendanceAction, AttendanceStats, AttendanceView

logger = logging.getLogger(__name__)


def require_today(on_date: date, today: Optional[date] = None) -> None:
    today = today or date.today()
    if on_date != today:
        raise PreconditionFailed("Attendance can only be marked for today.")


def period_range(view: AttendanceView, anchor: date) -> Tuple[date, date]:
    """Inclusive first and last day of the period containing ``anchor``."""
    if view == AttendanceView.DAILY:
        return anchor, anchor
    if view == AttendanceView.WEEKLY:
        start = anchor - timedelta(days=anchor.weekday())  # Monday
        return start, start + timedelta(days=6)
    if view == AttendanceView.MONTHLY:
        start = anchor.replace(day=1)
        return start, start + relativedelta(months=1) - timedelta(days=1)
    return anchor.replace(month=1, day=1), anchor.replace(month=12, day=31)


def attendance_stats(records: Iterable, start: date, end: date) -> AttendanceStats:
    in_range = [r for r in records if start <= r.date <= end]
    present = sum(1 for r in in_range if r.present)
    return AttendanceStats(
        total_present=present,
        total_absent=len(in_range) - present,
        total_records=len(in_range),
    )


def _toggle(session: Session, record, present: bool, create) -> Tuple[AttendanceAction, Optional[object]]:
    if record is None:
        return AttendanceAction.CREATED, create()
    if record.present == present:
        attendance_crud.delete_record(session, record)
        return AttendanceAction.DELETED, None
    return AttendanceAction.UPDATED, attendance_crud.update_record(session, record, present=present)


def mark_trainee_attendance(
    session: Session,
    trainee_id: int,
    on_date: date,
    present: bool,
    today: Optional[date] = None,
) -> Tuple[AttendanceAction, Optional[AttendanceRecord]]:
    require_today(on_date, today)
    trainee = session.get(Trainee, trainee_id)
    if not trainee:
        raise NotFound("Trainee not found")

    record = attendance_crud.get_trainee_record(session, trainee_id, on_date)
    action, record = _toggle(
        session,
        record,
        present,
        lambda: attendance_crud.create_trainee_record(session, trainee, on_date, present),
    )
    logger.info("Trainee %s attendance on %s: %s", trainee_id, on_date, action.value)
    return action, record


def _get_trainer(session: Session, trainer_id: int) -> Trainer:
    trainer = session.get(Trainer, trainer_id)
    if not trainer:
        raise NotFound("Trainer not found")
    return trainer


def mark_trainer_attendance(
    session: Session,
    trainer_id: int,
    on_date: date,
    present: bool,
    today: Optional[date] = None,
) -> Tuple[AttendanceAction, Optional[TrainerAttendanceRecord]]:
    require_today(on_date, today)
    trainer = _get_trainer(session, trainer_id)

    record = attendance_crud.get_trainer_record(session, trainer_id, on_date)
    action, record = _toggle(
        session,
        record,
        present,
        lambda: attendance_crud.create_trainer_record(session, trainer, on_date, present),
    )
    logger.info("Trainer %s attendance on %s: %s", trainer_id, on_date, action.value)
    return action, record


def check_in(
    session: Session,
    trainer_id: int,
    on_date: date,
    now: Optional[datetime] = None,
) -> Tuple[AttendanceAction, TrainerAttendanceRecord]:
    """Stamp the check-in time; always leaves the trainer marked present."""
    now = now or datetime.now()
    require_today(on_date, now.date())
    trainer = _get_trainer(session, trainer_id)
    stamp = now.strftime("%H:%M")

    record = attendance_crud.get_trainer_record(session, trainer_id, on_date)
    if record is None:
        record = attendance_crud.create_trainer_record(session, trainer, on_date, True, check_in_time=stamp)
        return AttendanceAction.CREATED, record
    return AttendanceAction.UPDATED, attendance_crud.update_record(
        session, record, present=True, check_in_time=stamp
    )


def check_out(
    session: Session,
    trainer_id: int,
    on_date: date,
    now: Optional[datetime] = None,
) -> Tuple[AttendanceAction, TrainerAttendanceRecord]:
    """Stamp the check-out time without touching ``present``."""
    now = now or datetime.now()
    require_today(on_date, now.date())
    _get_trainer(session, trainer_id)

    record = attendance_crud.get_trainer_record(session, trainer_id, on_date)
    if record is None or not record.present:
        raise PreconditionFailed("Check-out needs a check-in or present record for today.")
    return AttendanceAction.UPDATED, attendance_crud.update_record(
        session, record, check_out_time=now.strftime("%H:%M")
    )
