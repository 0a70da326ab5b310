from sqlmodel import Session, select
from typing import List, Optional
from datetime import date

from gymdesk.models.attendance import AttendanceRecord, TrainerAttendanceRecord
from gymdesk.models.trainee import Trainee
from gymdesk.models.trainer import Trainer
from gymdesk.services.live import live_queries, ATTENDANCE, TRAINER_ATTENDANCE

def _channel(record) -> str:
    return TRAINER_ATTENDANCE if isinstance(record, TrainerAttendanceRecord) else ATTENDANCE

def get_trainee_record(session: Session, trainee_id: int, on_date: date) -> Optional[AttendanceRecord]:
    """Get a trainee's record for one calendar day"""
    query = select(AttendanceRecord).where(
        AttendanceRecord.trainee_id == trainee_id,
        AttendanceRecord.date == on_date
    )
    return session.exec(query).first()

def get_trainer_record(session: Session, trainer_id: int, on_date: date) -> Optional[TrainerAttendanceRecord]:
    """Get a trainer's record for one calendar day"""
    query = select(TrainerAttendanceRecord).where(
        TrainerAttendanceRecord.trainer_id == trainer_id,
        TrainerAttendanceRecord.date == on_date
    )
    return session.exec(query).first()

def get_trainee_records(
    session: Session,
    start_date: date,
    end_date: date,
    trainee_id: Optional[int] = None
) -> List[AttendanceRecord]:
    """Get trainee attendance within an inclusive date range"""
    query = select(AttendanceRecord).where(
        AttendanceRecord.date >= start_date,
        AttendanceRecord.date <= end_date
    )
    if trainee_id is not None:
        query = query.where(AttendanceRecord.trainee_id == trainee_id)
    query = query.order_by(AttendanceRecord.date, AttendanceRecord.trainee_name)
    return list(session.exec(query).all())

def get_trainer_records(
    session: Session,
    start_date: date,
    end_date: date,
    trainer_id: Optional[int] = None
) -> List[TrainerAttendanceRecord]:
    """Get trainer attendance within an inclusive date range"""
    query = select(TrainerAttendanceRecord).where(
        TrainerAttendanceRecord.date >= start_date,
        TrainerAttendanceRecord.date <= end_date
    )
    if trainer_id is not None:
        query = query.where(TrainerAttendanceRecord.trainer_id == trainer_id)
    query = query.order_by(TrainerAttendanceRecord.date, TrainerAttendanceRecord.trainer_name)
    return list(session.exec(query).all())

def create_trainee_record(session: Session, trainee: Trainee, on_date: date, present: bool) -> AttendanceRecord:
    record = AttendanceRecord(
        trainee_id=trainee.id,
        trainee_name=trainee.name,
        date=on_date,
        present=present
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    live_queries.publish(ATTENDANCE, session)
    return record

def create_trainer_record(
    session: Session,
    trainer: Trainer,
    on_date: date,
    present: bool,
    check_in_time: Optional[str] = None
) -> TrainerAttendanceRecord:
    record = TrainerAttendanceRecord(
        trainer_id=trainer.id,
        trainer_name=trainer.name,
        date=on_date,
        present=present,
        check_in_time=check_in_time
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    live_queries.publish(TRAINER_ATTENDANCE, session)
    return record

def update_record(session: Session, record, **fields):
    """Update fields of an attendance record in place"""
    for key, value in fields.items():
        setattr(record, key, value)
    session.add(record)
    session.commit()
    session.refresh(record)
    live_queries.publish(_channel(record), session)
    return record

def delete_record(session: Session, record) -> None:
    channel = _channel(record)
    session.delete(record)
    session.commit()
    live_queries.publish(channel, session)
