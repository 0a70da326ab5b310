from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from typing import Optional
from datetime import date

from gymdesk.api.errors import handle_errors
from gymdesk.crud import attendance as attendance_crud
from gymdesk.database import get_session
from gymdesk.schemas.attendance import (
    AttendanceRecordResponse,
    AttendancePeriod,
    AttendanceView,
    MarkAttendance,
    MarkResult,
    TimeStamp,
    TrainerAttendancePeriod,
    TrainerAttendanceRecordResponse,
    TrainerMarkResult,
)
from gymdesk.services import attendance as attendance_service

router = APIRouter(prefix="/attendance", tags=["attendance"])

def _trainee_record(record):
    return AttendanceRecordResponse.model_validate(record) if record else None

def _trainer_record(record):
    return TrainerAttendanceRecordResponse.model_validate(record) if record else None

@router.get("/trainees", response_model=AttendancePeriod)
async def trainee_attendance(
    view: AttendanceView = Query(AttendanceView.DAILY),
    on: Optional[date] = Query(None, alias="date", description="Any day inside the period; defaults to today"),
    trainee_id: Optional[int] = None,
    session: Session = Depends(get_session)
) -> AttendancePeriod:
    """Trainee attendance for the period containing the given day, with counts"""
    start, end = attendance_service.period_range(view, on or date.today())
    with handle_errors("load attendance", session):
        records = attendance_crud.get_trainee_records(session, start, end, trainee_id)
    return AttendancePeriod(
        view=view,
        start_date=start,
        end_date=end,
        stats=attendance_service.attendance_stats(records, start, end),
        records=[AttendanceRecordResponse.model_validate(r) for r in records]
    )

@router.post("/trainees/{trainee_id}", response_model=MarkResult)
async def mark_trainee(
    trainee_id: int,
    mark: MarkAttendance,
    session: Session = Depends(get_session)
) -> MarkResult:
    """Toggle a trainee's attendance for today"""
    with handle_errors("mark attendance", session):
        action, record = attendance_service.mark_trainee_attendance(
            session, trainee_id, mark.date, mark.present
        )
    return MarkResult(action=action, record=_trainee_record(record))

@router.get("/trainers", response_model=TrainerAttendancePeriod)
async def trainer_attendance(
    view: AttendanceView = Query(AttendanceView.DAILY),
    on: Optional[date] = Query(None, alias="date", description="Any day inside the period; defaults to today"),
    trainer_id: Optional[int] = None,
    session: Session = Depends(get_session)
) -> TrainerAttendancePeriod:
    start, end = attendance_service.period_range(view, on or date.today())
    with handle_errors("load trainer attendance", session):
        records = attendance_crud.get_trainer_records(session, start, end, trainer_id)
    return TrainerAttendancePeriod(
        view=view,
        start_date=start,
        end_date=end,
        stats=attendance_service.attendance_stats(records, start, end),
        records=[TrainerAttendanceRecordResponse.model_validate(r) for r in records]
    )

@router.post("/trainers/{trainer_id}", response_model=TrainerMarkResult)
async def mark_trainer(
    trainer_id: int,
    mark: MarkAttendance,
    session: Session = Depends(get_session)
) -> TrainerMarkResult:
    with handle_errors("mark trainer attendance", session):
        action, record = attendance_service.mark_trainer_attendance(
            session, trainer_id, mark.date, mark.present
        )
    return TrainerMarkResult(action=action, record=_trainer_record(record))

@router.post("/trainers/{trainer_id}/check-in", response_model=TrainerMarkResult)
async def trainer_check_in(
    trainer_id: int,
    stamp: TimeStamp,
    session: Session = Depends(get_session)
) -> TrainerMarkResult:
    with handle_errors("check in", session):
        action, record = attendance_service.check_in(session, trainer_id, stamp.date)
    return TrainerMarkResult(action=action, record=_trainer_record(record))

@router.post("/trainers/{trainer_id}/check-out", response_model=TrainerMarkResult)
async def trainer_check_out(
    trainer_id: int,
    stamp: TimeStamp,
    session: Session = Depends(get_session)
) -> TrainerMarkResult:
    with handle_errors("check out", session):
        action, record = attendance_service.check_out(session, trainer_id, stamp.date)
    return TrainerMarkResult(action=action, record=_trainer_record(record))
