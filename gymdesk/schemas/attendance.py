from pydantic import BaseModel
from typing import Optional, List
from enum import Enum
import datetime

class AttendanceView(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

class AttendanceAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"

class MarkAttendance(BaseModel):
    date: datetime.date
    present: bool

class TimeStamp(BaseModel):
    date: datetime.date

class AttendanceRecordResponse(BaseModel):
    id: int
    trainee_id: int
    trainee_name: str
    date: datetime.date
    present: bool

    class Config:
        from_attributes = True

class TrainerAttendanceRecordResponse(BaseModel):
    id: int
    trainer_id: int
    trainer_name: str
    date: datetime.date
    present: bool
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None

    class Config:
        from_attributes = True

class AttendanceStats(BaseModel):
    total_present: int
    total_absent: int
    total_records: int

class MarkResult(BaseModel):
    action: AttendanceAction
    record: Optional[AttendanceRecordResponse] = None

class TrainerMarkResult(BaseModel):
    action: AttendanceAction
    record: Optional[TrainerAttendanceRecordResponse] = None

class AttendancePeriod(BaseModel):
    view: AttendanceView
    start_date: datetime.date
    end_date: datetime.date
    stats: AttendanceStats
    records: List[AttendanceRecordResponse]

class TrainerAttendancePeriod(BaseModel):
    view: AttendanceView
    start_date: datetime.date
    end_date: datetime.date
    stats: AttendanceStats
    records: List[TrainerAttendanceRecordResponse]
