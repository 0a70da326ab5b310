from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field
from typing import Optional
import datetime

class AttendanceRecord(SQLModel, table=True):
    """One present/absent fact per trainee per calendar day."""
    __tablename__ = "attendance"
    __table_args__ = (UniqueConstraint("trainee_id", "date", name="uq_attendance_trainee_date"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    trainee_id: int = Field(index=True)
    trainee_name: str  # snapshot at creation
    date: datetime.date = Field(index=True)
    present: bool

class TrainerAttendanceRecord(SQLModel, table=True):
    __tablename__ = "trainer_attendance"
    __table_args__ = (UniqueConstraint("trainer_id", "date", name="uq_trainer_attendance_trainer_date"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    trainer_id: int = Field(index=True)
    trainer_name: str  # snapshot at creation
    date: datetime.date = Field(index=True)
    present: bool
    check_in_time: Optional[str] = None  # "HH:mm"
    check_out_time: Optional[str] = None  # "HH:mm"
