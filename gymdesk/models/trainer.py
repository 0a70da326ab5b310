from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

class Trainer(SQLModel, table=True):
    __tablename__ = "trainers"

    id: Optional[int] = Field(default=None, primary_key=True)
    unique_id: str = Field(index=True)  # prefix + last 6 digits of phone
    name: str
    phone_number: str = Field(unique=True, index=True)
    email: Optional[str] = None
    specialization: str = "Personal Training"
    experience: float = 0  # years
    salary: float = 0
    joining_date: datetime = Field(default_factory=datetime.now)

    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=datetime.now)
