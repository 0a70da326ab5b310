from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

class TrainerBase(BaseModel):
    name: str = Field(min_length=1)
    email: Optional[EmailStr] = None
    specialization: str = "Personal Training"
    experience: float = Field(default=0, ge=0)
    salary: float = Field(default=0, ge=0)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        # Email is optional; forms send an empty string
        if isinstance(value, str) and not value.strip():
            return None
        return value

class TrainerCreate(TrainerBase):
    phone_number: str
    joining_date: Optional[datetime] = None

class TrainerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = None
    email: Optional[EmailStr] = None
    specialization: Optional[str] = None
    experience: Optional[float] = Field(default=None, ge=0)
    salary: Optional[float] = Field(default=None, ge=0)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

class TrainerResponse(TrainerBase):
    id: int
    unique_id: str
    phone_number: str
    joining_date: datetime
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
