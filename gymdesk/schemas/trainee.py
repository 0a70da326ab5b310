from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from gymdesk.models.trainee import GoalCategory, PaymentType, MembershipStatus

class TraineeBase(BaseModel):
    name: str = Field(min_length=1)
    membership_duration: int = 1
    admission_fee: float = Field(default=0, ge=0)
    special_training: bool = False
    assigned_trainer_id: Optional[int] = None
    goal_category: GoalCategory = GoalCategory.WEIGHT_LOSS
    payment_type: PaymentType = PaymentType.CASH

class TraineeCreate(TraineeBase):
    phone_number: str
    member_id: Optional[str] = None  # defaults to the phone number
    membership_start_date: Optional[datetime] = None  # defaults to now

class TraineeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = None
    member_id: Optional[str] = None
    membership_duration: Optional[int] = None
    admission_fee: Optional[float] = Field(default=None, ge=0)
    special_training: Optional[bool] = None
    assigned_trainer_id: Optional[int] = None
    goal_category: Optional[GoalCategory] = None
    payment_type: Optional[PaymentType] = None

class TraineeResponse(TraineeBase):
    id: int
    member_id: str
    phone_number: str
    membership_start_date: datetime
    membership_end_date: datetime
    is_active: bool
    created_at: datetime
    archived_at: Optional[datetime] = None
    unarchived_at: Optional[datetime] = None
    auto_archived_at: Optional[datetime] = None
    auto_archived_reason: Optional[str] = None
    status: MembershipStatus

    class Config:
        from_attributes = True

class AutoArchiveResult(BaseModel):
    archived_count: int
    archived_trainee_ids: List[int]

class MessageLink(BaseModel):
    """A prepared WhatsApp message and the wa.me link that opens it."""
    phone: str
    message: str
    url: str
