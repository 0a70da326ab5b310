from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

class GoalCategory(str, Enum):
    WEIGHT_LOSS = "Weight Loss"
    WEIGHT_GAIN = "Weight Gain"
    STRENGTH = "Strength"
    CONDITIONING = "Conditioning"

class PaymentType(str, Enum):
    CASH = "Cash"
    ONLINE = "Online"

class MembershipStatus(str, Enum):
    ACTIVE = "active"
    EXPIRING = "expiring"
    EXPIRED = "expired"

# Allowed membership lengths, in months
MEMBERSHIP_DURATIONS = (1, 3, 6, 12)

class Trainee(SQLModel, table=True):
    __tablename__ = "trainees"

    id: Optional[int] = Field(default=None, primary_key=True)
    member_id: str = Field(index=True)  # invoice / WhatsApp key, immutable once set
    name: str
    phone_number: str = Field(index=True)  # immutable once set

    # Membership window
    membership_duration: int  # months
    membership_start_date: datetime
    membership_end_date: datetime
    admission_fee: float = 0

    special_training: bool = False
    assigned_trainer_id: Optional[int] = Field(default=None, foreign_key="trainers.id")
    goal_category: GoalCategory = Field(default=GoalCategory.WEIGHT_LOSS)
    payment_type: PaymentType = Field(default=PaymentType.CASH)

    # Archive state
    is_active: bool = Field(default=True, index=True)
    archived_at: Optional[datetime] = None
    unarchived_at: Optional[datetime] = None
    auto_archived_at: Optional[datetime] = None
    auto_archived_reason: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.now)
