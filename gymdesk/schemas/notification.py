from pydantic import BaseModel
from typing import List
from datetime import datetime

class ExpiringMembership(BaseModel):
    trainee_id: int
    trainee_name: str
    phone_number: str
    expiry_date: datetime
    days_until_expiry: int

class ExpiringMemberships(BaseModel):
    has_notifications: bool
    memberships: List[ExpiringMembership]
