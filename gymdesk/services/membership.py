"""
Membership lifecycle rules.

Windows are computed by calendar-month arithmetic, status is derived from the
end date on every read, and create/update payloads are validated here before
anything is written.
"""
import math
import re
from datetime import datetime, timedelta
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from gymdesk.config import settings
from gymdesk.errors import ValidationFailed, DuplicateRecord
from gymdesk.models.trainee import Trainee, MembershipStatus, MEMBERSHIP_DURATIONS

PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")
MIN_MEMBER_ID_LENGTH = 3
ONE_DAY = timedelta(days=1)


def compute_membership_window(start_date: datetime, duration_months: int) -> datetime:
    """Return the end of a membership starting at ``start_date``.

    Months are calendar months, so Jan 31 + 1 month lands on the last day of
    February rather than a fixed number of days later.
    """
    validate_duration(duration_months)
    return start_date + relativedelta(months=duration_months)


def recompute_on_duration_change(original: Trainee, new_duration: int) -> datetime:
    """End date for an edited duration, anchored on the original start date."""
    return compute_membership_window(original.membership_start_date, new_duration)


def membership_status(end_date: datetime, now: Optional[datetime] = None) -> MembershipStatus:
    now = now or datetime.now()
    diff_days = math.ceil((end_date - now) / ONE_DAY)
    if diff_days < 0:
        return MembershipStatus.EXPIRED
    if diff_days <= settings.EXPIRING_STATUS_DAYS:
        return MembershipStatus.EXPIRING
    return MembershipStatus.ACTIVE


def auto_archive_cutoff(end_date: datetime) -> datetime:
    return end_date + relativedelta(months=settings.AUTO_ARCHIVE_GRACE_MONTHS)


def is_due_for_auto_archive(trainee: Trainee, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now()
    return trainee.is_active and now > auto_archive_cutoff(trainee.membership_end_date)


def validate_duration(duration_months: int) -> None:
    if duration_months not in MEMBERSHIP_DURATIONS:
        allowed = ", ".join(str(d) for d in MEMBERSHIP_DURATIONS)
        raise ValidationFailed(f"Membership duration must be one of {allowed} months")


def validate_phone(phone_number: str) -> None:
    if not PHONE_PATTERN.match(phone_number or ""):
        raise ValidationFailed("Invalid phone number format")


def validate_member_id(member_id: str) -> None:
    if len((member_id or "").strip()) < MIN_MEMBER_ID_LENGTH:
        raise ValidationFailed(f"Member ID must be at least {MIN_MEMBER_ID_LENGTH} characters")


def check_unique(
    existing: Iterable[Trainee],
    member_id: str,
    phone_number: str,
    exclude_id: Optional[int] = None,
) -> None:
    """Reject a member id or phone already used by any other trainee.

    ``existing`` must cover active and archived trainees alike.
    """
    member_id = member_id.strip()
    for other in existing:
        if exclude_id is not None and other.id == exclude_id:
            continue
        if other.member_id.strip() == member_id:
            raise DuplicateRecord("Member ID already exists")
        if other.phone_number == phone_number:
            raise DuplicateRecord("Phone number already exists")


def reject_cleared_fields(changes: dict, nullable: Iterable[str] = ()) -> None:
    """Reject an explicit null for any field that must always hold a value."""
    cleared = sorted(key for key, value in changes.items() if value is None and key not in nullable)
    if cleared:
        raise ValidationFailed(f"These fields cannot be empty: {', '.join(cleared)}")


def check_immutable(current: Optional[str], requested: Optional[str], label: str) -> None:
    if requested is None or not current:
        return
    if requested.strip() != current.strip():
        raise ValidationFailed(f"{label} cannot be changed once set")


def validate_trainer_assignment(special_training: bool, assigned_trainer_id: Optional[int], trainer_exists) -> None:
    """``trainer_exists`` is a callable taking a trainer id."""
    if not special_training:
        return
    if not assigned_trainer_id:
        raise ValidationFailed("A trainer must be assigned for special training")
    if not trainer_exists(assigned_trainer_id):
        raise ValidationFailed("Assigned trainer does not exist")


def validate_trainee(
    member_id: str,
    phone_number: str,
    duration_months: int,
    special_training: bool,
    assigned_trainer_id: Optional[int],
    existing: Iterable[Trainee],
    trainer_exists,
    exclude_id: Optional[int] = None,
) -> None:
    """Run every create/update rule; raises before anything is written."""
    validate_member_id(member_id)
    validate_phone(phone_number)
    validate_duration(duration_months)
    check_unique(existing, member_id, phone_number, exclude_id=exclude_id)
    validate_trainer_assignment(special_training, assigned_trainer_id, trainer_exists)
