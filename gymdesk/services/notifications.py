"""
Membership expiry notifications.

The expiring list is a pure derivation over the active trainees. ``ExpiryNotifier``
keeps it live: it subscribes to the active-trainee query and recomputes on every
snapshot, so nothing about expiry is ever stored.
"""
import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from sqlmodel import Session

from gymdesk.config import settings
from gymdesk.crud import trainee as trainee_crud
from gymdesk.models.trainee import Trainee
from gymdesk.schemas.notification import ExpiringMembership
from gymdesk.services.live import live_queries, LiveQueryHub, Subscription, TRAINEES

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def days_until_expiry(end_date: datetime, now: datetime) -> int:
    # Whole days, truncated toward zero
    return int((end_date - now) / ONE_DAY)


def expiring_memberships(
    trainees: Iterable[Trainee],
    now: Optional[datetime] = None,
    horizon_days: Optional[int] = None,
) -> List[ExpiringMembership]:
    now = now or datetime.now()
    horizon = settings.EXPIRY_NOTICE_DAYS if horizon_days is None else horizon_days

    expiring = []
    for trainee in trainees:
        if not trainee.is_active:
            continue
        days = days_until_expiry(trainee.membership_end_date, now)
        if 0 <= days <= horizon:
            expiring.append(ExpiringMembership(
                trainee_id=trainee.id,
                trainee_name=trainee.name,
                phone_number=trainee.phone_number,
                expiry_date=trainee.membership_end_date,
                days_until_expiry=days,
            ))
    expiring.sort(key=lambda m: (m.days_until_expiry, m.trainee_name))
    return expiring


class ExpiryNotifier:
    """Live view of memberships about to expire."""

    def __init__(self, hub: LiveQueryHub = live_queries):
        self.hub = hub
        self.subscription: Optional[Subscription] = None
        self.trainees: List[Trainee] = []
        self.memberships: List[ExpiringMembership] = []
        self.computed_at: Optional[datetime] = None

    @property
    def started(self) -> bool:
        return self.subscription is not None and self.subscription.active

    def start(self, session: Session) -> None:
        if self.started:
            return
        self.subscription = self.hub.subscribe(
            TRAINEES, trainee_crud.get_active_trainees, self._on_snapshot, session
        )
        logger.info("Expiry notifier subscribed to %s", TRAINEES)

    def stop(self) -> None:
        if self.subscription is not None:
            self.subscription.unsubscribe()
            self.subscription = None
        self.trainees = []
        self.memberships = []
        self.computed_at = None

    def _on_snapshot(self, trainees: List[Trainee]) -> None:
        # Detached copies so the view outlives the publishing session
        self.trainees = [Trainee(**trainee.model_dump()) for trainee in trainees]
        self.recompute()

    def recompute(self, now: Optional[datetime] = None) -> List[ExpiringMembership]:
        self.computed_at = now or datetime.now()
        self.memberships = expiring_memberships(self.trainees, self.computed_at)
        return self.memberships

    def expiring(self, now: Optional[datetime] = None) -> List[ExpiringMembership]:
        """Expiring list as of ``now``, derived from the held snapshot without a store read."""
        return self.recompute(now)


expiry_notifier = ExpiryNotifier()
