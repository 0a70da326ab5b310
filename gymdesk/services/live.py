"""
Live query subscriptions.

A subscriber registers a query on a channel (one per collection). Every
committed write publishes its channel, and each subscriber on that channel
receives the complete current result of its query. There is no incremental
merge: replaying a publish simply reproduces the same snapshot.
"""
import logging
from typing import Any, Callable, Dict, List

from sqlmodel import Session

logger = logging.getLogger(__name__)

Query = Callable[[Session], List[Any]]
Callback = Callable[[List[Any]], None]

TRAINEES = "trainees"
TRAINERS = "trainers"
ATTENDANCE = "attendance"
TRAINER_ATTENDANCE = "trainer_attendance"
WORKOUT_PLANS = "workout_plans"
DIET_PLANS = "diet_plans"


class Subscription:
    def __init__(self, hub: "LiveQueryHub", channel: str, query: Query, callback: Callback):
        self.hub = hub
        self.channel = channel
        self.query = query
        self.callback = callback
        self.active = True

    def deliver(self, session: Session) -> None:
        snapshot = list(self.query(session))
        try:
            self.callback(snapshot)
        except Exception:
            # A broken listener must not fail the write that triggered it
            logger.exception("Subscriber on channel %s failed", self.channel)

    def unsubscribe(self) -> None:
        if self.active:
            self.hub._remove(self)
            self.active = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unsubscribe()


class LiveQueryHub:
    def __init__(self):
        self._channels: Dict[str, List[Subscription]] = {}

    def subscribe(self, channel: str, query: Query, callback: Callback, session: Session) -> Subscription:
        """Register ``query`` on ``channel`` and deliver the current snapshot right away."""
        subscription = Subscription(self, channel, query, callback)
        self._channels.setdefault(channel, []).append(subscription)
        subscription.deliver(session)
        return subscription

    def publish(self, channel: str, session: Session) -> None:
        for subscription in list(self._channels.get(channel, [])):
            subscription.deliver(session)

    def subscriber_count(self, channel: str) -> int:
        return len(self._channels.get(channel, []))

    def clear(self) -> None:
        for subscriptions in self._channels.values():
            for subscription in subscriptions:
                subscription.active = False
        self._channels.clear()

    def _remove(self, subscription: Subscription) -> None:
        subscriptions = self._channels.get(subscription.channel, [])
        if subscription in subscriptions:
            subscriptions.remove(subscription)


live_queries = LiveQueryHub()
