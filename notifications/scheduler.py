"""Local reminders fired shortly before an event starts."""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, List

from config import Settings
from notifications.deeplink import event_link
from processor.lifecycle import utc_now
from processor.models import Event

logger = logging.getLogger(__name__)

NOTIFICATION_LEAD = timedelta(minutes=15)
DEFAULT_TITLE = "Your event is starting soon!"


def notification_tag(event_id: str) -> str:
    return f"event_notification_{event_id}"


@dataclass(frozen=True)
class Notification:
    """Reminder shown to the user."""
    event_id: str
    title: str
    body: str
    link: str


class WorkScheduler(ABC):
    """One-shot delayed work, cancellable by tag."""

    @abstractmethod
    def enqueue(self, tag: str, delay_seconds: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` once after ``delay_seconds``."""

    @abstractmethod
    def cancel_by_tag(self, tag: str) -> int:
        """Cancel pending work with ``tag`` and return how many were cancelled."""


class ThreadingWorkScheduler(WorkScheduler):
    """WorkScheduler running each request on a threading.Timer."""

    def __init__(self):
        self._timers: Dict[str, List[threading.Timer]] = {}
        self._lock = threading.Lock()

    def enqueue(self, tag: str, delay_seconds: float, callback: Callable[[], None]) -> None:
        timer = threading.Timer(delay_seconds, self._run, args=(tag, callback))
        timer.daemon = True
        with self._lock:
            self._timers.setdefault(tag, []).append(timer)
        timer.start()

    def cancel_by_tag(self, tag: str) -> int:
        with self._lock:
            timers = self._timers.pop(tag, [])
        for timer in timers:
            timer.cancel()
        return len(timers)

    def pending(self, tag: str) -> int:
        with self._lock:
            return len(self._timers.get(tag, []))

    def _run(self, tag: str, callback: Callable[[], None]) -> None:
        with self._lock:
            timers = self._timers.get(tag, [])
            current = threading.current_thread()
            remaining = [timer for timer in timers if timer is not current]
            if remaining:
                self._timers[tag] = remaining
            else:
                self._timers.pop(tag, None)
        try:
            callback()
        except Exception:
            logger.exception(f"Scheduled work {tag} failed")


class NotificationScheduler:
    """
    Schedules a reminder NOTIFICATION_LEAD before each event starts.

    Example usage:
        scheduler = NotificationScheduler(ThreadingWorkScheduler(), notify=print)
        scheduler.schedule_event_notification(event)
    """

    def __init__(
        self,
        work_scheduler: WorkScheduler,
        notify: Callable[[Notification], None],
        clock: Callable[[], datetime] = utc_now,
        lead: timedelta = NOTIFICATION_LEAD
    ):
        self.work_scheduler = work_scheduler
        self.notify = notify
        self.clock = clock
        self.lead = lead

    def schedule_event_notification(self, event: Event) -> bool:
        """
        Schedule a reminder for ``event``.

        Nothing is scheduled when the reminder instant is not in the future,
        for instance an event starting in less than the lead time.

        Args:
            event: Event to be reminded of

        Returns:
            True if a reminder was scheduled
        """
        delay = (event.date - self.lead - self.clock()).total_seconds()
        if delay <= 0:
            logger.debug(f"Skipping notification for {event.event_id}, delay {delay}s")
            return False

        title = event.title or DEFAULT_TITLE
        event_id = event.event_id
        self.work_scheduler.enqueue(
            notification_tag(event_id),
            delay,
            lambda: self._fire(event_id, title)
        )
        logger.info(f"Scheduled notification for {event_id} in {delay:.0f}s")
        return True

    def cancel_event_notification(self, event_id: str) -> None:
        cancelled = self.work_scheduler.cancel_by_tag(notification_tag(event_id))
        logger.info(f"Cancelled {cancelled} notification(s) for {event_id}")

    def _fire(self, event_id: str, title: str) -> None:
        self.notify(
            Notification(
                event_id=event_id,
                title=title,
                body=f"Starts in {int(self.lead.total_seconds() // 60)} minutes.",
                link=event_link(event_id)
            )
        )


def build_notification_scheduler(
    settings: Settings,
    notify: Callable[[Notification], None]
) -> NotificationScheduler:
    """Create a NotificationScheduler on threading timers using the configured lead."""
    return NotificationScheduler(
        ThreadingWorkScheduler(),
        notify=notify,
        lead=timedelta(minutes=settings.notification_lead_minutes)
    )
