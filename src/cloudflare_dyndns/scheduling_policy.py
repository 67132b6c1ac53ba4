# --- Standard library imports ---
import threading
from typing import Callable, Optional
from datetime import datetime, timedelta, timezone

# --- Project imports ---
from .logger import get_logger
from .utils import format_duration


# --- Scheduling policy constants ---
SECONDS_PER_DAY = 86400

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def seconds_until_midnight_utc(now: Optional[datetime] = None) -> float:
    """
    Seconds from `now` until the next 00:00:00 UTC.

    Computed as midnight_UTC_of(now + 1 day) - now, so the result is
    always in (0, 86400]; exactly at midnight it is a full day. Naive
    datetimes are treated as UTC; aware ones are converted to UTC first.
    """
    if now is None:
        now = utc_now()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)

    tomorrow = now + timedelta(days=1)
    midnight = tomorrow.replace(hour=0, minute=0, second=0, microsecond=0)
    return (midnight - now).total_seconds()


class DailyScheduler:
    """
    Runs an update cycle immediately, then once per day at 00:00 UTC, forever.

    Invariants:
      - A failed cycle is logged and never changes the schedule
      - The delay is recomputed from the clock after every cycle, so the
        cadence stays anchored to UTC midnight
      - No jitter and no catch-up for runs missed while the process was down
      - stop() interrupts the sleep; a cycle is never started afterwards
    """

    def __init__(
            self,
            run_cycle: Callable[[], object],
            clock: Callable[[], datetime] = utc_now,
        ):
        self.run_cycle = run_cycle
        self.clock = clock
        self.logger = get_logger("scheduling_policy")
        self._stop_event = threading.Event()

    def next_delay(self) -> float:
        return seconds_until_midnight_utc(self.clock())

    def stop(self) -> None:
        """Request termination. Safe to call from a signal handler."""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def _run_once(self) -> None:
        try:
            self.run_cycle()
        except Exception as e:
            self.logger.exception(f"Unhandled exception during update cycle: {e}")

    def run_forever(self) -> None:
        self.logger.info("🚀 Cloudflare DynDNS updater started - running 24/7")
        self.logger.info("⏰ Configured to run now and at 00:00 UTC daily")

        self.logger.info("▶️  Running initial update...")
        self._run_once()

        while True:
            delay = self.next_delay()
            self.logger.info(f"⏳ Next run in {format_duration(delay)}")

            if self._stop_event.wait(timeout=delay):
                self.logger.info("🛑 Stop requested; scheduler exiting")
                break

            self._run_once()
