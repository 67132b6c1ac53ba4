# ─── Standard library imports ───
import logging
from enum import Enum, auto
from typing import Callable, Optional
from dataclasses import dataclass, field
from concurrent.futures import ThreadPoolExecutor

# ─── Project imports ───
from .config import Config
from .telemetry import zlog
from .logger import get_logger
from .cache import RecordCache
from .models import Zone, DNSRecord
from .cloudflare import CloudflareClient
from .utils import get_public_ip, record_fingerprint, Timer
from .exceptions import NetworkError, ProviderError, RecordNotFound


class CycleState(Enum):
    """
    Phases of one update cycle.

    • FETCHING_IP: resolve the public IP once
    • LOCATING_ALL: locate every zone's A record concurrently
    • UPDATING_ALL: patch every located record concurrently
    • DONE: terminal; reachable from any phase

    Invariants:
    • Phases advance in declaration order
    • A failed IP lookup jumps straight to DONE
    """
    FETCHING_IP = auto()
    LOCATING_ALL = auto()
    UPDATING_ALL = auto()
    DONE = auto()

    def __str__(self) -> str:
        return self.name

class ZoneOutcome(Enum):
    LOCATED = auto()
    NOT_FOUND = auto()
    UPDATED = auto()
    FAILED = auto()


@dataclass
class CycleReport:
    """Outcome of one update cycle, by domain."""
    state: CycleState = CycleState.FETCHING_IP
    public_ip: Optional[str] = None
    located: list[str] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)
    locate_failed: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    update_failed: list[str] = field(default_factory=list)
    elapsed_s: float = 0.0

    @property
    def ok(self) -> bool:
        """True when an IP was resolved and no zone failed."""
        return (
            self.public_ip is not None
            and not self.locate_failed
            and not self.update_failed
        )


def _failure_meta(error: ProviderError) -> str:
    if error.codes:
        return f"{error} [codes: {', '.join(str(c) for c in error.codes)}]"
    return str(error)


class DDNSController:
    """
    Runs one full DNS update cycle across every configured zone.

    The cycle resolves the public IP once, locates each zone's A record
    in a first fan-out, refreshes the record cache from the collected
    results, then patches every cached record in a second fan-out.
    Zones are isolated from each other: a failure in one zone's task is
    logged for that zone and never cancels, delays or alters another's.

    Nothing here raises to the caller; every outcome ends up in the
    log stream and in the returned CycleReport.
    """

    def __init__(
            self,
            config: Config,
            client: Optional[CloudflareClient] = None,
            cache: Optional[RecordCache] = None,
            ip_resolver: Optional[Callable[[Config], str]] = None,
        ):
        self.config = config
        self.zones: tuple[Zone, ...] = config.zones
        self.client = client or CloudflareClient(config)
        self.cache = cache if cache is not None else RecordCache()
        self.ip_resolver = ip_resolver or get_public_ip

        self.logger = get_logger("ddns_controller")
        self.timer = Timer(self.logger)
        self.state = CycleState.DONE

    # ─── Fan-out helper ───

    def _fan_out(self, task, jobs: list) -> list:
        """
        Run `task(*job)` for every job on a bounded thread pool and
        wait for all of them. Results come back in job order.

        Exceptions a task did not handle itself are logged with a traceback
        and reported as ZoneOutcome.FAILED for that job only.
        """
        if not jobs:
            return []

        workers = min(self.config.max_workers, len(jobs))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="zone") as pool:
            futures = [pool.submit(task, *job) for job in jobs]

        results = []
        for job, future in zip(jobs, futures):
            try:
                results.append(future.result())
            except Exception:
                zone = job[0]
                self.logger.exception(f"Unhandled error in zone task for {zone.domain}")
                results.append((ZoneOutcome.FAILED, None))
        return results

    # ─── Per-zone tasks (run on worker threads; no shared writes) ───

    def _locate(self, zone: Zone) -> tuple[ZoneOutcome, Optional[DNSRecord]]:
        try:
            record = self.client.find_a_record(zone)
        except RecordNotFound:
            zlog(self.logger, "⚠️ ", "LOCATE", "No A record found", zone.domain,
                 level=logging.WARNING)
            return ZoneOutcome.NOT_FOUND, None
        except ProviderError as e:
            zlog(self.logger, "❌", "LOCATE", "Failed", zone.domain, meta=_failure_meta(e),
                 level=logging.ERROR)
            return ZoneOutcome.FAILED, None

        zlog(self.logger, "✅", "LOCATE", "Found", zone.domain,
             meta=f"SHA256 DNS ID: {record_fingerprint(record.id)}")
        return ZoneOutcome.LOCATED, record

    def _update(self, zone: Zone, record: DNSRecord, ip: str) -> tuple[ZoneOutcome, None]:
        try:
            self.client.update_dns_record(zone, record, ip)
        except ProviderError as e:
            zlog(self.logger, "❌", "UPDATE", "Failed", zone.domain, meta=_failure_meta(e),
                 level=logging.ERROR)
            return ZoneOutcome.FAILED, None

        zlog(self.logger, "✅", "UPDATE", "Updated", zone.domain,
             meta=f"{record.content or '—'} → {ip}")
        return ZoneOutcome.UPDATED, None

    # ─── Cycle ───

    def _advance(self, report: CycleReport, state: CycleState) -> None:
        self.state = state
        report.state = state
        self.logger.debug(f"Cycle state → {state}")

    def run_cycle(self) -> CycleReport:
        """
        Execute one update cycle: FETCHING_IP → LOCATING_ALL → UPDATING_ALL → DONE.

        Returns:
            CycleReport describing every zone's outcome
        """
        report = CycleReport()
        self.timer.start_cycle()
        self.logger.info("🚀 Starting DNS update cycle")

        try:
            self._run_phases(report)
        except Exception:
            # Nothing propagates to the scheduler
            self.logger.exception("Update cycle aborted by an unexpected error")

        self._advance(report, CycleState.DONE)
        report.elapsed_s = self.timer.end_cycle()

        if report.ok:
            self.logger.info(
                f"✨ Update cycle completed successfully | updated={len(report.updated)} "
                f"skipped={len(report.not_found)}"
            )
        elif report.public_ip is not None:
            self.logger.warning(
                f"Update cycle completed with errors | updated={len(report.updated)} "
                f"locate_failed={len(report.locate_failed)} "
                f"update_failed={len(report.update_failed)}"
            )
        return report

    def _run_phases(self, report: CycleReport) -> None:
        # ─── FETCHING_IP ───
        self._advance(report, CycleState.FETCHING_IP)
        try:
            ip = self.ip_resolver(self.config)
        except NetworkError as e:
            self.logger.error(f"Public IP lookup failed; skipping this cycle: {e}")
            return
        report.public_ip = ip
        self.logger.info(f"🌐 Current Public IP: {ip}")
        self.timer.lap("IP detection")

        # ─── LOCATING_ALL ───
        self._advance(report, CycleState.LOCATING_ALL)
        self.logger.info(f"🔍 Fetching DNS records for {len(self.zones)} zone(s)...")
        located: dict[str, DNSRecord] = {}
        results = self._fan_out(self._locate, [(zone,) for zone in self.zones])

        for zone, (outcome, record) in zip(self.zones, results):
            if outcome is ZoneOutcome.LOCATED:
                located[zone.domain] = record
                report.located.append(zone.domain)
            elif outcome is ZoneOutcome.NOT_FOUND:
                report.not_found.append(zone.domain)
            else:
                report.locate_failed.append(zone.domain)

        # Fan-out has joined: single writer from here on
        self.cache.refresh(located)
        self.timer.lap("Record lookup")

        # ─── UPDATING_ALL ───
        self._advance(report, CycleState.UPDATING_ALL)
        targets = [zone for zone in self.zones if zone.domain in self.cache]
        results = self._fan_out(
            self._update,
            [(zone, self.cache.get(zone.domain), ip) for zone in targets],
        )

        for zone, (outcome, _) in zip(targets, results):
            if outcome is ZoneOutcome.UPDATED:
                report.updated.append(zone.domain)
            else:
                report.update_failed.append(zone.domain)

        self.timer.lap("Record update")
