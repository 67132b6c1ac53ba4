# --- Standard library imports ---
import time
import socket
import hashlib

# --- Third-party imports ---
import requests

# --- Project imports ---
from .config import Config
from .logger import get_logger
from .exceptions import NetworkError


# Define the logger once for the entire module
logger = get_logger("utils")

def is_valid_ip(ip: str) -> bool:
    """
    Validate an IPv4 or IPv6 address using socket.

    Args:
        ip: Address string to validate.

    Returns:
        True if the address parses as IPv4 or IPv6, False otherwise.
    """
    for family in (socket.AF_INET, socket.AF_INET6):
        try:
            socket.inet_pton(family, ip)
            return True
        except (OSError, ValueError):
            continue
    return False

def http_request(method: str, url: str, retries: int = 0, **kwargs) -> requests.Response:
    """
    Issue one HTTP request, repeating it up to `retries` extra times on
    connection errors and timeouts only. HTTP error statuses are returned
    to the caller untouched.

    Raises:
        requests.RequestException: If every attempt failed at the transport level
    """
    attempts = 1 + max(0, retries)
    for attempt in range(1, attempts + 1):
        try:
            return requests.request(method, url, **kwargs)
        except (requests.ConnectionError, requests.Timeout) as e:
            if attempt == attempts:
                raise
            logger.debug(
                f"{method} {url} failed ({e.__class__.__name__}), "
                f"attempt {attempt}/{attempts}"
            )

def get_public_ip(config: Config) -> str:
    """
    Resolve the current public IPv4/IPv6 address from the configured
    plain-text IP service.

    Raises:
        NetworkError: On transport failure, non-2xx status or an
                      empty/unparseable body
    """
    url = config.ip_service_url

    try:
        resp = http_request(
            "GET", url, retries=config.api_retries, timeout=config.api_timeout
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"IP lookup failed via {url}: {e}") from e

    ip = resp.text.strip()
    if not ip:
        raise NetworkError(f"IP lookup via {url} returned an empty body")
    if not is_valid_ip(ip):
        raise NetworkError(f"IP lookup via {url} returned an invalid address: {ip!r}")

    logger.debug(f"🌐 External IP acquired ({url})")
    return ip

def record_fingerprint(record_id: str) -> str:
    """
    SHA-256 hex digest of a record id, so logs can correlate records
    without printing the raw identifier.
    """
    return hashlib.sha256(record_id.encode("utf-8")).hexdigest()

def format_duration(seconds: float) -> str:
    """Render a duration as HH:MM:SS (hours may exceed 24)."""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"

# ============================================================
# Performance Timing Utilities (TIMING-level instrumentation)
# ============================================================

class Timer:
    def __init__(self, logger):
        self.logger = logger
        self.cycle_start = None
        self.lap_start = None

    def start_cycle(self):
        """Call once at the beginning of an update cycle."""
        now = time.perf_counter()
        self.cycle_start = now
        self.lap_start = now

    def lap(self, label: str):
        """Measure time since last lap."""
        if self.lap_start is None:
            return

        now = time.perf_counter()
        delta_ms = (now - self.lap_start) * 1000
        self.logger.timing(f"Timing | {label:<24} [{delta_ms:8.1f} ms]")
        self.lap_start = now

    def end_cycle(self) -> float:
        """End-to-end duration in seconds (0.0 if no cycle was started)."""
        if self.cycle_start is None:
            return 0.0
        total_s = time.perf_counter() - self.cycle_start
        self.logger.timing(f"Timing | {'Total run_cycle()':<24} [{total_s * 1000:8.1f} ms]")
        self.cycle_start = None
        self.lap_start = None
        return total_s
