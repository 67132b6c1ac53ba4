# --- Standard library imports ---
import os
import json
import logging
from dataclasses import dataclass

# --- Third-party imports ---
from dotenv import load_dotenv

# --- Project imports ---
from .models import Zone
from .exceptions import ConfigError


# --- Defaults (overridable through the environment) ---
DEFAULT_API_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_IP_SERVICE_URL = "https://api.ipify.org"
DEFAULT_API_TIMEOUT = 8      # seconds (per HTTP call)
DEFAULT_API_RETRIES = 0      # the next daily cycle is the retry mechanism
DEFAULT_RECORD_TTL = 1       # 1 means 'automatic' to Cloudflare
DEFAULT_RECORD_COMMENT = "Auto-updated"
DEFAULT_MAX_WORKERS = 8

# --- Cloudflare TTL bounds (NOT user configurable) ---
CLOUDFLARE_MIN_TTL = 60
CLOUDFLARE_MAX_TTL = 86400

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be true or false, got {value!r}")

def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None

def parse_zones(raw: str) -> tuple[Zone, ...]:
    """
    Parse the CLOUDFLARE_ZONES value into an ordered tuple of zones.

    Two formats are accepted:
        JSON:    [{"domain": "home.example.com", "zoneId": "abc123"}, ...]
        Compact: home.example.com=abc123,vpn.example.com=def456

    Raises:
        ConfigError: If the value cannot be parsed
    """
    raw = (raw or "").strip()
    if not raw:
        return ()

    if raw.startswith("["):
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"CLOUDFLARE_ZONES is not valid JSON: {e}") from e

        zones = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise ConfigError(f"Zone entry must be an object: {entry!r}")
            domain = entry.get("domain")
            zone_id = entry.get("zoneId", entry.get("zone_id"))
            if not isinstance(domain, str) or not isinstance(zone_id, str):
                raise ConfigError(f"Zone entry needs string domain and zoneId: {entry!r}")
            domain, zone_id = domain.strip(), zone_id.strip()
            if not domain or not zone_id:
                raise ConfigError(f"Zone entry needs domain and zoneId: {entry!r}")
            zones.append(Zone(domain=domain, zone_id=zone_id))
        return tuple(zones)

    zones = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        domain, sep, zone_id = pair.partition("=")
        if not sep or not domain.strip() or not zone_id.strip():
            raise ConfigError(f"Zone entry must look like domain=zone_id: {pair!r}")
        zones.append(Zone(domain=domain.strip(), zone_id=zone_id.strip()))
    return tuple(zones)


@dataclass(frozen=True)
class Config:
    """
    Centralized, immutable runtime configuration.

    Loaded once at startup; nothing here changes for the lifetime
    of the process.
    """

    # --- Credentials ---
    account_email: str
    api_key: str
    bearer_token: str

    # --- Zones (ordered, unique by domain) ---
    zones: tuple[Zone, ...]

    # --- Endpoints ---
    api_base_url: str = DEFAULT_API_BASE_URL
    ip_service_url: str = DEFAULT_IP_SERVICE_URL

    # --- Network Policy ---
    api_timeout: int = DEFAULT_API_TIMEOUT
    api_retries: int = DEFAULT_API_RETRIES
    max_workers: int = DEFAULT_MAX_WORKERS

    # --- Record Update Policy ---
    record_ttl: int = DEFAULT_RECORD_TTL
    record_proxied: bool = True
    record_comment: str = DEFAULT_RECORD_COMMENT

    # --- Observability Policy ---
    log_level: str = "INFO"
    log_timing: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """
        Build a Config from the process environment (and .env, if present).

        Raises:
            ConfigError: If a required value is missing or any value is invalid
        """
        load_dotenv()

        config = cls(
            account_email=os.getenv("CLOUDFLARE_EMAIL", "").strip(),
            api_key=os.getenv("CLOUDFLARE_API_KEY", "").strip(),
            bearer_token=os.getenv("CLOUDFLARE_API_TOKEN", "").strip(),
            zones=parse_zones(os.getenv("CLOUDFLARE_ZONES", "")),
            api_base_url=os.getenv("CLOUDFLARE_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            ip_service_url=os.getenv("PUBLIC_IP_URL", DEFAULT_IP_SERVICE_URL),
            api_timeout=_get_int("API_TIMEOUT", DEFAULT_API_TIMEOUT),
            api_retries=_get_int("API_RETRIES", DEFAULT_API_RETRIES),
            max_workers=_get_int("MAX_WORKERS", DEFAULT_MAX_WORKERS),
            record_ttl=_get_int("RECORD_TTL", DEFAULT_RECORD_TTL),
            record_proxied=_get_bool("RECORD_PROXIED", True),
            record_comment=os.getenv("RECORD_COMMENT", DEFAULT_RECORD_COMMENT),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
            log_timing=_get_bool("LOG_TIMING", False),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """
        Fail fast on configurations the daemon cannot run correctly with.
        """
        missing = [
            name for name, value in (
                ("CLOUDFLARE_EMAIL", self.account_email),
                ("CLOUDFLARE_API_KEY", self.api_key),
                ("CLOUDFLARE_API_TOKEN", self.bearer_token),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")

        if not self.zones:
            raise ConfigError("CLOUDFLARE_ZONES must list at least one zone")

        # Each locate task owns exactly one cache key
        domains = [zone.domain for zone in self.zones]
        duplicates = sorted({d for d in domains if domains.count(d) > 1})
        if duplicates:
            raise ConfigError(f"Duplicate zone domains: {', '.join(duplicates)}")

        if self.record_ttl != 1 and not (
            CLOUDFLARE_MIN_TTL <= self.record_ttl <= CLOUDFLARE_MAX_TTL
        ):
            raise ConfigError(
                f"RECORD_TTL must be 1 (automatic) or between "
                f"{CLOUDFLARE_MIN_TTL} and {CLOUDFLARE_MAX_TTL}, got {self.record_ttl}"
            )

        if self.api_timeout <= 0:
            raise ConfigError(f"API_TIMEOUT must be positive, got {self.api_timeout}")

        if self.api_retries < 0:
            raise ConfigError(f"API_RETRIES cannot be negative, got {self.api_retries}")

        if self.max_workers < 1:
            raise ConfigError(f"MAX_WORKERS must be at least 1, got {self.max_workers}")

        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigError(f"Unknown LOG_LEVEL {self.log_level!r}")
