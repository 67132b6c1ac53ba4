import logging
import pytest

from cloudflare_dyndns.config import Config
from cloudflare_dyndns.models import Zone


# --- Mock Constants ---
API_BASE_URL = "https://api.cloudflare.com/client/v4"
IP_SERVICE_URL = "https://api.ipify.org"

HOME = Zone(domain="home.starbase.com", zone_id="aaa111")
VPN = Zone(domain="vpn.starbase.net", zone_id="bbb222")


def list_url(zone: Zone) -> str:
    return f"{API_BASE_URL}/zones/{zone.zone_id}/dns_records"

def record_url(zone: Zone, record_id: str) -> str:
    return f"{list_url(zone)}/{record_id}"

def record_json(record_id: str, name: str, type_: str = "A", content: str = "1.2.3.4") -> dict:
    return {
        "id": record_id,
        "name": name,
        "type": type_,
        "content": content,
        "proxied": True,
        "ttl": 1,
        "modified_on": "2025-01-01T00:00:00Z",
    }

def list_body(*records: dict) -> dict:
    return {"success": True, "errors": [], "messages": [], "result": list(records)}


# ========
# FIXTURES
# ========
@pytest.fixture
def config():
    return Config(
        account_email="ops@starbase.com",
        api_key="mock_key",
        bearer_token="mock_token",
        zones=(HOME, VPN),
        api_base_url=API_BASE_URL,
        ip_service_url=IP_SERVICE_URL,
    )

@pytest.fixture
def restore_logging():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
