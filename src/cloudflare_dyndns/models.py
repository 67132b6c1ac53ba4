# --- Standard library imports ---
from dataclasses import dataclass


@dataclass(frozen=True)
class Zone:
    """A configured (domain, zone_id) pair. Never mutated after startup."""
    domain: str
    zone_id: str


@dataclass(frozen=True)
class DNSRecord:
    """
    Immutable snapshot of a Cloudflare DNS record as returned by the
    list endpoint. Only the fields the updater relies on are kept.
    """
    id: str
    name: str
    type: str
    content: str
    proxied: bool = False
    ttl: int = 1

    @classmethod
    def from_api(cls, data: dict) -> "DNSRecord":
        """
        Build a record from one entry of the provider's `result` array.

        Raises:
            KeyError: If a required field is missing
        """
        return cls(
            id=data["id"],
            name=data["name"],
            type=data["type"],
            content=data.get("content", ""),
            proxied=bool(data.get("proxied", False)),
            ttl=int(data.get("ttl", 1)),
        )
