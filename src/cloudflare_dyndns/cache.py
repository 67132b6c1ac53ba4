# --- Standard library imports ---
from typing import Mapping, Optional

# --- Project imports ---
from .models import DNSRecord


class RecordCache:
    """
    Process-local map of domain → most recently located DNS record.

    Lives in memory only and starts empty on every restart. It is not
    synchronized: the controller reads and writes it from its own thread,
    never from inside a fan-out.
    """

    def __init__(self):
        self._records: dict[str, DNSRecord] = {}

    def get(self, domain: str) -> Optional[DNSRecord]:
        return self._records.get(domain)

    def set(self, domain: str, record: DNSRecord) -> None:
        self._records[domain] = record

    def refresh(self, records: Mapping[str, DNSRecord]) -> None:
        """
        Replace every entry with this cycle's locate results.

        Domains missing from `records` lose their previous entry.
        """
        self._records = dict(records)

    def __contains__(self, domain: str) -> bool:
        return domain in self._records

    def __len__(self) -> int:
        return len(self._records)
