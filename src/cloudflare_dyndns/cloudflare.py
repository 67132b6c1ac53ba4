# --- Standard library imports ---
import json

# --- Third-party imports ---
import requests

# --- Project imports ---
from .config import Config
from .models import Zone, DNSRecord
from .logger import get_logger
from .utils import http_request
from .exceptions import ProviderError, RecordNotFound


# Cloudflare's default dns_records page size
RECORDS_PER_PAGE = 100


class CloudflareClient:
    """
    Handles all communication and logic specific to the Cloudflare DNS API.

    The client holds no per-zone state, so a single instance can be shared
    by every worker thread of a fan-out.
    """

    def __init__(self, config: Config):
        self.logger = get_logger("cloudflare")

        # Configuration
        self.api_base_url = config.api_base_url
        self.timeout = config.api_timeout
        self.retries = config.api_retries

        # Pre-calculated and necessary instance variables
        self.headers = {
            "Authorization": f"Bearer {config.bearer_token}",
            "Content-Type": "application/json",
        }
        self.update_headers = {
            **self.headers,
            "X-Auth-Email": config.account_email,
            "X-Auth-Key": config.api_key,
        }
        self.record_type = "A"   # Fixed type

        #ttl: TTL
        #Time To Live (TTL) of the DNS record in seconds. Setting to 1 means 'automatic'.
        self.ttl = config.record_ttl
        self.proxied = config.record_proxied
        self.comment = config.record_comment

    # Private helper for URL construction
    def _build_resource_url(self, zone_id: str, record_id: str | None = None) -> str:
        """
        Constructs the Cloudflare DNS resource URL for a zone.

        Args:
            zone_id: Zone identifier
            record_id: Record identifier; omit for the collection endpoint

        Returns:
            The complete API endpoint URL
        """
        if not zone_id:
            raise ValueError("zone_id must be provided")

        base_path = f"{self.api_base_url}/zones/{zone_id}/dns_records"

        if record_id is None:
            return base_path

        if not record_id:
            raise ValueError("record_id cannot be empty for single resource operations")
        return base_path + f"/{record_id}"

    @staticmethod
    def _error_summary(data: dict) -> tuple[str, list]:
        errors = data.get("errors") or []
        messages = [str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors]
        codes = [e.get("code") for e in errors if isinstance(e, dict) and "code" in e]
        return ", ".join(messages) or "unknown error", codes

    def _fetch_page(self, zone_id: str, params: dict) -> dict:
        """
        GET one page of a zone's record listing and return the decoded body.

        Raises:
            ProviderError: On transport failure, non-2xx status, a non-JSON
                           body or a payload with success=false
        """
        list_url = self._build_resource_url(zone_id)
        self.logger.debug(f"Initiating record pull → {list_url} {params}")

        try:
            resp = http_request(
                "GET", list_url,
                retries=self.retries, headers=self.headers,
                params=params, timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ProviderError(f"API GET request failed for zone {zone_id}: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not isinstance(data, dict):
            raise ProviderError(
                f"API GET for zone {zone_id} returned HTTP {resp.status_code} "
                f"with a non-JSON body",
                status_code=resp.status_code,
            )

        if not resp.ok or not data.get("success"):
            message, codes = self._error_summary(data)
            raise ProviderError(
                f"Cloudflare API error for zone {zone_id} "
                f"(HTTP {resp.status_code}): {message}",
                status_code=resp.status_code,
                codes=codes,
            )

        self.logger.debug(f"Live JSON received:\n{json.dumps(data, indent=2)}")
        return data

    def list_dns_records(
        self,
        zone_id: str,
        name: str | None = None,
        record_type: str | None = None,
    ) -> list[DNSRecord]:
        """
        Fetch every DNS record of a zone, in provider order, following
        `result_info.total_pages` until the last page.

        Args:
            zone_id: Zone identifier
            name: Optional server-side filter on the record name
            record_type: Optional server-side filter on the record type

        Raises:
            ProviderError: On transport failure, non-2xx status, a non-JSON
                           body, a payload with success=false or a malformed record
        """
        filters = {}
        if name:
            filters["name"] = name
        if record_type:
            filters["type"] = record_type

        records = []
        page = 1
        while True:
            data = self._fetch_page(
                zone_id, {**filters, "page": page, "per_page": RECORDS_PER_PAGE}
            )

            try:
                records.extend(DNSRecord.from_api(item) for item in data.get("result") or [])
                total_pages = int((data.get("result_info") or {}).get("total_pages") or 1)
            except (KeyError, TypeError, ValueError) as e:
                raise ProviderError(f"Malformed record listing in zone {zone_id}: {e!r}") from e

            if page >= total_pages:
                return records
            page += 1

    def find_a_record(self, zone: Zone) -> DNSRecord:
        """
        Locate the A record for a zone's domain.

        The listing is filtered by name and type on the Cloudflare side;
        the local scan still checks both, and when several A records share
        the name the first one in provider order wins.

        Raises:
            ProviderError: If the record list cannot be fetched
            RecordNotFound: If no A record is named after the domain
        """
        records = self.list_dns_records(
            zone.zone_id, name=zone.domain, record_type=self.record_type
        )
        for record in records:
            if record.name == zone.domain and record.type == self.record_type:
                return record

        raise RecordNotFound(zone.domain)

    def update_dns_record(self, zone: Zone, record: DNSRecord, new_ip: str) -> dict:
        """
        Point a located record at the provided IP address.

        Returns:
            dict: Updated DNS record from the Cloudflare response (may be empty)

        Raises:
            ProviderError: On transport failure, non-2xx status or success=false
        """
        url = self._build_resource_url(zone.zone_id, record.id)

        payload = {
            "content": new_ip,
            "name": zone.domain,
            "proxied": self.proxied,
            "type": self.record_type,
            "comment": self.comment,
            "ttl": self.ttl,
        }

        try:
            resp = http_request(
                "PATCH", url,
                retries=self.retries,
                headers=self.update_headers,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ProviderError(
                f"Cloudflare PATCH failed for {zone.domain} → {new_ip}: {e}"
            ) from e

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not resp.ok or data.get("success") is False:
            message, codes = self._error_summary(data)
            raise ProviderError(
                f"Cloudflare PATCH rejected for {zone.domain} "
                f"(HTTP {resp.status_code}): {message}",
                status_code=resp.status_code,
                codes=codes,
            )

        self.logger.debug(f"PATCH JSON response:\n{json.dumps(data, indent=2)}")

        return data.get("result") or {}
