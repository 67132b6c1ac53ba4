class DynDNSError(Exception):
    """Base class for every error raised by cloudflare_dyndns."""


class ConfigError(DynDNSError):
    """Startup configuration is missing or invalid."""


class NetworkError(DynDNSError):
    """Transport failure or non-success status from the public IP service."""


class ProviderError(DynDNSError):
    """
    Cloudflare rejected or failed a request.

    Carries the HTTP status (when one was received) and the
    provider error codes from the `errors` array.
    """

    def __init__(self, message: str, status_code: int | None = None, codes=()):
        super().__init__(message)
        self.status_code = status_code
        self.codes = tuple(codes)


class RecordNotFound(DynDNSError):
    """No A record in the zone matches the configured domain."""

    def __init__(self, domain: str):
        super().__init__(f"No A record found for {domain}")
        self.domain = domain
