"""Keeps Cloudflare A records pointed at this machine's public IP."""

__version__ = "1.0.0"
