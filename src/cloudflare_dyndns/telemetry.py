# --- Standard library imports ---
import logging


def zlog(
    logger: logging.Logger,
    emoji: str,
    phase: str,
    state: str,
    domain: str,
    meta: str | None = None,
    level: int = logging.INFO,
) -> None:
    """
    Emit one aligned per-zone log line.

    Format:
        PHASE STATE DOMAIN | meta data
    """
    msg = f"{phase:<8} {state:<16} {domain:<28}"
    if meta:
        msg += f" | {meta}"

    logger.log(level, f"{emoji} {msg}".rstrip(), stacklevel=2)
