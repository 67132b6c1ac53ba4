# --- Standard library imports ---
import sys
import time
import logging


# --- Custom log levels ---
TIMING = 25   # Between INFO (20) and WARNING (30)
logging.addLevelName(TIMING, "TIME")

def timing(self, message, *args, **kwargs):
    """Add `timing` method to Logger for TIMING-level logs."""
    if self.isEnabledFor(TIMING):
        self._log(TIMING, message, args, stacklevel=2, **kwargs)

logging.Logger.timing = timing

# --- Filters ---
class TimingFilter(logging.Filter):
    """Drop TIMING records unless cycle timing output was requested."""
    def __init__(self, enabled: bool):
        super().__init__()
        self.enabled = enabled

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno == TIMING:
            return self.enabled
        return True

# --- Format configuration constants ---
LOG_FORMAT = "%(asctime)s %(levelemoji)s %(name)s → %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S UTC"

LOG_LEVEL_EMOJIS = {
    logging.DEBUG: "🧱",
    logging.INFO: "🟢",
    TIMING: "⚡️",
    logging.WARNING: "⚠️ ",
    logging.ERROR: "❌",
    logging.CRITICAL: "🔥",
}

LEVEL_NAME_MAP = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}

# --- Formatters ---
class EmojiFormatter(logging.Formatter):
    """
    Prepends an emoji per log level, shortens level names and
    renders every timestamp in UTC regardless of host time zone.
    """
    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        record.levelemoji = LOG_LEVEL_EMOJIS.get(record.levelno, "")
        record.levelname = LEVEL_NAME_MAP.get(record.levelname, record.levelname)
        return super().format(record)

# --- Public logging setup API ---
def setup_logging(level=logging.INFO, timing_enabled: bool = False) -> None:
    """
    Configure global logging: one stdout handler, UTC timestamps,
    emoji decorations and optional TIMING logs.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(EmojiFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    handler.addFilter(TimingFilter(enabled=timing_enabled))
    root.addHandler(handler)

def get_logger(name: str) -> logging.Logger:
    """
    Return a namespaced logger for any module.
    """
    return logging.getLogger(f"cloudflare_dyndns.{name}")
