# --- Standard library imports ---
import sys
import signal

# --- Project imports ---
from .config import Config
from .exceptions import ConfigError
from .logger import get_logger, setup_logging
from .ddns_controller import DDNSController
from .scheduling_policy import DailyScheduler


def install_signal_handlers(scheduler: DailyScheduler) -> None:
    """
    Stop the scheduler on SIGINT/SIGTERM. An in-flight cycle drains
    normally; a sleeping scheduler wakes up and exits.
    """
    logger = get_logger("main")

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating shutdown...")
        scheduler.stop()

    signal.signal(signal.SIGTERM, handle_signal)
    signal.signal(signal.SIGINT, handle_signal)

def main() -> int:
    """
    Entry point for the Cloudflare DynDNS daemon.

    Loads configuration, configures logging and runs the daily scheduler
    until a stop signal arrives.
    """
    setup_logging()
    logger = get_logger("main")

    try:
        config = Config.from_env()
    except ConfigError as e:
        logger.critical(f"Invalid configuration: {e}")
        return 1

    # Reconfigure with the requested policy
    setup_logging(level=config.log_level, timing_enabled=config.log_timing)
    logger.debug(f"Python version: {sys.version}")
    logger.info(
        f"Managing {len(config.zones)} zone(s): "
        f"{', '.join(zone.domain for zone in config.zones)}"
    )

    controller = DDNSController(config)
    scheduler = DailyScheduler(controller.run_cycle)
    install_signal_handlers(scheduler)

    scheduler.run_forever()
    return 0

if __name__ == "__main__":
    sys.exit(main())
