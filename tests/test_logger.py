import re
import pytest
import logging

from cloudflare_dyndns.logger import setup_logging, get_logger, TIMING
from cloudflare_dyndns.telemetry import zlog


UTC_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} UTC ")


@pytest.mark.parametrize(
    "level, message",
    [
        (logging.DEBUG, "Record pull initiated"),
        (logging.INFO, "Current Public IP: 203.0.113.7"),
        (logging.WARNING, "No A record found"),
        (logging.ERROR, "Cloudflare PATCH rejected"),
        (logging.CRITICAL, "Invalid configuration"),
    ],
)
def test_logger_configuration(capsys, restore_logging, level, message):
    """Smoke test: every level reaches stdout with a UTC timestamp prefix"""
    setup_logging(level=logging.DEBUG)
    logger = get_logger("test")

    logger.log(level, message)

    out = capsys.readouterr().out
    assert message in out
    assert UTC_PREFIX.match(out)
    assert "cloudflare_dyndns.test" in out


@pytest.mark.parametrize("enabled", [True, False])
def test_timing_filter(capsys, restore_logging, enabled):
    """TIMING lines only show up when explicitly enabled"""
    setup_logging(level=logging.INFO, timing_enabled=enabled)
    get_logger("test").timing("Timing | Total run_cycle()")

    out = capsys.readouterr().out
    assert ("Total run_cycle()" in out) is enabled


def test_setup_logging_accepts_level_names(restore_logging):
    setup_logging(level="warning")

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLevelName(TIMING) == "TIME"


def test_zlog_format(caplog):
    caplog.set_level(logging.INFO)
    logger = get_logger("test")

    zlog(logger, "✅", "UPDATE", "Updated", "home.starbase.com", meta="1.2.3.4 → 5.6.7.8")
    zlog(logger, "⚠️ ", "LOCATE", "No A record found", "vpn.starbase.net", level=logging.WARNING)

    first, second = caplog.records
    assert first.levelno == logging.INFO
    assert first.getMessage().startswith("✅ UPDATE")
    assert first.getMessage().endswith("| 1.2.3.4 → 5.6.7.8")
    assert second.levelno == logging.WARNING
    assert "No A record found" in second.getMessage()
    assert "vpn.starbase.net" in second.getMessage()
