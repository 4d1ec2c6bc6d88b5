"""Test log level filtering on the file sink."""

import pytest

from toolpick.core.log import (
    ConsoleSink,
    FileSink,
    LevelFilteringExporter,
    LogfireSink,
    LEVELS,
    level_name,
    setup_logger,
)


@pytest.fixture
def restore_logger(tmp_path):
    """Reinstall console-only logging after a test swaps the logger."""
    yield
    setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


def _log_everything(tmp_path, level):
    log_file = tmp_path / f"{level}.log"
    logger = setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, level=level, path=str(log_file)),
        logfire=LogfireSink(enabled=False),
    )
    logger.spew("SPEW message")
    logger.trace("TRACE message")
    logger.debug("DEBUG message")
    logger.info("INFO message")
    logger.warn("WARN message")
    logger.error("ERROR message")
    logger.close()
    return log_file.read_text()


def test_spew_level_includes_all(tmp_path, restore_logger):
    """spew keeps every record."""
    content = _log_everything(tmp_path, "spew")
    for name in ("SPEW", "TRACE", "DEBUG", "INFO", "WARN", "ERROR"):
        assert f"{name} message" in content


def test_debug_level_filters_trace_and_spew(tmp_path, restore_logger):
    """debug drops trace and spew."""
    content = _log_everything(tmp_path, "debug")
    assert "SPEW message" not in content
    assert "TRACE message" not in content
    assert "DEBUG message" in content
    assert "INFO message" in content


def test_warn_level_keeps_warnings_and_errors(tmp_path, restore_logger):
    """warn drops info and below."""
    content = _log_everything(tmp_path, "warn")
    assert "INFO message" not in content
    assert "WARN message" in content
    assert "ERROR message" in content


def test_file_lines_use_template(tmp_path, restore_logger):
    """File lines carry the level name and the message."""
    content = _log_everything(tmp_path, "info")
    info_line = next(
        line for line in content.splitlines() if "INFO message" in line
    )
    assert " info " in info_line


def test_level_names_round_trip():
    """Every level name maps back to itself."""
    for name, number in LEVELS.items():
        assert level_name(number) == name


def test_unknown_min_level_defaults_to_info():
    """An unknown level name filters like info."""
    exporter = LevelFilteringExporter(exporter=None, min_level="chatty")
    assert exporter._min_severity == LEVELS["info"]
