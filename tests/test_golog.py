import io
import re
import time

import pytest

from relaykit import colorful, log
from relaykit.golog import INFO_PREFIX, Logger, Prefix
from relaykit.log import LogLevel


@pytest.fixture
def restore_logger():
    previous = log.get_logger()
    yield
    log.register_logger(previous)


def _plain_logger():
    out = io.BytesIO()
    return Logger(out).without_timestamp().without_color(), out


def test_info_line_without_timestamp():
    logger, out = _plain_logger()
    logger.info("hello", "world")
    assert out.getvalue() == b"[INFO]  hello world\n"


def test_infof_formats_arguments():
    logger, out = _plain_logger()
    logger.infof("value %d of %s", 5, "five")
    assert out.getvalue() == b"[INFO]  value 5 of five\n"


def test_trailing_newline_not_doubled():
    logger, out = _plain_logger()
    logger.warnf("done\n")
    assert out.getvalue() == b"[WARN]  done\n"


def test_timestamp_layout():
    out = io.BytesIO()
    logger = Logger(out).without_color()
    year = time.localtime().tm_year
    logger.info("hi")
    value = out.getvalue()
    assert value[:8] == b"[INFO]  "
    assert value[-4:] == b" hi\n"
    assert len(value) == len(b"[INFO]  2000/01/01 00:00:00 hi\n")
    assert int(value[8:12]) in (year, year + 1)
    assert value[12:13] == b"/" and value[15:16] == b"/"
    assert re.fullmatch(
        rb"\[INFO\]  \d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2} hi\n", value
    )


def test_level_filters_lower_messages():
    logger, out = _plain_logger()
    logger.set_log_level(LogLevel.WARN)
    logger.info("hidden")
    logger.debug("hidden")
    logger.warn("shown")
    assert out.getvalue() == b"[WARN]  shown\n"


def test_debug_only_at_all_level():
    logger, out = _plain_logger()
    logger.set_log_level(LogLevel.INFO)
    logger.trace("hidden")
    logger.set_log_level(LogLevel.ALL)
    logger.trace("shown")
    assert out.getvalue() == b"[TRACE] shown\n"


def test_quiet_suppresses_output():
    logger, out = _plain_logger()
    assert logger.quiet().is_quiet() is True
    logger.info("nothing")
    assert out.getvalue() == b""
    logger.no_quiet().info("again")
    assert out.getvalue() == b"[INFO]  again\n"


def test_debug_flag_toggles():
    logger, _ = _plain_logger()
    assert logger.is_debug() is False
    assert logger.with_debug().is_debug() is True
    assert logger.without_debug().is_debug() is False


def test_color_uses_coloured_prefix():
    logger, out = _plain_logger()
    logger.with_color().info("x")
    assert out.getvalue() == colorful.green(b"[INFO]  ") + b"x\n"
    assert INFO_PREFIX.color == colorful.green(INFO_PREFIX.plain)


def test_set_output_resets_colour():
    logger = Logger(io.BytesIO()).without_timestamp().with_color()
    target = io.BytesIO()
    logger.set_output(target)
    logger.info("plain")
    assert target.getvalue() == b"[INFO]  plain\n"


def test_text_stream_output():
    out = io.StringIO()
    logger = Logger(out).without_timestamp()
    logger.warn("text")
    assert out.getvalue() == "[WARN]  text\n"


def test_error_reports_caller_through_facade(restore_logger):
    logger, out = _plain_logger()
    log.register_logger(logger)
    log.error("boom")
    line = out.getvalue()
    assert line.startswith(b"[ERROR] ")
    assert b"test_error_reports_caller_through_facade:test_golog.py:" in line
    assert line.endswith(b" boom\n")


def test_fatal_exits_with_status_one():
    logger, out = _plain_logger()
    with pytest.raises(SystemExit) as excinfo:
        logger.fatal("bad")
    assert excinfo.value.code == 1
    assert out.getvalue().startswith(b"[FATAL] ")


def test_fatal_exits_even_when_off():
    logger, out = _plain_logger()
    logger.set_log_level(LogLevel.OFF)
    with pytest.raises(SystemExit) as excinfo:
        logger.fatalf("bad %s", "x")
    assert excinfo.value.code == 1
    assert out.getvalue() == b""


def test_output_with_custom_prefix():
    logger, out = _plain_logger()
    logger.output(0, Prefix(b"[X] ", b"[X] "), "data")
    assert out.getvalue() == b"[X] data\n"