import io
import sys

from loguru import logger

from report_verdict.logger_config import DEFAULT_COMPONENT, get_logger, setup_logger


def _restore_default_sink():
    logger.configure(extra={})
    logger.add(sys.stderr)


def test_setup_logger_installs_single_filtered_sink():
    stream = io.StringIO()
    sink_id = setup_logger("INFO", stream=stream)
    try:
        log = get_logger("unit-test")
        log.debug("hidden detail")
        log.info("visible message")
    finally:
        logger.remove(sink_id)
        _restore_default_sink()

    output = stream.getvalue()
    assert "unit-test" in output
    assert "visible message" in output
    assert "hidden detail" not in output


def test_unbound_records_use_package_component_after_setup():
    stream = io.StringIO()
    sink_id = setup_logger("INFO", stream=stream, fmt="{extra[component]}|{level}|{message}")
    try:
        logger.info("plain record")
    finally:
        logger.remove(sink_id)
        _restore_default_sink()

    assert stream.getvalue() == f"{DEFAULT_COMPONENT}|INFO|plain record\n"


def test_import_leaves_global_extra_untouched():
    records: list[dict] = []
    sink_id = logger.add(lambda message: records.append(dict(message.record["extra"])), level="DEBUG")
    try:
        logger.info("host record")
        get_logger("sanitizer").info("component record")
    finally:
        logger.remove(sink_id)

    assert records == [{}, {"component": "sanitizer"}]
