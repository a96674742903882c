"""tests for logging setup and the default event sink"""

import logging

from bitbucket_mcp._logging import LoggingSink, NullSink, setup_logging


def test_logging_sink_records_calls(caplog):
    """calls are logged with their arguments"""
    caplog.set_level(logging.INFO, logger="bitbucket-mcp.tools")
    sink = LoggingSink(logging.getLogger("bitbucket-mcp.tools"))

    sink.record_call("get_diff", {"repository": "repo", "prId": 1})

    assert "Called tool: get_diff" in caplog.text
    assert "'prId': 1" in caplog.text


def test_logging_sink_records_failures(caplog):
    """failures are logged with the error type"""
    caplog.set_level(logging.ERROR, logger="bitbucket-mcp.tools")
    sink = LoggingSink(logging.getLogger("bitbucket-mcp.tools"))

    sink.record_failure("get_diff", ValueError("nope"))

    assert "Tool execution error: get_diff ValueError: nope" in caplog.text


def test_null_sink():
    """the null sink accepts events silently"""
    sink = NullSink()
    sink.record_call("get_diff", {})
    sink.record_failure("get_diff", ValueError("nope"))


def test_setup_logging_writes_file(tmp_path):
    """setup_logging adds a file handler at the given level"""
    log_file = tmp_path / "bitbucket.log"
    logger = setup_logging("debug", str(log_file))
    try:
        logging.getLogger("bitbucket-mcp.tools").info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert logger.level == logging.DEBUG
        assert "[INFO] [bitbucket-mcp.tools] hello" in log_file.read_text()
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
