import logging
import sys

import pytest

from fd_wrapper.utils.logging_utils import configure_logging, get_structured_logger, parse_level


def test_parse_level():
    assert parse_level("debug") == logging.DEBUG
    assert parse_level(logging.WARNING) == logging.WARNING
    with pytest.raises(ValueError):
        parse_level("chatty")


def test_component_loggers_share_package_namespace():
    logger = get_structured_logger("PlanSession")
    assert logger.name == "fd_wrapper.PlanSession"
    assert logger.propagate


def test_file_handler_receives_component_logs(clean_root_logger, tmp_path):
    log_file = tmp_path / "logs" / "session.log"

    configure_logging(level="INFO", log_file=log_file, include_console=False)
    get_structured_logger("PlanSession").info("reading solution from %s", "sas_plan_em")
    get_structured_logger("PlanSession").debug("state: p")

    text = log_file.read_text()
    assert "[INFO:fd_wrapper.PlanSession:" in text
    assert "reading solution from sas_plan_em" in text
    assert "state: p" not in text


def test_console_handler_writes_to_stderr(clean_root_logger):
    configure_logging(level="WARNING")
    consoles = [
        h for h in clean_root_logger.handlers
        if type(h) is logging.StreamHandler and h.stream is sys.stderr
    ]
    assert len(consoles) == 1
    assert consoles[0].level == logging.WARNING


def test_repeated_configuration_does_not_duplicate_handlers(clean_root_logger, tmp_path):
    log_file = tmp_path / "session.log"
    configure_logging(log_file=log_file)
    count = len(clean_root_logger.handlers)

    configure_logging(log_file=str(log_file))

    assert len(clean_root_logger.handlers) == count
