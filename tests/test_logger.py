import re

from prismaclient.logger import debug_logger, info_logger, logging_enabled

DEBUG_PREFIX = "prisma-client-go debug: "


def test_logging_disabled_without_variable():
    assert logging_enabled({}) is False


def test_logging_disabled_with_empty_variable():
    assert logging_enabled({"PRISMA_CLIENT_GO_LOG": ""}) is False


def test_logging_enabled_with_variable():
    assert logging_enabled({"PRISMA_CLIENT_GO_LOG": "1"}) is True


def test_debug_logger_discards_when_disabled(capsys):
    logger = debug_logger({})
    logger.debug("hidden message")
    assert capsys.readouterr().out == ""


def test_debug_logger_writes_when_enabled(capsys):
    logger = debug_logger({"PRISMA_CLIENT_GO_LOG": "1"})
    logger.debug("hello")
    out = capsys.readouterr().out
    assert out.startswith(DEBUG_PREFIX)
    assert out.endswith(" hello\n")
    stamp = out[len(DEBUG_PREFIX) : -len(" hello\n")]
    assert len(stamp) == len("2021/09/22 09:32:31.706000")
    assert re.fullmatch(r"\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}\.\d{6}", stamp) is not None


def test_debug_logger_reconfigured_does_not_duplicate(capsys):
    debug_logger({"PRISMA_CLIENT_GO_LOG": "1"})
    logger = debug_logger({"PRISMA_CLIENT_GO_LOG": "1"})
    logger.debug("once")
    out = capsys.readouterr().out
    assert out.count("once") == 1


def test_info_logger_always_writes(capsys):
    logger = info_logger()
    logger.info("e.g.")
    out = capsys.readouterr().out
    assert out.startswith("prisma-client-go info: ")
    assert out.endswith(" e.g.\n")