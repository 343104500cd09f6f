import logging
from pathlib import Path

from boilerplate_context.logging import configure_logging, get_logger


def test_get_logger_nests_under_package() -> None:
    assert get_logger("cli").name == "boilerplate_context.cli"
    assert get_logger().name == "boilerplate_context"


def test_configure_logging_is_idempotent() -> None:
    configure_logging()
    logger = configure_logging(verbose=True)

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_configure_logging_shares_handlers_with_server_loggers(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "server.log"

    logger = configure_logging(verbose=True, log_file=log_file, server_loggers=("uvicorn",))
    uvicorn_logger = logging.getLogger("uvicorn")

    assert uvicorn_logger.handlers == logger.handlers
    assert uvicorn_logger.level == logging.INFO

    get_logger("test").info("hello from the package")
    uvicorn_logger.info("hello from uvicorn")
    for handler in logger.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "boilerplate_context.test: hello from the package" in text
    assert "uvicorn: hello from uvicorn" in text

    configure_logging(server_loggers=("uvicorn",))
