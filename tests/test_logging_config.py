import io
import logging

from storypath import setup_logging


def test_setup_logging_replaces_handlers() -> None:
    first = io.StringIO()
    second = io.StringIO()

    setup_logging("info", stream=first)
    setup_logging("debug", stream=second)

    package_logger = logging.getLogger("storypath")
    try:
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.DEBUG

        logging.getLogger("storypath.engine").debug("walking the graph")

        assert first.getvalue() == ""
        assert "| DEBUG    | storypath.engine | walking the graph" in second.getvalue()
    finally:
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)
