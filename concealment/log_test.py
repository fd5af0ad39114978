import io
import logging

import pytest

from concealment.log import configure_logging, parse_level


@pytest.fixture
def stream():
    buf = io.StringIO()
    yield buf
    root = logging.getLogger("concealment")
    for handler in list(root.handlers):
        if getattr(handler, "_concealment", False):
            root.removeHandler(handler)
    root.setLevel(logging.NOTSET)


def test_routes_package_records(stream):
    configure_logging("debug", stream=stream)
    logging.getLogger("concealment.selector").debug("drew %d", 12)
    out = stream.getvalue()
    assert "[DEBUG] concealment.selector: drew 12" in out


def test_level_filters(stream):
    configure_logging(logging.WARNING, stream=stream)
    logging.getLogger("concealment.avoider").info("quiet")
    assert stream.getvalue() == ""


def test_repeated_calls_do_not_stack(stream):
    configure_logging(stream=stream)
    configure_logging(stream=stream)
    root = logging.getLogger("concealment")
    tagged = [h for h in root.handlers if getattr(h, "_concealment", False)]
    assert len(tagged) == 1


def test_parse_level():
    assert parse_level("info") == logging.INFO
    assert parse_level("WARNING") == logging.WARNING
    with pytest.raises(ValueError):
        parse_level("chatty")
