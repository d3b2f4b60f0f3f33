import logging
from types import SimpleNamespace

from app.utils.logging import error_log, format_context, log_request_error


def test_format_context():
    assert format_context(None) == ""
    assert format_context({"id": 7, "user": "a@example.com"}) == "id=7, user=a@example.com"


def test_error_log_uses_area_logger(caplog):
    with caplog.at_level(logging.ERROR, logger="Omifem"):
        error_log("Failed to update like", exc=ValueError("boom"), context={"style_id": 1}, area="catalog")

    record = caplog.records[-1]
    assert record.name == "Omifem.catalog"
    assert "Failed to update like | Context: style_id=1 | Exception: ValueError: boom" in record.getMessage()


def test_log_request_error_includes_request_and_user(caplog):
    request = SimpleNamespace(
        url=SimpleNamespace(path="/api/styles"),
        method="POST",
        state={"current_user": SimpleNamespace(email="ada@example.com")},
    )
    with caplog.at_level(logging.ERROR, logger="Omifem"):
        log_request_error(request, RuntimeError("kaput"))

    message = caplog.records[-1].getMessage()
    assert "Unhandled exception: RuntimeError" in message
    assert "path=/api/styles, method=POST, user=ada@example.com" in message
