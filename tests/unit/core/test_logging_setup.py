import json
import logging

from taskflow.core.logging_setup import JsonFormatter, mask_sensitive


def test_mask_bearer_token():
    assert mask_sensitive("Authorization: Bearer abc.def.ghi") == "Authorization: Bearer ***"


def test_mask_token_and_password_values():
    masked = mask_sensitive("GET /verify?token=deadbeef&x=1 password=hunter2")
    assert "deadbeef" not in masked
    assert "hunter2" not in masked
    assert "token=***&x=1" in masked


def test_json_formatter_output():
    record = logging.LogRecord("taskflow.test", logging.INFO, __file__, 1, "reset token=%s", ("abc123",), None)
    payload = json.loads(JsonFormatter("%(message)s").format(record))
    assert payload["level"] == "INFO"
    assert payload["module"] == "taskflow.test"
    assert payload["message"] == "reset token=***"
