"""Tests for the structured request log."""
import json
import logging

from companion_chat.utils.logger import StructuredLogger


def test_records_are_json_with_bound_fields(caplog):
    log = StructuredLogger("companion_chat.test").bind(path="/api/user")

    with caplog.at_level(logging.INFO, logger="companion_chat.test"):
        log.info("request completed", status_code=401)

    record = json.loads(caplog.records[-1].getMessage())
    assert record["message"] == "request completed"
    assert record["path"] == "/api/user"
    assert record["status_code"] == 401
    assert record["level"] == "INFO"


def test_bind_does_not_modify_parent():
    parent = StructuredLogger("companion_chat.test", method="GET")
    child = parent.bind(path="/health")

    assert parent.fields == {"method": "GET"}
    assert child.fields == {"method": "GET", "path": "/health"}


def test_requests_are_logged(client, caplog):
    with caplog.at_level(logging.INFO, logger="companion_chat.requests"):
        client.get("/health")

    records = [json.loads(r.getMessage()) for r in caplog.records if r.name == "companion_chat.requests"]
    assert any(r["path"] == "/health" and r["status_code"] == 200 for r in records)
