import json
import logging
from shared.core.logging_config import (
    SecurityFilter,
    StructuredFormatter,
    request_id_var,
)

def make_record(msg, **extra):
    record = logging.LogRecord("payments", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record

def test_formatter_emits_json():
    token = request_id_var.set("req-1")
    try:
        output = json.loads(StructuredFormatter().format(make_record("hello", extra_fields={"payment_id": "p1"})))
    finally:
        request_id_var.reset(token)

    assert output["message"] == "hello"
    assert output["level"] == "INFO"
    assert output["trace"] == {"request_id": "req-1"}
    assert output["custom"] == {"payment_id": "p1"}
    assert output["@timestamp"].endswith("Z")

def test_security_filter_redacts_dsn_password():
    record = make_record("connect postgresql+psycopg2://payments:s3cret@db:5432/payments_v1")
    SecurityFilter().filter(record)
    assert "s3cret" not in record.getMessage()
    assert "payments:***REDACTED***@db" in record.getMessage()

def test_security_filter_redacts_key_values():
    record = make_record("password=hunter2 token: abc")
    SecurityFilter().filter(record)
    assert "hunter2" not in record.getMessage()
    assert "abc" not in record.getMessage()

def test_security_filter_leaves_plain_messages():
    record = make_record("Created payment %s")
    record.args = ("p1",)
    SecurityFilter().filter(record)
    assert record.getMessage() == "Created payment p1"
