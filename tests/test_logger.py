from __future__ import annotations

import json
import logging

from taxrecon.core.logger import JsonFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.makeLogRecord(
        {
            "name": "taxrecon.services.sales_report.report_job",
            "levelno": logging.INFO,
            "levelname": "INFO",
            "msg": "Published %s",
            "args": ("india-sales-report-2023-06.csv",),
        }
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_renders_message_and_service_tags():
    payload = json.loads(JsonFormatter().format(_record()))

    assert payload["message"] == "Published india-sales-report-2023-06.csv"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "taxrecon.services.sales_report.report_job"
    assert payload["service"] == "TaxRecon"
    assert payload["env"] == "test"
    assert "extra" not in payload


def test_json_formatter_keeps_only_caller_extras():
    payload = json.loads(JsonFormatter().format(_record(period="2023-06", rows=12)))

    assert payload["extra"] == {"period": "2023-06", "rows": 12}
