"""Log output emitted while binding."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import List

from loguru import logger

from envbind import envfield, process


@dataclass
class LoggedConfig:
    timeout: timedelta = envfield("key=TIMEOUT default=1h30m", default=timedelta(0))
    db_password: str = envfield("key=DB_PASSWORD", default="")
    region: str = envfield("key=REGION", default="eu")


def test_bound_fields_logged_with_source(log_records: List[dict]) -> None:
    process(LoggedConfig(), environ={"DB_PASSWORD": "hunter2"})
    messages = [record["message"] for record in log_records]
    assert "timeout = 1h30m0s [default TIMEOUT]" in messages
    assert "db_password = ***masked*** [env DB_PASSWORD]" in messages
    assert all("hunter2" not in message for message in messages)


def test_skipped_fields_and_summary_logged(log_records: List[dict]) -> None:
    process(LoggedConfig(), environ={})
    assert {
        "level": "DEBUG",
        "message": "region: REGION is unset, keeping current value",
    } in log_records
    assert {
        "level": "INFO",
        "message": "Bound 1 field(s) of LoggedConfig from the environment",
    } in log_records


def test_library_is_silent_by_default() -> None:
    records: List[object] = []
    handler_id = logger.add(records.append, level="DEBUG")
    try:
        process(LoggedConfig(), environ={})
    finally:
        logger.remove(handler_id)
    assert records == []
