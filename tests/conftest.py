from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator, List

import pytest
from loguru import logger

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


@pytest.fixture
def log_records() -> Iterator[List[dict]]:
    """Capture envbind's loguru records as ``{"level", "message"}`` dicts."""

    records: List[dict] = []

    def _sink(message) -> None:
        record = message.record
        records.append({"level": record["level"].name, "message": record["message"]})

    logger.enable("envbind")
    handler_id = logger.add(_sink, level="DEBUG", format="{message}")
    try:
        yield records
    finally:
        logger.remove(handler_id)
        logger.disable("envbind")
