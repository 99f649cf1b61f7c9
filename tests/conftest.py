import csv
from pathlib import Path

import pytest
from sqlalchemy import create_engine

from prod_csv_api.storage import create_tables

TIMESTAMP = "2026-01-13T10:00:00Z"


def daily_row(
    partnumber="PN-100",
    shot_current_part="5",
    shot_ok="120",
    shot_ng="3",
    shot_total="123",
    ct="1.5",
    timestamp=TIMESTAMP,
    width=40,
):
    row = [f"c{i}" for i in range(width)]
    row[1] = partnumber
    row[6] = shot_current_part
    row[7] = shot_ok
    row[8] = shot_ng
    row[9] = shot_total
    row[10] = ct
    row[38] = timestamp
    return row


def status_row(timestamp=TIMESTAMP, status="1", partnumber="PN-100"):
    return ["M01", timestamp, status, partnumber, "RUN"]


def write_csv(path: Path, rows, lineterminator="\r\n", encoding="utf-8") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding=encoding) as f:
        writer = csv.writer(f, lineterminator=lineterminator)
        writer.writerows(rows)
    return path


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'production.db'}")
    create_tables(engine)
    yield engine
    engine.dispose()
