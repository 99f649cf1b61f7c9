"""Derive the expected source file for a dataset kind and date."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Union

from .models import DatasetKind, FileReference
from .rules import CSV_SUFFIX, DAILY_PREFIX, MONTHLY_PREFIX


def resolve(
    kind: DatasetKind,
    reference_date: date,
    data_root: Union[str, Path],
) -> FileReference:
    """
    Build the FileReference for ``kind`` on ``reference_date``.

    Daily files are ``Trd<YYYY><MM><DD>.csv`` and monthly files are
    ``Sts<YYYY><MM>.csv``; both live in ``<data_root>/<YYYY>/<MM>/``.
    """
    year = f"{reference_date.year:04d}"
    month = f"{reference_date.month:02d}"

    if kind is DatasetKind.DAILY:
        day = f"{reference_date.day:02d}"
        filename = f"{DAILY_PREFIX}{year}{month}{day}{CSV_SUFFIX}"
    else:
        day = None
        filename = f"{MONTHLY_PREFIX}{year}{month}{CSV_SUFFIX}"

    path = Path(data_root) / year / month / filename
    return FileReference(
        kind=kind,
        year=year,
        month=month,
        day=day,
        filename=filename,
        path=str(path),
    )
