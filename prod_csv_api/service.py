from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from loguru import logger
from sqlalchemy.engine import Engine

from .errors import SourceFileNotFound
from .mapping import Record, map_row
from .models import DatasetKind
from .paths import resolve
from .reader import read_last_row
from .storage import upsert


class IngestionService:
    """
    Resolve today's file for a dataset kind, take its last complete row,
    store it once and hand back the mapped record.

    Nothing is retried here; every pipeline error propagates to the caller.
    """

    def __init__(
        self,
        engine: Engine,
        data_root: Union[str, Path],
        clock: Callable[[], datetime] = datetime.now,
        encoding: Optional[str] = None,
    ):
        self.engine = engine
        self.data_root = Path(data_root)
        self.clock = clock
        self.encoding = encoding

    def handle(self, kind: DatasetKind) -> Record:
        ref = resolve(kind, self.clock().date(), self.data_root)

        if not Path(ref.path).exists():
            raise SourceFileNotFound(ref.filename, ref.path)

        row = read_last_row(ref.path, self.encoding)
        record = map_row(kind, row, ref.filename)
        outcome = upsert(self.engine, kind, record)

        logger.info(
            "{} {} timestamp={} ({})", kind.value, ref.filename, record.timestamp, outcome.value
        )
        return record
