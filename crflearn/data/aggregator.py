# crflearn/data/aggregator.py
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Optional, Sequence, TextIO, Tuple

from crflearn import logs
from crflearn.data.corpus import Corpus
from crflearn.data.dictionary import Dictionary
from crflearn.data.reader import read_data
from crflearn.observability.progress import ReadProgress
from crflearn.observability.timer import Timer
from crflearn.utils.errors import InputFileError

STDIN_PATH = "-"


@dataclass(frozen=True)
class IngestStats:
    num_instances: int
    num_items: int
    num_attributes: int
    num_labels: int
    seconds: float
    per_file: Tuple[int, ...] = ()


class DataAggregator:
    """
    DataAggregator

    Contract:
    - data sets are read strictly in the order given
    - group id = 0-based position of the data set in that order
    - any open / read failure aborts the whole ingestion (no partial mode)
    """

    def __init__(
        self,
        corpus: Corpus,
        attrs: Dictionary,
        labels: Dictionary,
        *,
        stdin: Optional[TextIO] = None,
        out: Optional[TextIO] = None,
        show_progress: bool = True,
    ):
        self.corpus = corpus
        self.attrs = attrs
        self.labels = labels
        self.stdin = stdin if stdin is not None else sys.stdin
        self.out = out if out is not None else sys.stdout
        self.show_progress = show_progress

    # --------------------------------------------------
    def ingest(self, path: str, group_id: int) -> int:
        """Read one data set; returns the number of instances added."""
        if path == STDIN_PATH:
            return self._read(self.stdin, path, group_id, total=None)

        try:
            fp = open(path, "r", encoding="utf-8", newline="")
        except OSError as e:
            raise InputFileError(
                f"Failed to open the data set: {path}", path=path
            ) from e

        with fp:
            total = os.fstat(fp.fileno()).st_size
            return self._read(fp, path, group_id, total=total)

    def _read(self, stream: TextIO, path: str, group_id: int, total: Optional[int]) -> int:
        progress = None
        if self.show_progress and total:
            progress = ReadProgress(self.out, total)

        try:
            n = read_data(
                stream,
                self.corpus,
                self.attrs,
                self.labels,
                group_id,
                name=path,
                progress=progress,
            )
        except (OSError, UnicodeDecodeError) as e:
            raise InputFileError(
                f"Failed to read the data set: {path}: {e}", path=path
            ) from e

        logs.info(f"[DataAggregator] {path}: group={group_id} instances={n}")
        return n

    # --------------------------------------------------
    @logs.catch(msg="ingestion failed", log_time=False, reraise_quietly=(InputFileError,))
    def ingest_all(self, paths: Sequence[str]) -> IngestStats:
        if not paths:
            paths = [STDIN_PATH]

        per_file = []
        with Timer() as t:
            for group_id, path in enumerate(paths):
                self.out.write(f"{group_id + 1} - {path}\n")
                self.out.flush()
                per_file.append(self.ingest(path, group_id))

        return IngestStats(
            num_instances=self.corpus.num_instances,
            num_items=self.corpus.total_items(),
            num_attributes=self.attrs.num(),
            num_labels=self.labels.num(),
            seconds=t.elapsed,
            per_file=tuple(per_file),
        )
