"""
Streaming ingestion of delimited process activity logs.

Files are read in fixed-size batches so peak memory depends on the batch
size rather than the file size. Each batch is folded into category counts
and then discarded; individual rows are never retained.
"""

import csv
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, Union

import pandas as pd
from loguru import logger
from pydantic import ValidationError

from ..models.events import AggregateStatistics, EventRecord, ProcessingResult, ProgressEvent
from ..utils.config import IngestionConfig
from ..utils.helpers import FileHelper

ProgressListener = Callable[[ProgressEvent], None]


def merge_statistics(parts: Iterable[AggregateStatistics]) -> AggregateStatistics:
    """
    Fold per-file aggregates into a single total.

    Args:
        parts: Aggregates of individual files

    Returns:
        Combined aggregates, empty when nothing is given
    """
    total = AggregateStatistics()
    for part in parts:
        total = total.merge(part)
    return total


class StreamingLogProcessor:
    """Reads CSV logs batch by batch and aggregates them."""

    def __init__(
        self,
        config: Optional[IngestionConfig] = None,
        on_progress: Optional[ProgressListener] = None,
    ):
        """
        Initialize streaming processor.

        Args:
            config: Ingestion configuration (batch size, delimiter, columns)
            on_progress: Listener notified after every batch
        """
        self.config = config or IngestionConfig()
        self._listeners: List[ProgressListener] = []
        if on_progress is not None:
            self._listeners.append(on_progress)
        self._statistics = AggregateStatistics()
        self._bad_lines = 0

    @property
    def statistics(self) -> AggregateStatistics:
        """Aggregates of the most recent pass."""
        return self._statistics

    def add_listener(self, listener: ProgressListener) -> None:
        """Register an additional progress listener."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ProgressListener) -> None:
        """Unregister a progress listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def reset(self) -> None:
        """Discard aggregates so the processor can be reused for another file."""
        self._statistics = AggregateStatistics()
        self._bad_lines = 0

    def process_file(self, file_path: Union[str, Path]) -> ProcessingResult:
        """
        Aggregate one log file.

        Args:
            file_path: Path to the CSV export

        Returns:
            ProcessingResult; on failure ``success`` is False and ``error``
            describes the problem
        """
        path = Path(file_path)
        self.reset()

        try:
            file_size = FileHelper.get_file_size(path)
            logger.info(f"Processing {path} ({file_size:,} bytes, batch size {self.config.batch_size:,})")

            for batch in self._read_batches(path):
                self._aggregate_batch(batch)
                self._notify(ProgressEvent(
                    records_processed=self._statistics.total_records,
                    file_size_bytes=file_size,
                ))

        except (OSError, ValueError, csv.Error) as e:
            # pandas parser errors and decode errors are ValueErrors
            logger.error(f"Failed to process {path}: {e}")
            return ProcessingResult(
                success=False,
                file_path=str(path),
                record_count=self._statistics.total_records,
                skipped_rows=self._statistics.skipped_rows + self._bad_lines,
                statistics=self._statistics,
                error=f"{type(e).__name__}: {e}",
            )

        self._statistics.skipped_rows += self._bad_lines
        self._bad_lines = 0

        if self._statistics.skipped_rows:
            logger.warning(f"Skipped {self._statistics.skipped_rows:,} malformed rows in {path}")
        logger.success(f"Processed {self._statistics.total_records:,} records from {path}")

        return ProcessingResult(
            success=True,
            file_path=str(path),
            record_count=self._statistics.total_records,
            skipped_rows=self._statistics.skipped_rows,
            statistics=self._statistics,
        )

    def iter_records(self, file_path: Union[str, Path]) -> Iterator[EventRecord]:
        """
        Yield well-formed rows of a log one at a time.

        Rows are produced batch by batch and are not aggregated.

        Args:
            file_path: Path to the CSV export

        Yields:
            EventRecord objects
        """
        cfg = self.config
        for batch in self._read_batches(Path(file_path)):
            frame = self._valid_rows(batch)[0]
            for row in frame.itertuples(index=False):
                try:
                    yield EventRecord(
                        timestamp=row[0],
                        process_name=row[1],
                        pid=int(float(row[2])),
                        operation=row[3],
                        path=row[4],
                        result=row[5],
                        detail=row[6],
                    )
                except (ValidationError, ValueError, OverflowError) as e:
                    logger.warning(f"Invalid {cfg.pid_column} value in row: {e}")
                    continue

    def _read_batches(self, path: Path) -> Iterator[pd.DataFrame]:
        """Read the file lazily in batches of raw string columns."""
        cfg = self.config
        reader = pd.read_csv(
            path,
            sep=cfg.delimiter,
            quotechar=cfg.quote_char,
            encoding=cfg.encoding,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine='python',
            on_bad_lines=self._on_bad_line,
            chunksize=cfg.batch_size,
        )
        with reader:
            for batch in reader:
                yield batch

    def _on_bad_line(self, bad_line: List[str]) -> None:
        # Rows with extra fields; returning None drops the row
        self._bad_lines += 1
        return None

    def _valid_rows(self, batch: pd.DataFrame) -> Tuple[pd.DataFrame, int]:
        """Split a batch into well-formed rows and a count of malformed ones."""
        required = self.config.required_columns
        missing = [column for column in required if column not in batch.columns]
        if missing:
            raise ValueError(f"Missing required columns: {', '.join(missing)}")

        frame = batch[required]
        # Short rows leave trailing cells empty (NaN)
        complete = frame.notna().all(axis=1)
        pids = pd.to_numeric(frame[self.config.pid_column].str.strip(), errors='coerce')
        valid = complete & pids.notna()
        return frame[valid], int((~valid).sum())

    def _aggregate_batch(self, batch: pd.DataFrame) -> None:
        """Fold one batch into the running aggregates."""
        cfg = self.config
        frame, malformed = self._valid_rows(batch)
        stats = self._statistics

        stats.record_processes(frame[cfg.process_column].tolist())
        stats.record_operations(frame[cfg.operation_column].tolist())
        stats.record_results(frame[cfg.result_column].tolist())
        stats.total_records += len(frame)
        stats.skipped_rows += malformed

        if malformed:
            logger.debug(f"Skipped {malformed} malformed rows in batch")

        self._observe_timestamps(frame[cfg.timestamp_column])

    def _observe_timestamps(self, column: pd.Series) -> None:
        """Track the time range from the first and last timestamps of a batch."""
        present = column[column.str.strip() != '']
        if present.empty:
            return
        # Exports are chronological, so a batch's edges bound its range
        edges = [present.iloc[0], present.iloc[-1]]
        try:
            parsed = pd.to_datetime(pd.Series(edges), errors='coerce', format='mixed').dropna()
        except (ValueError, TypeError) as e:
            logger.debug(f"Could not parse timestamps {edges}: {e}")
            return
        if parsed.empty:
            return
        self._statistics.observe_time_range(parsed.min().to_pydatetime(), parsed.max().to_pydatetime())

    def _notify(self, event: ProgressEvent) -> None:
        """Deliver a progress event without letting listeners interrupt ingestion."""
        for listener in self._listeners:
            try:
                listener(event)
            except Exception as e:
                logger.warning(f"Progress listener failed: {e}")
