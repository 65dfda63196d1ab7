"""
CSV extraction for the NYC Taxi CSV ETL pipeline
"""

import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

import pandas as pd

from taxi_etl.models.trip_record import TripRecord
from taxi_etl.utils.logger import get_logger
from taxi_etl.utils.exceptions import ExtractionError


@dataclass
class ReadResult:
    """Records parsed from a CSV file plus how many rows were dropped"""
    records: List[TripRecord] = field(default_factory=list)
    rows_read: int = 0
    malformed_rows: int = 0


class CsvTripReader:
    """
    Reads taxi trip rows from a delimited file with a header row

    Parsing is lenient about the file's shape:
    - header order does not matter, columns are looked up by name
    - unknown columns are ignored, and so are surplus fields on a row
    - a row whose required fields cannot all be parsed is dropped

    Dropped rows are not logged one by one and are not written anywhere;
    only their total is reported in the ``ReadResult``.
    """

    def __init__(self, file_path: Union[str, Path], delimiter: str = ","):
        self.file_path = Path(file_path)
        self.delimiter = delimiter
        self.logger = get_logger(__name__)

    def read(self) -> ReadResult:
        """
        Parse the whole file into TripRecords

        Returns:
            ReadResult with parsed records and row counts

        Raises:
            ExtractionError: If the file is missing or has no header row
        """
        if not self.file_path.exists():
            raise ExtractionError(
                f"Input file does not exist: {self.file_path}",
                error_code="FILE_NOT_FOUND",
                context={'file_path': str(self.file_path)}
            )

        frame = self._read_frame()
        result = ReadResult(rows_read=len(frame))

        for row in frame.to_dict(orient="records"):
            try:
                result.records.append(TripRecord.from_row(row))
            except ValueError:
                result.malformed_rows += 1

        self.logger.info(
            f"Read {len(result.records)} records from {self.file_path}",
            extra={
                'rows_read': result.rows_read,
                'malformed_rows': result.malformed_rows
            }
        )
        return result

    def _read_frame(self) -> pd.DataFrame:
        """Load the file as strings; missing trailing fields come back as NaN"""
        try:
            header = pd.read_csv(
                self.file_path, sep=self.delimiter, nrows=0, encoding="utf-8-sig"
            ).columns
            width = len(header)

            # Short rows are routine input and are dropped later as malformed
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", pd.errors.ParserWarning)
                return pd.read_csv(
                    self.file_path,
                    sep=self.delimiter,
                    dtype=str,
                    index_col=False,
                    keep_default_na=False,
                    encoding="utf-8-sig",
                    engine="python",
                    on_bad_lines=lambda fields: fields[:width],
                )
        except pd.errors.EmptyDataError as e:
            raise ExtractionError(
                f"Input file has no header row: {self.file_path}",
                error_code="EMPTY_FILE",
                context={'file_path': str(self.file_path)},
                cause=e
            ) from e
        except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
            raise ExtractionError(
                f"Failed to read {self.file_path}: {str(e)}",
                context={'file_path': str(self.file_path)},
                cause=e
            ) from e
