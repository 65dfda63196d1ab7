"""
Business-rule filtering of trip records
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from taxi_etl.models.trip_record import TripRecord, records_to_dataframe
from taxi_etl.utils.logger import get_logger
from taxi_etl.utils.exceptions import ProcessingError


@dataclass
class ValidationResult:
    valid: List[TripRecord] = field(default_factory=list)
    rejected: List[TripRecord] = field(default_factory=list)


class RecordValidator:
    """
    Drops trips with a negative fare or tip

    Rejected rows are discarded. Unlike duplicates they are not archived
    unless a ``rejected_path`` is configured.
    """

    def __init__(self, rejected_path: Optional[Union[str, Path]] = None):
        self.rejected_path = Path(rejected_path) if rejected_path else None
        self.logger = get_logger(__name__)

    def filter(self, records: Sequence[TripRecord]) -> ValidationResult:
        result = ValidationResult()
        for record in records:
            if record.has_valid_amounts:
                result.valid.append(record)
            else:
                result.rejected.append(record)

        if self.rejected_path is not None:
            self._write_rejected(result.rejected)

        self.logger.info(
            f"Validated {len(records)} records, rejected {len(result.rejected)}",
            extra={'rejected_rows': len(result.rejected)}
        )
        return result

    def _write_rejected(self, rejected: Sequence[TripRecord]) -> None:
        try:
            self.rejected_path.parent.mkdir(parents=True, exist_ok=True)
            records_to_dataframe(rejected).to_csv(self.rejected_path, index=False)
        except OSError as e:
            raise ProcessingError(
                f"Failed to write rejected rows file {self.rejected_path}: {str(e)}",
                context={'rejected_path': str(self.rejected_path)},
                cause=e
            ) from e
