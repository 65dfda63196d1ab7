"""
Duplicate trip detection
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from taxi_etl.models.trip_record import TripRecord, NaturalKey, records_to_dataframe
from taxi_etl.utils.logger import get_logger
from taxi_etl.utils.exceptions import ProcessingError


@dataclass
class DedupResult:
    """Unique records in first-occurrence order and the discarded duplicates"""
    unique: List[TripRecord] = field(default_factory=list)
    duplicates: List[TripRecord] = field(default_factory=list)

    @property
    def removed_count(self) -> int:
        return len(self.duplicates)


def split_duplicates(records: Sequence[TripRecord]) -> DedupResult:
    """
    Separate repeated trips from unique ones

    Records are grouped by natural key (pickup time, dropoff time,
    passenger count). The first record of each group is kept; groups
    are ordered by where they first appear. Every other record is a
    duplicate, in file order, whether it differs from the kept record
    in other fields or is an exact copy of it.

    Membership is by record identity rather than value, so every record
    left out of ``unique`` is reported exactly once and
    ``len(unique) + len(duplicates) == len(records)``.
    """
    first_by_key: Dict[NaturalKey, TripRecord] = {}
    for record in records:
        first_by_key.setdefault(record.natural_key, record)

    unique = list(first_by_key.values())
    kept_ids = {id(record) for record in unique}
    duplicates = [record for record in records if id(record) not in kept_ids]

    return DedupResult(unique=unique, duplicates=duplicates)


class Deduplicator:
    """
    Removes repeated trips and archives them to a CSV side file

    The side file uses the input CSV header so it can be inspected or
    re-fed to the pipeline.
    """

    def __init__(self, duplicates_path: Optional[Union[str, Path]] = None):
        self.duplicates_path = Path(duplicates_path) if duplicates_path else None
        self.logger = get_logger(__name__)

    def deduplicate(self, records: Sequence[TripRecord]) -> DedupResult:
        """
        Split records and write the duplicates to the side file

        Args:
            records: Parsed records in file order

        Returns:
            DedupResult with unique and duplicate records
        """
        result = split_duplicates(records)

        if self.duplicates_path is not None:
            self.write_duplicates(result.duplicates)

        self.logger.info(
            f"Kept {len(result.unique)} unique records, "
            f"found {result.removed_count} duplicates",
            extra={
                'unique_rows': len(result.unique),
                'duplicate_rows': result.removed_count
            }
        )
        return result

    def write_duplicates(self, duplicates: Sequence[TripRecord]) -> Path:
        """Write duplicates as CSV, header included even when there are none"""
        try:
            self.duplicates_path.parent.mkdir(parents=True, exist_ok=True)
            records_to_dataframe(duplicates).to_csv(self.duplicates_path, index=False)
        except OSError as e:
            raise ProcessingError(
                f"Failed to write duplicates file {self.duplicates_path}: {str(e)}",
                context={'duplicates_path': str(self.duplicates_path)},
                cause=e
            ) from e

        self.logger.debug(f"Wrote {len(duplicates)} duplicates to {self.duplicates_path}")
        return self.duplicates_path
