"""
Field normalization applied to trips before loading
"""

from datetime import datetime
from typing import Sequence

import pandas as pd

from taxi_etl.config.settings import DEFAULT_CIVIL_TIME_ZONE
from taxi_etl.models.trip_record import TripRecord
from taxi_etl.utils.logger import get_logger
from taxi_etl.utils.exceptions import ProcessingError


FLAG_LABELS = {
    "N": "No",
    "Y": "Yes",
}


def normalize_flag(flag: str) -> str:
    """Trim the flag and spell out N/Y; other values pass through trimmed"""
    trimmed = flag.strip()
    return FLAG_LABELS.get(trimmed, trimmed)


def civil_to_utc(value: datetime, time_zone: str) -> datetime:
    """
    Read a naive wall-clock time as local time in ``time_zone`` and
    return the same instant as a naive UTC datetime

    Wall times repeated by a DST fall-back resolve to standard time.

    Raises:
        ProcessingError: If the wall time does not exist in the zone
            (skipped by a DST spring-forward)
    """
    localized = pd.Timestamp(value).tz_localize(
        time_zone, ambiguous=False, nonexistent="NaT"
    )
    if pd.isna(localized):
        raise ProcessingError(
            f"{value.isoformat()} does not exist in time zone {time_zone}",
            error_code="NONEXISTENT_LOCAL_TIME",
            context={'value': value.isoformat(), 'time_zone': time_zone}
        )
    return localized.tz_convert("UTC").tz_localize(None).to_pydatetime()


class RecordNormalizer:
    """
    Rewrites records in place before they are loaded

    - store_and_fwd_flag: trimmed, N -> No, Y -> Yes
    - pickup time: converted from the civil time zone to UTC

    Only the pickup time is converted. The dropoff time keeps its value
    from the input file.
    """

    def __init__(self, civil_time_zone: str = DEFAULT_CIVIL_TIME_ZONE):
        self.civil_time_zone = civil_time_zone
        self.logger = get_logger(__name__)

    def normalize(self, records: Sequence[TripRecord]) -> Sequence[TripRecord]:
        for record in records:
            record.store_and_fwd_flag = normalize_flag(record.store_and_fwd_flag)
            record.pickup_datetime = civil_to_utc(record.pickup_datetime, self.civil_time_zone)

        self.logger.info(
            f"Normalized {len(records)} records",
            extra={'civil_time_zone': self.civil_time_zone}
        )
        return records
