"""
Data model for NYC yellow taxi trip records loaded by the ETL
"""

import re
from dataclasses import dataclass, astuple
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Tuple

import pandas as pd


# CSV header names, in the column order of the TripData table
PICKUP_DATETIME = "tpep_pickup_datetime"
DROPOFF_DATETIME = "tpep_dropoff_datetime"
PASSENGER_COUNT = "passenger_count"
TRIP_DISTANCE = "trip_distance"
STORE_AND_FWD_FLAG = "store_and_fwd_flag"
PICKUP_LOCATION_ID = "PULocationID"
DROPOFF_LOCATION_ID = "DOLocationID"
FARE_AMOUNT = "fare_amount"
TIP_AMOUNT = "tip_amount"

TRIP_COLUMNS: List[str] = [
    PICKUP_DATETIME,
    DROPOFF_DATETIME,
    PASSENGER_COUNT,
    TRIP_DISTANCE,
    STORE_AND_FWD_FLAG,
    PICKUP_LOCATION_ID,
    DROPOFF_LOCATION_ID,
    FARE_AMOUNT,
    TIP_AMOUNT,
]

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
_INT32_MIN, _INT32_MAX = -2 ** 31, 2 ** 31 - 1

# Absolute date-times only: ISO (optional T, fraction, offset) or US
# month/day/year with an optional AM/PM
_TIMESTAMP_PATTERNS = (
    re.compile(
        r"\d{4}-\d{2}-\d{2}[ T]\d{1,2}:\d{2}(:\d{2}(\.\d+)?)?"
        r"(Z|[+-]\d{2}:?\d{2})?"
    ),
    re.compile(r"\d{1,2}/\d{1,2}/\d{4} \d{1,2}:\d{2}(:\d{2})?( ?[AaPp][Mm])?"),
)

NaturalKey = Tuple[datetime, datetime, int]


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a CSV timestamp into a naive datetime

    Only absolute date-times are accepted; relative words such as
    ``"now"`` and partial values such as ``"2020"`` are rejected.

    Raises:
        ValueError: If the value is missing or not a timestamp
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Missing timestamp: {value!r}")

    text = value.strip()
    if not any(pattern.fullmatch(text) for pattern in _TIMESTAMP_PATTERNS):
        raise ValueError(f"Invalid timestamp: {value!r}")

    timestamp = pd.to_datetime(text)
    if pd.isna(timestamp):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert("UTC").tz_localize(None)
    return timestamp.to_pydatetime()


def parse_integer(value: Any) -> int:
    """
    Parse a whole-number literal that fits a 32-bit INTEGER column

    ``"2"`` parses, ``"2.0"`` and ``""`` do not.
    """
    if not isinstance(value, str) or not _INTEGER_PATTERN.fullmatch(value.strip()):
        raise ValueError(f"Invalid integer: {value!r}")

    number = int(value.strip())
    if not _INT32_MIN <= number <= _INT32_MAX:
        raise ValueError(f"Integer out of range: {value!r}")
    return number


def parse_decimal(value: Any) -> Decimal:
    """Parse a finite decimal amount"""
    if not isinstance(value, str):
        raise ValueError(f"Missing decimal: {value!r}")

    try:
        number = Decimal(value.strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal: {value!r}") from e

    if not number.is_finite():
        raise ValueError(f"Non-finite decimal: {value!r}")
    return number


def parse_flag(value: Any) -> str:
    """Store-and-forward flag; any present string is accepted, trimmed"""
    if not isinstance(value, str):
        raise ValueError(f"Missing flag: {value!r}")
    return value.strip()


@dataclass
class TripRecord:
    """
    A single taxi trip as loaded into the TripData table

    Records compare by value over all nine fields. They are mutable
    (normalization rewrites the flag and the pickup time in place), so
    ``values()`` gives the hashable form when one is needed.
    """

    pickup_datetime: datetime
    dropoff_datetime: datetime
    passenger_count: int
    trip_distance: Decimal
    store_and_fwd_flag: str
    pickup_location_id: int
    dropoff_location_id: int
    fare_amount: Decimal
    tip_amount: Decimal

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'TripRecord':
        """
        Build a record from a CSV row keyed by header name

        Args:
            row: Mapping of CSV column name to raw string value. Missing
                keys and non-string values count as unparseable.

        Raises:
            ValueError: If any of the nine fields cannot be parsed
        """
        return cls(
            pickup_datetime=parse_timestamp(row.get(PICKUP_DATETIME)),
            dropoff_datetime=parse_timestamp(row.get(DROPOFF_DATETIME)),
            passenger_count=parse_integer(row.get(PASSENGER_COUNT)),
            trip_distance=parse_decimal(row.get(TRIP_DISTANCE)),
            store_and_fwd_flag=parse_flag(row.get(STORE_AND_FWD_FLAG)),
            pickup_location_id=parse_integer(row.get(PICKUP_LOCATION_ID)),
            dropoff_location_id=parse_integer(row.get(DROPOFF_LOCATION_ID)),
            fare_amount=parse_decimal(row.get(FARE_AMOUNT)),
            tip_amount=parse_decimal(row.get(TIP_AMOUNT)),
        )

    @property
    def natural_key(self) -> NaturalKey:
        """Fields that identify the same trip reported more than once"""
        return (self.pickup_datetime, self.dropoff_datetime, self.passenger_count)

    @property
    def has_valid_amounts(self) -> bool:
        return self.fare_amount >= 0 and self.tip_amount >= 0

    def values(self) -> Tuple[Any, ...]:
        """Field values in TripData column order"""
        return astuple(self)

    def to_row(self) -> Dict[str, Any]:
        """Field values keyed by CSV column name"""
        return dict(zip(TRIP_COLUMNS, self.values()))


def records_to_dataframe(records: Iterable[TripRecord]) -> pd.DataFrame:
    """
    Convert records to a DataFrame with one column per TripData column

    Column order matches the table definition, so the frame can be
    copied into TripData positionally.
    """
    return pd.DataFrame([record.values() for record in records], columns=TRIP_COLUMNS)
