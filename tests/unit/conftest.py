# tests/unit/conftest.py
"""
Shared pytest fixtures for the taxi ETL unit tests
"""

import csv
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock

import pytest

from taxi_etl.config.settings import SnowflakeConfig, EtlConfig, Settings
from taxi_etl.models.trip_record import TripRecord, TRIP_COLUMNS


def write_trip_csv(path: Path, rows, columns=None) -> Path:
    """Write rows (lists of raw strings) under a header to ``path``"""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(columns or TRIP_COLUMNS)
        writer.writerows(rows)
    return path


def make_record(**overrides) -> TripRecord:
    """Build a valid TripRecord, overriding any field by name"""
    values = {
        'pickup_datetime': datetime(2020, 6, 1, 10, 0, 0),
        'dropoff_datetime': datetime(2020, 6, 1, 10, 20, 0),
        'passenger_count': 1,
        'trip_distance': Decimal("2.50"),
        'store_and_fwd_flag': "N",
        'pickup_location_id': 142,
        'dropoff_location_id': 236,
        'fare_amount': Decimal("11.00"),
        'tip_amount': Decimal("2.00"),
    }
    values.update(overrides)
    return TripRecord(**values)


class FakeSnowflake:
    """
    Stand-in for the Snowflake server behind ``connect`` and ``write_pandas``

    Tracks the rows committed to the trip table so COUNT(*) reflects the
    most recent load, and DROP TABLE empties it.
    """

    def __init__(self):
        self.committed_rows = 0
        self.pending_rows = 0
        self.statements = []
        self.loaded_frames = []
        self.connections = []

    def connect(self, **kwargs):
        connection = Mock()
        connection.connect_kwargs = kwargs
        cursor = Mock()
        cursor.execute.side_effect = self._execute
        cursor.fetchone.side_effect = lambda: (self.committed_rows,)
        connection.cursor.return_value = cursor
        connection.commit.side_effect = self._commit
        connection.rollback.side_effect = self._rollback
        self.connections.append(connection)
        return connection

    def write_pandas(self, conn, df, table_name, **kwargs):
        self.loaded_frames.append(df.copy())
        self.pending_rows += len(df)
        return True, 1, len(df), None

    def _execute(self, statement, *args):
        self.statements.append(statement)
        if statement.startswith("DROP TABLE"):
            self.committed_rows = 0

    def _commit(self):
        self.committed_rows += self.pending_rows
        self.pending_rows = 0

    def _rollback(self):
        self.pending_rows = 0


@pytest.fixture
def snowflake_config():
    """Create Snowflake configuration for testing"""
    return SnowflakeConfig(
        account="test_account",
        username="test_user",
        password="test_password",
        warehouse="test_warehouse",
        database="test_database",
        schema="test_schema"
    )


@pytest.fixture
def etl_config(tmp_path):
    """ETL configuration with every file under a temporary directory"""
    return EtlConfig(
        input_path=tmp_path / "sample-cab-data.csv",
        duplicates_path=tmp_path / "duplicates.csv",
        report_path=tmp_path / "row-count.txt",
    )


@pytest.fixture
def test_settings(snowflake_config, etl_config):
    """Settings object wired to the test configs instead of the environment"""
    settings = Settings()
    settings.snowflake = snowflake_config
    settings.etl = etl_config
    return settings


@pytest.fixture
def mock_snowflake_connection():
    """Create a mock Snowflake connection"""
    connection = Mock()
    cursor = Mock()
    connection.cursor.return_value = cursor

    cursor.execute.return_value = None
    cursor.fetchone.return_value = None
    cursor.close.return_value = None
    connection.close.return_value = None

    return connection


@pytest.fixture
def fake_snowflake():
    return FakeSnowflake()


@pytest.fixture
def sample_records():
    """Three distinct, valid records"""
    return [
        make_record(),
        make_record(pickup_datetime=datetime(2020, 6, 1, 11, 0), passenger_count=2),
        make_record(pickup_datetime=datetime(2020, 6, 1, 12, 0), store_and_fwd_flag="Y"),
    ]


@pytest.fixture
def five_row_csv(etl_config):
    """
    Five rows: rows 2 and 4 share pickup, dropoff and passenger count
    (row 4 has a different fare), row 3 has a negative fare
    """
    rows = [
        ["2020-06-01 10:00:00", "2020-06-01 10:20:00", "1", "2.50", "N", "142", "236", "11.00", "2.00"],
        ["2020-06-01 11:00:00", "2020-06-01 11:30:00", "2", "5.10", "Y", "100", "200", "20.50", "3.00"],
        ["2020-06-01 12:00:00", "2020-06-01 12:10:00", "1", "1.00", "N", "50", "60", "-1", "0.00"],
        ["2020-06-01 11:00:00", "2020-06-01 11:30:00", "2", "5.10", "Y", "100", "200", "21.00", "3.00"],
        ["2020-06-01 13:00:00", "2020-06-01 13:45:00", "3", "9.80", " N ", "10", "20", "35.00", "7.25"],
    ]
    return write_trip_csv(etl_config.input_path, rows)


@pytest.fixture
def record_factory():
    """Factory for valid TripRecords with per-field overrides"""
    return make_record


@pytest.fixture
def csv_writer():
    """Helper that writes raw CSV rows under a header"""
    return write_trip_csv
