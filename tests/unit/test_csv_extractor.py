# tests/unit/test_csv_extractor.py
"""Tests for CsvTripReader."""

import warnings
from datetime import datetime
from decimal import Decimal

import pandas as pd
import pytest

from taxi_etl.extractors.csv_extractor import CsvTripReader
from taxi_etl.utils.exceptions import ExtractionError


VALID_ROW = ["2020-06-01 10:00:00", "2020-06-01 10:20:00", "1", "2.50", "N", "142", "236", "11.00", "2.00"]


class TestCsvTripReaderBasic:
    """Test parsing of well-formed files."""

    def test_reads_all_valid_rows(self, tmp_path, csv_writer):
        path = csv_writer(tmp_path / "trips.csv", [VALID_ROW, VALID_ROW])

        result = CsvTripReader(path).read()

        assert result.rows_read == 2
        assert result.malformed_rows == 0
        assert len(result.records) == 2
        assert result.records[0].pickup_datetime == datetime(2020, 6, 1, 10, 0, 0)
        assert result.records[0].fare_amount == Decimal("11.00")

    def test_header_order_does_not_matter(self, tmp_path, csv_writer):
        columns = [
            "tip_amount", "fare_amount", "DOLocationID", "PULocationID", "store_and_fwd_flag",
            "trip_distance", "passenger_count", "tpep_dropoff_datetime", "tpep_pickup_datetime",
        ]
        path = csv_writer(tmp_path / "trips.csv", [list(reversed(VALID_ROW))], columns=columns)

        result = CsvTripReader(path).read()

        assert len(result.records) == 1
        assert result.records[0].pickup_location_id == 142
        assert result.records[0].tip_amount == Decimal("2.00")

    def test_extra_columns_are_ignored(self, tmp_path, csv_writer):
        columns = ["VendorID"] + [
            "tpep_pickup_datetime", "tpep_dropoff_datetime", "passenger_count", "trip_distance",
            "store_and_fwd_flag", "PULocationID", "DOLocationID", "fare_amount", "tip_amount",
        ] + ["total_amount"]
        path = csv_writer(tmp_path / "trips.csv", [["2"] + VALID_ROW + ["13.00"]], columns=columns)

        result = CsvTripReader(path).read()

        assert len(result.records) == 1
        assert result.malformed_rows == 0

    def test_flag_is_trimmed_and_empty_flag_is_valid(self, tmp_path, csv_writer):
        rows = [VALID_ROW[:4] + ["  Y "] + VALID_ROW[5:], VALID_ROW[:4] + [""] + VALID_ROW[5:]]
        path = csv_writer(tmp_path / "trips.csv", rows)

        result = CsvTripReader(path).read()

        assert [r.store_and_fwd_flag for r in result.records] == ["Y", ""]

    def test_header_only_file(self, tmp_path, csv_writer):
        path = csv_writer(tmp_path / "trips.csv", [])

        result = CsvTripReader(path).read()

        assert result.records == []
        assert result.rows_read == 0


class TestCsvTripReaderMalformedRows:
    """Malformed rows are dropped and only counted."""

    @pytest.mark.parametrize("index,bad_value", [
        (0, "yesterday"),
        (0, "now"),
        (1, "2020"),
        (1, ""),
        (2, "1.5"),
        (3, "far"),
        (5, "abc"),
        (6, ""),
        (7, "free"),
        (8, "n/a"),
    ])
    def test_unparseable_field_drops_row(self, tmp_path, csv_writer, index, bad_value):
        bad_row = list(VALID_ROW)
        bad_row[index] = bad_value
        path = csv_writer(tmp_path / "trips.csv", [VALID_ROW, bad_row, VALID_ROW])

        result = CsvTripReader(path).read()

        assert len(result.records) == 2
        assert result.rows_read == 3
        assert result.malformed_rows == 1

    def test_short_row_is_dropped(self, tmp_path):
        path = tmp_path / "trips.csv"
        path.write_text(
            ",".join([
                "tpep_pickup_datetime", "tpep_dropoff_datetime", "passenger_count", "trip_distance",
                "store_and_fwd_flag", "PULocationID", "DOLocationID", "fare_amount", "tip_amount",
            ]) + "\n"
            + ",".join(VALID_ROW) + "\n"
            + ",".join(VALID_ROW[:6]) + "\n"
        )

        result = CsvTripReader(path).read()

        assert len(result.records) == 1
        assert result.malformed_rows == 1

    def test_short_and_long_rows_do_not_warn(self, tmp_path, csv_writer):
        path = csv_writer(tmp_path / "trips.csv", [VALID_ROW, VALID_ROW[:6], VALID_ROW + ["extra"]])

        with warnings.catch_warnings():
            warnings.simplefilter("error", pd.errors.ParserWarning)
            result = CsvTripReader(path).read()

        assert result.rows_read == 3
        assert result.malformed_rows == 1

    def test_long_row_keeps_header_fields(self, tmp_path):
        path = tmp_path / "trips.csv"
        path.write_text(
            ",".join([
                "tpep_pickup_datetime", "tpep_dropoff_datetime", "passenger_count", "trip_distance",
                "store_and_fwd_flag", "PULocationID", "DOLocationID", "fare_amount", "tip_amount",
            ]) + "\n"
            + ",".join(VALID_ROW + ["surplus"]) + "\n"
        )

        result = CsvTripReader(path).read()

        assert len(result.records) == 1
        assert result.records[0].tip_amount == Decimal("2.00")

    def test_missing_required_column_drops_every_row(self, tmp_path, csv_writer):
        columns = [
            "tpep_pickup_datetime", "tpep_dropoff_datetime", "passenger_count", "trip_distance",
            "store_and_fwd_flag", "PULocationID", "DOLocationID", "fare_amount",
        ]
        path = csv_writer(tmp_path / "trips.csv", [VALID_ROW[:8], VALID_ROW[:8]], columns=columns)

        result = CsvTripReader(path).read()

        assert result.records == []
        assert result.malformed_rows == 2


class TestCsvTripReaderErrors:
    """File-level failures are raised."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ExtractionError) as exc_info:
            CsvTripReader(tmp_path / "missing.csv").read()

        assert exc_info.value.error_code == "FILE_NOT_FOUND"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")

        with pytest.raises(ExtractionError) as exc_info:
            CsvTripReader(path).read()

        assert exc_info.value.error_code == "EMPTY_FILE"
