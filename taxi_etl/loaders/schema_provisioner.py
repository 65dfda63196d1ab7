"""
Database and table provisioning for the TripData landing table
"""

from typing import Dict, List

from taxi_etl.config.settings import SnowflakeConfig, DEFAULT_TABLE_NAME
from taxi_etl.loaders.connection import snowflake_connection, validate_identifier
from taxi_etl.models.trip_record import TRIP_COLUMNS
from taxi_etl.utils.logger import get_logger
from taxi_etl.utils.exceptions import PipelineError, LoaderError


TRIP_COLUMN_TYPES: Dict[str, str] = {
    "tpep_pickup_datetime": "TIMESTAMP_NTZ",
    "tpep_dropoff_datetime": "TIMESTAMP_NTZ",
    "passenger_count": "INTEGER",
    "trip_distance": "NUMBER(10, 2)",
    "store_and_fwd_flag": "VARCHAR(3)",
    "PULocationID": "INTEGER",
    "DOLocationID": "INTEGER",
    "fare_amount": "NUMBER(10, 2)",
    "tip_amount": "NUMBER(10, 2)",
}


def get_trip_table_ddl(table_name: str = DEFAULT_TABLE_NAME) -> str:
    """CREATE TABLE statement with columns in TripRecord field order"""
    column_definitions = ",\n    ".join(
        f"{column} {TRIP_COLUMN_TYPES[column]}" for column in TRIP_COLUMNS
    )
    return f"CREATE TABLE {table_name} (\n    {column_definitions}\n)"


class SchemaProvisioner:
    """
    Makes sure the target database and trip table exist

    The database is created only when missing. The table is dropped and
    created again on every run, so each run starts from an empty table.
    """

    def __init__(self, config: SnowflakeConfig, table_name: str = DEFAULT_TABLE_NAME):
        self.config = config
        self.table_name = table_name
        self.logger = get_logger(__name__)

    def ensure_database(self) -> None:
        """Create the configured database and schema if they do not exist"""
        database = validate_identifier(self.config.database)
        schema = validate_identifier(self.config.schema)

        with snowflake_connection(self.config, use_database=False) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"CREATE DATABASE IF NOT EXISTS {database}")
                cursor.execute(f"CREATE SCHEMA IF NOT EXISTS {database}.{schema}")
            finally:
                cursor.close()

        self.logger.info(f"Database {database}.{schema} is available")

    def recreate_table(self) -> None:
        """Drop the trip table if present and create it empty"""
        table_name = validate_identifier(self.table_name)
        statements: List[str] = [
            f"DROP TABLE IF EXISTS {table_name}",
            get_trip_table_ddl(table_name),
        ]

        with snowflake_connection(self.config) as conn:
            cursor = conn.cursor()
            try:
                for statement in statements:
                    cursor.execute(statement)
            finally:
                cursor.close()

        self.logger.info(f"Recreated table: {table_name}")

    def ensure_database_and_table(self) -> None:
        """
        Provision everything the loader needs

        Raises:
            LoaderError: On any connectivity, permission or DDL failure
        """
        try:
            self.ensure_database()
            self.recreate_table()
        except PipelineError:
            raise
        except Exception as e:
            raise LoaderError(
                f"Failed to provision table {self.table_name}: {str(e)}",
                context={'database': self.config.database, 'table_name': self.table_name},
                cause=e
            ) from e
