"""
Snowflake bulk loader for the NYC Taxi CSV ETL pipeline
"""

from datetime import datetime, timezone
from typing import Any, Dict, Sequence

from snowflake.connector.pandas_tools import write_pandas

from taxi_etl.config.settings import SnowflakeConfig, DEFAULT_TABLE_NAME, DEFAULT_BATCH_SIZE
from taxi_etl.loaders.connection import snowflake_connection, validate_identifier
from taxi_etl.models.trip_record import TripRecord, records_to_dataframe
from taxi_etl.utils.logger import get_logger
from taxi_etl.utils.exceptions import PipelineError, LoaderError


class SnowflakeLoader:
    """
    Loads trip records into Snowflake

    - One scoped connection per operation, closed on every exit path
    - Bulk copy through ``write_pandas`` (staged files + COPY INTO)
    - The whole load runs in a single transaction: it is committed once
      every row is copied and rolled back on any failure
    """

    def __init__(self, config: SnowflakeConfig):
        """
        Args:
            config: Snowflake connection target
        """
        self.config = config
        self.logger = get_logger(__name__)

    def get_connection(self, use_database: bool = True, autocommit: bool = True):
        """Context manager for a Snowflake connection (see ``snowflake_connection``)"""
        return snowflake_connection(self.config, use_database=use_database, autocommit=autocommit)

    def bulk_load(
        self,
        records: Sequence[TripRecord],
        table_name: str = DEFAULT_TABLE_NAME,
        batch_size: int = DEFAULT_BATCH_SIZE
    ) -> Dict[str, Any]:
        """
        Insert all records into ``table_name`` in one transaction

        The DataFrame handed to the copy has exactly the table's columns
        in the table's order.

        Args:
            records: Records to load, already validated and normalized
            table_name: Target table, created by SchemaProvisioner
            batch_size: Rows per staged chunk

        Returns:
            Dictionary with load statistics

        Raises:
            LoaderError: If any part of the copy fails; nothing is committed
        """
        table_name = validate_identifier(table_name)

        if not records:
            self.logger.warning(f"No records to load into {table_name}, skipping copy")
            return {"status": "skipped", "total_records": 0, "loaded_records": 0,
                    "table_name": table_name}

        df = records_to_dataframe(records)
        total_records = len(df)
        self.logger.info(f"Starting bulk load of {total_records} records into {table_name}")

        try:
            with self.get_connection(autocommit=False) as conn:
                try:
                    success, nchunks, nrows, _ = write_pandas(
                        conn=conn,
                        df=df,
                        table_name=table_name.upper(),
                        database=self.config.database,
                        schema=self.config.schema,
                        chunk_size=batch_size,
                        compression='gzip',
                        on_error='abort_statement',
                        quote_identifiers=False,
                        use_logical_type=True
                    )

                    if not success or nrows != total_records:
                        raise LoaderError(
                            f"Bulk copy into {table_name} loaded {nrows} of {total_records} rows",
                            error_code="PARTIAL_LOAD",
                            context={'table_name': table_name, 'chunks': nchunks}
                        )

                    conn.commit()

                except Exception:
                    conn.rollback()
                    self.logger.error(f"Bulk load into {table_name} rolled back")
                    raise

        except PipelineError:
            raise
        except Exception as e:
            raise LoaderError(
                f"Failed to load records into {table_name}: {str(e)}",
                context={'table_name': table_name},
                cause=e
            ) from e

        self.logger.info(
            f"Load completed: {total_records} records loaded into {table_name}",
            extra={'chunks': nchunks, 'batch_size': batch_size}
        )

        return {
            "status": "completed",
            "total_records": total_records,
            "loaded_records": nrows,
            "chunks": nchunks,
            "table_name": table_name,
            "load_timestamp": datetime.now(timezone.utc).isoformat()
        }

    def get_row_count(self, table_name: str = DEFAULT_TABLE_NAME) -> int:
        """
        Count rows in ``table_name``

        Raises:
            LoaderError: If the query fails
        """
        table_name = validate_identifier(table_name)

        with self.get_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"SELECT COUNT(*) FROM {table_name}")
                result = cursor.fetchone()
            finally:
                cursor.close()

        return int(result[0]) if result else 0
