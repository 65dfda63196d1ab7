"""
Main orchestrator for the NYC Taxi CSV ETL pipeline
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from taxi_etl.config.settings import Settings, settings as global_settings
from taxi_etl.extractors.csv_extractor import CsvTripReader
from taxi_etl.loaders.schema_provisioner import SchemaProvisioner
from taxi_etl.loaders.snowflake_loader import SnowflakeLoader
from taxi_etl.reporting.row_count_reporter import RowCountReporter
from taxi_etl.transformers.deduplicator import Deduplicator
from taxi_etl.transformers.normalizer import RecordNormalizer
from taxi_etl.transformers.validator import RecordValidator
from taxi_etl.utils.logger import get_logger, PerformanceLogger, timed_operation
from taxi_etl.utils.exceptions import ConfigurationError, PipelineError, handle_pipeline_exception


@dataclass
class EtlResult:
    """Record counts and timing for one ETL run"""
    status: str
    rows_read: int
    malformed_rows: int
    unique_rows: int
    duplicate_rows: int
    rejected_rows: int
    loaded_rows: int
    row_count: int
    processing_time_seconds: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class EtlPipeline:
    """
    Runs the CSV to Snowflake ETL once, stage by stage:

    provision -> read -> deduplicate -> validate -> normalize -> load -> count -> report

    Stages run sequentially; every stage is timed and logged. Dropped
    rows (malformed, duplicate, rejected) do not fail the run but are
    counted in the ``EtlResult``. Any other failure stops the run and is
    raised as a PipelineError.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or global_settings
        self.logger = get_logger(__name__)
        self.performance_logger = PerformanceLogger(__name__)

        errors = self.settings.get_validation_errors()
        if errors:
            raise ConfigurationError(
                "Invalid configuration - check required environment variables",
                context={'errors': errors}
            )

        etl = self.settings.etl
        self.provisioner = SchemaProvisioner(self.settings.snowflake, etl.table_name)
        self.reader = CsvTripReader(etl.input_path)
        self.deduplicator = Deduplicator(etl.duplicates_path)
        self.validator = RecordValidator(etl.rejected_path)
        self.normalizer = RecordNormalizer(etl.civil_time_zone)
        self.loader = SnowflakeLoader(self.settings.snowflake)
        self.reporter = RowCountReporter(etl.report_path)

        self.logger.info("ETL pipeline initialized successfully")

    def run(self) -> EtlResult:
        """
        Execute every stage once

        Returns:
            EtlResult with per-stage record counts

        Raises:
            PipelineError: If any stage fails
        """
        start_time = datetime.now(timezone.utc)
        etl = self.settings.etl

        try:
            with timed_operation("provision_schema", self.logger):
                self.provisioner.ensure_database_and_table()

            with timed_operation("read_csv", self.logger):
                read_result = self.reader.read()

            with timed_operation("deduplicate", self.logger):
                dedup_result = self.deduplicator.deduplicate(read_result.records)

            with timed_operation("validate", self.logger):
                validation_result = self.validator.filter(dedup_result.unique)

            with timed_operation("normalize", self.logger):
                records = self.normalizer.normalize(validation_result.valid)

            with timed_operation("bulk_load", self.logger):
                load_stats = self.loader.bulk_load(records, etl.table_name, etl.batch_size)

            with timed_operation("count_rows", self.logger):
                row_count = self.loader.get_row_count(etl.table_name)

            self.reporter.report(row_count)

        except Exception as e:
            error = handle_pipeline_exception("run", e, {'input_path': str(etl.input_path)})
            self.performance_logger.log_error_metrics(error.error_code, error.message)
            self.logger.error(f"ETL run failed: {error}", exc_info=True)
            if error is e:
                raise
            raise error from e

        result = EtlResult(
            status="completed",
            rows_read=read_result.rows_read,
            malformed_rows=read_result.malformed_rows,
            unique_rows=len(dedup_result.unique),
            duplicate_rows=dedup_result.removed_count,
            rejected_rows=len(validation_result.rejected),
            loaded_rows=load_stats['loaded_records'],
            row_count=row_count,
            processing_time_seconds=(datetime.now(timezone.utc) - start_time).total_seconds()
        )

        self.performance_logger.log_data_metrics(**result.to_dict())
        self.logger.info(f"ETL run completed: {row_count} rows in {etl.table_name}")
        return result
