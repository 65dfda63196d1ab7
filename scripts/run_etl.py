# scripts/run_etl.py
"""
Main execution script for the NYC Taxi CSV ETL pipeline

Input, output and connection settings come from environment variables
(optionally from a .env file); the flags below only control logging and
how the run summary is printed.

Usage Examples:
    # Run with settings from the environment / .env
    python scripts/run_etl.py

    # Use a specific env file and debug logging
    python scripts/run_etl.py --env-file prod.env --log-level DEBUG

    # Check configuration without touching the database
    python scripts/run_etl.py --validate-config
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from taxi_etl.config.settings import Settings
from taxi_etl.orchestrator.etl_pipeline import EtlPipeline, EtlResult
from taxi_etl.utils.logger import setup_pipeline_logging, get_logger
from taxi_etl.utils.exceptions import PipelineError, ConfigurationError


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='NYC Taxi CSV ETL',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        '--env-file',
        default='.env',
        help='Dotenv file with configuration overrides (default: .env, if present)'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: LOG_LEVEL or INFO)'
    )

    parser.add_argument(
        '--log-dir',
        type=str,
        help='Directory for log files (default: LOG_DIR or console only)'
    )

    parser.add_argument(
        '--validate-config',
        action='store_true',
        help='Validate configuration and exit'
    )

    parser.add_argument(
        '--output-format',
        choices=['text', 'json'],
        default='text',
        help='Format of the run summary (default: text)'
    )

    return parser.parse_args(argv)


def print_results(result: EtlResult, output_format: str):
    """Print the run summary"""
    if output_format == 'json':
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print("=== ETL Results ===")
        print(f"Status: {result.status}")
        print(f"Rows Read: {result.rows_read:,}")
        print(f"Malformed Rows Skipped: {result.malformed_rows:,}")
        print(f"Duplicate Rows Removed: {result.duplicate_rows:,}")
        print(f"Invalid Rows Rejected: {result.rejected_rows:,}")
        print(f"Rows Loaded: {result.loaded_rows:,}")
        print(f"Processing Time: {result.processing_time_seconds:.2f} seconds")


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)
    settings = Settings(env_file=args.env_file)

    log_level = args.log_level or settings.etl.log_level
    setup_pipeline_logging(log_level=log_level, log_dir=args.log_dir or settings.etl.log_dir)
    logger = get_logger(__name__)

    try:
        if args.validate_config:
            errors = settings.get_validation_errors()
            if not errors:
                print("✓ Configuration is valid")
                return 0
            print("✗ Configuration is invalid:")
            for error in errors:
                print(f"  - {error}")
            return 1

        logger.info("Starting NYC Taxi CSV ETL")
        result = EtlPipeline(settings).run()

        print_results(result, args.output_format)
        logger.info("Pipeline completed successfully")
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}")
        return 1

    except PipelineError as e:
        print(f"Pipeline Error: {e}")
        return 2

    except KeyboardInterrupt:
        print("\nPipeline interrupted by user")
        return 130

    except Exception as e:
        print(f"Unexpected error: {e}")
        if log_level == 'DEBUG':
            import traceback
            traceback.print_exc()
        return 3


if __name__ == '__main__':
    sys.exit(main())
