"""
Configuration management for the NYC Taxi CSV ETL pipeline
"""

import os
from dataclasses import dataclass
from typing import Optional, List
from pathlib import Path

import pandas as pd
from dotenv import find_dotenv, load_dotenv


DEFAULT_CIVIL_TIME_ZONE = "America/New_York"
DEFAULT_TABLE_NAME = "TripData"
DEFAULT_BATCH_SIZE = 10000


@dataclass
class SnowflakeConfig:
    """Snowflake connection target"""
    account: str
    username: str
    password: str
    warehouse: str
    database: str
    schema: str
    role: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'SnowflakeConfig':
        """Load Snowflake config from environment variables"""
        return cls(
            account=os.getenv('SNOWFLAKE_ACCOUNT', ''),
            username=os.getenv('SNOWFLAKE_USERNAME', ''),
            password=os.getenv('SNOWFLAKE_PASSWORD', ''),
            warehouse=os.getenv('SNOWFLAKE_WAREHOUSE', 'COMPUTE_WH'),
            database=os.getenv('SNOWFLAKE_DATABASE', 'ETLApp'),
            schema=os.getenv('SNOWFLAKE_SCHEMA', 'PUBLIC'),
            role=os.getenv('SNOWFLAKE_ROLE')
        )


@dataclass
class EtlConfig:
    """
    File locations and processing options for a single ETL run

    Defaults mirror a run from the project root against
    ``sample-cab-data.csv``.
    """
    input_path: Path
    duplicates_path: Path
    report_path: Path
    rejected_path: Optional[Path] = None
    civil_time_zone: str = DEFAULT_CIVIL_TIME_ZONE
    table_name: str = DEFAULT_TABLE_NAME
    batch_size: int = DEFAULT_BATCH_SIZE
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    def __post_init__(self):
        self.input_path = Path(self.input_path)
        self.duplicates_path = Path(self.duplicates_path)
        self.report_path = Path(self.report_path)
        if self.rejected_path:
            self.rejected_path = Path(self.rejected_path)

    @classmethod
    def from_env(cls) -> 'EtlConfig':
        """Load ETL config from environment variables"""
        return cls(
            input_path=os.getenv('INPUT_PATH', 'sample-cab-data.csv'),
            duplicates_path=os.getenv('DUPLICATES_PATH', 'duplicates.csv'),
            report_path=os.getenv('REPORT_PATH', 'row-count.txt'),
            rejected_path=os.getenv('REJECTED_PATH') or None,
            civil_time_zone=os.getenv('CIVIL_TIME_ZONE', DEFAULT_CIVIL_TIME_ZONE),
            table_name=os.getenv('TABLE_NAME', DEFAULT_TABLE_NAME),
            batch_size=int(os.getenv('BATCH_SIZE', str(DEFAULT_BATCH_SIZE))),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            log_dir=os.getenv('LOG_DIR') or None
        )


def is_known_time_zone(name: str) -> bool:
    """Check that ``name`` is an IANA zone pandas can localize to"""
    try:
        pd.Timestamp("2000-01-01").tz_localize(name)
    except (KeyError, ValueError, TypeError):
        return False
    return True


class Settings:
    """
    Main settings class that aggregates all configuration
    """

    def __init__(self, env_file: Optional[str] = None):
        """
        Args:
            env_file: Optional dotenv file; its values override the process
                environment. Without one, a `.env` found from the working
                directory upwards fills in variables that are not already set.
        """
        if env_file is None:
            load_dotenv(find_dotenv(usecwd=True))
        elif Path(env_file).exists():
            load_dotenv(env_file, override=True)

        self.snowflake = SnowflakeConfig.from_env()
        self.etl = EtlConfig.from_env()

    def get_validation_errors(self) -> List[str]:
        """Describe every problem with the current configuration"""
        errors = []

        required_snowflake_fields = {
            'SNOWFLAKE_ACCOUNT': self.snowflake.account,
            'SNOWFLAKE_USERNAME': self.snowflake.username,
            'SNOWFLAKE_PASSWORD': self.snowflake.password,
        }
        for env_name, value in required_snowflake_fields.items():
            if not value:
                errors.append(f"{env_name} is not set")

        if self.etl.batch_size <= 0:
            errors.append(f"BATCH_SIZE must be positive, got {self.etl.batch_size}")

        if not is_known_time_zone(self.etl.civil_time_zone):
            errors.append(f"Unknown CIVIL_TIME_ZONE: {self.etl.civil_time_zone}")

        return errors

    def validate(self) -> bool:
        """
        Validate that all required configuration is present

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        return not self.get_validation_errors()


# Global settings instance
settings = Settings()
