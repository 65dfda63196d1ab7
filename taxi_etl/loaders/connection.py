"""
Scoped Snowflake connections shared by the provisioner and the loader
"""

import re
from contextlib import contextmanager

import snowflake.connector

from taxi_etl.config.settings import SnowflakeConfig
from taxi_etl.utils.logger import get_logger
from taxi_etl.utils.exceptions import ConfigurationError, LoaderError


_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_$]*")

logger = get_logger(__name__)


def validate_identifier(name: str) -> str:
    """
    Reject names that cannot be used as unquoted SQL identifiers

    Database, schema and table names are interpolated into DDL, so they
    are restricted to letters, digits, ``_`` and ``$``.
    """
    if not name or not _IDENTIFIER_PATTERN.fullmatch(name):
        raise ConfigurationError(
            f"Invalid SQL identifier: {name!r}",
            error_code="INVALID_IDENTIFIER",
            context={'identifier': name}
        )
    return name


@contextmanager
def snowflake_connection(
    config: SnowflakeConfig,
    use_database: bool = True,
    autocommit: bool = True
):
    """
    Open a Snowflake connection for the duration of a ``with`` block

    Args:
        config: Connection target
        use_database: Select the configured database and schema. Pass
            False for server-level statements such as CREATE DATABASE.
        autocommit: Pass False to control the transaction explicitly

    Raises:
        LoaderError: On connection failure or any Snowflake error raised
            inside the block. The connection is closed on every path.
    """
    connection = None
    connect_args = {
        'account': config.account,
        'user': config.username,
        'password': config.password,
        'warehouse': config.warehouse,
        'role': config.role,
        'autocommit': autocommit,
    }
    if use_database:
        connect_args['database'] = config.database
        connect_args['schema'] = config.schema

    try:
        connection = snowflake.connector.connect(**connect_args)
        logger.info("Connected to Snowflake successfully")
        yield connection

    except snowflake.connector.errors.Error as e:
        logger.error(f"Snowflake operation failed: {str(e)}")
        raise LoaderError(
            f"Snowflake operation failed: {str(e)}",
            context={'account': config.account, 'database': config.database},
            cause=e
        ) from e

    finally:
        if connection:
            connection.close()
            logger.info("Snowflake connection closed")
