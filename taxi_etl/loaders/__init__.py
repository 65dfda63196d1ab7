"""Database provisioning and loading"""

from .schema_provisioner import SchemaProvisioner, get_trip_table_ddl
from .snowflake_loader import SnowflakeLoader

__all__ = ['SchemaProvisioner', 'SnowflakeLoader', 'get_trip_table_ddl']
