"""
NYC Taxi CSV ETL

Loads a CSV of yellow taxi trips into a Snowflake table after removing
duplicates and invalid rows, then reports the loaded row count.
"""

__version__ = "1.0.0"
__author__ = "Data Engineering Team"
