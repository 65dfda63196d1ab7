"""Data models"""

from .trip_record import TripRecord, TRIP_COLUMNS, records_to_dataframe

__all__ = ['TripRecord', 'TRIP_COLUMNS', 'records_to_dataframe']
