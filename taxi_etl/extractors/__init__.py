"""Input extraction"""

from .csv_extractor import CsvTripReader, ReadResult

__all__ = ['CsvTripReader', 'ReadResult']
