"""Run reporting"""

from .row_count_reporter import RowCountReporter, format_row_count

__all__ = ['RowCountReporter', 'format_row_count']
