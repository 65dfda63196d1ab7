"""
Final row count reporting
"""

import sys
from pathlib import Path
from typing import TextIO, Optional, Union

from taxi_etl.utils.logger import get_logger
from taxi_etl.utils.exceptions import ProcessingError


def format_row_count(row_count: int) -> str:
    return f"Number of rows: {row_count}"


class RowCountReporter:
    """Writes the loaded row count to stdout and to a text file"""

    def __init__(self, report_path: Union[str, Path], stream: Optional[TextIO] = None):
        self.report_path = Path(report_path)
        self.stream = stream
        self.logger = get_logger(__name__)

    def report(self, row_count: int) -> str:
        """
        Publish the row count

        Args:
            row_count: Rows found in the destination table

        Returns:
            The report line
        """
        line = format_row_count(row_count)
        print(line, file=self.stream or sys.stdout)

        try:
            self.report_path.parent.mkdir(parents=True, exist_ok=True)
            self.report_path.write_text(line, encoding="utf-8")
        except OSError as e:
            raise ProcessingError(
                f"Failed to write report file {self.report_path}: {str(e)}",
                context={'report_path': str(self.report_path)},
                cause=e
            ) from e

        self.logger.info(f"Wrote row count report to {self.report_path}", extra={'row_count': row_count})
        return line
