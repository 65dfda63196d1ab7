"""Utility modules"""

from .logger import get_logger, setup_pipeline_logging, PerformanceLogger, timed_operation
from .exceptions import (
    PipelineError, ConfigurationError, ExtractionError, LoaderError,
    ValidationError, ProcessingError, handle_pipeline_exception
)
