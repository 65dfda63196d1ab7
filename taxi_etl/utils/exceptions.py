# taxi_etl/utils/exceptions.py
"""
Custom exceptions for the NYC Taxi CSV ETL pipeline
"""

from typing import Optional, Dict, Any


class PipelineError(Exception):
    """
    Base exception for all pipeline errors

    Carries an error code, context information and the original cause
    so failures can be logged as structured records
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize pipeline error

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code for categorization
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context,
            'cause': str(self.cause) if self.cause else None
        }

    def __str__(self) -> str:
        base_msg = f"{self.error_code}: {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" (Context: {context_str})"
        if self.cause:
            base_msg += f" (Caused by: {self.cause})"
        return base_msg


class ConfigurationError(PipelineError):
    """
    Raised when there are configuration issues

    Examples:
    - Missing Snowflake credentials
    - Non-positive batch size
    - Unknown civil time zone name
    """
    pass


class ExtractionError(PipelineError):
    """
    Raised while reading the input CSV file

    Examples:
    - Input file does not exist
    - File is not readable or has no header row
    """
    pass


class LoaderError(PipelineError):
    """
    Raised during database operations

    Examples:
    - Connection or permission failures
    - DDL failures while provisioning the schema
    - Bulk copy failures (the transaction is rolled back)
    - Row count query failures
    """
    pass


class ValidationError(PipelineError):
    """Raised when a record or a configuration value fails validation"""
    pass


class ProcessingError(PipelineError):
    """
    Raised during record transformation

    Examples:
    - Pickup time falls in a daylight-saving gap of the civil time zone
    - Side-output files cannot be written
    """
    pass


def handle_pipeline_exception(
    func_name: str,
    exception: Exception,
    context: Optional[Dict[str, Any]] = None
) -> PipelineError:
    """
    Convert generic exceptions to pipeline-specific exceptions

    Args:
        func_name: Name of the function where error occurred
        exception: Original exception
        context: Additional context information

    Returns:
        Appropriate PipelineError subclass
    """
    if isinstance(exception, PipelineError):
        return exception

    error_context = {
        'function': func_name,
        **(context or {})
    }

    if isinstance(exception, FileNotFoundError):
        return ExtractionError(
            f"File not found in {func_name}: {str(exception)}",
            error_code="FILE_NOT_FOUND",
            context=error_context,
            cause=exception
        )

    elif isinstance(exception, PermissionError):
        return ProcessingError(
            f"Permission denied in {func_name}: {str(exception)}",
            error_code="PERMISSION_DENIED",
            context=error_context,
            cause=exception
        )

    elif isinstance(exception, (ConnectionError, TimeoutError)):
        return LoaderError(
            f"Network error in {func_name}: {str(exception)}",
            error_code="NETWORK_ERROR",
            context=error_context,
            cause=exception
        )

    elif isinstance(exception, ValueError):
        return ValidationError(
            f"Data validation error in {func_name}: {str(exception)}",
            error_code="VALIDATION_ERROR",
            context=error_context,
            cause=exception
        )

    else:
        return PipelineError(
            f"Unexpected error in {func_name}: {str(exception)}",
            error_code="UNKNOWN_ERROR",
            context=error_context,
            cause=exception
        )
