"""
Error taxonomy for the sentiment service.

Every failure that reaches the HTTP layer is a ``ServiceError`` subclass with
a stable ``kind`` and the status code it maps to.
"""


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    kind: str = "internal"
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Request body is malformed. Raised before any analysis work starts."""

    kind = "validation"
    status_code = 400


class PayloadTooLargeError(ValidationError):
    """Request body exceeds the configured size limit."""

    status_code = 413


class AnalysisError(ServiceError):
    """Sentence segmentation or classification failed."""

    kind = "analysis"
    status_code = 500


class DispatchError(ServiceError):
    """The worker pool failed to run a job, independent of the job's own errors."""

    kind = "dispatch"
    status_code = 503
