"""
Error taxonomy for the research assistant API.

Every error raised on purpose by the service carries the HTTP status it maps to
and a human readable message. The handlers registered in ``app.main`` render
them as ``{"message": ...}``.
"""

from fastapi import status


class RAGServiceError(Exception):
    """Base class for errors reported to API clients"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputError(RAGServiceError):
    """Client sent something unusable: no file, wrong file type, empty query"""

    status_code = status.HTTP_400_BAD_REQUEST


class ProcessingError(RAGServiceError):
    """A step of the PDF ingestion pipeline failed"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(f"Failed to process PDF: {detail}")
        self.detail = detail


class NotInitializedError(RAGServiceError):
    """AI components were not constructed at startup"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str = "AI components not initialized yet"):
        super().__init__(message)
