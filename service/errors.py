"""Domain errors raised by the service and store layers"""


class DomainValidationError(Exception):
    """Missing or invalid client input"""
    def __init__(self, message: str, code: str = "VALIDATION_FAILED"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(Exception):
    """Requested record does not exist"""
    def __init__(self, message: str = "Video not found", code: str = "NOT_FOUND"):
        self.message = message
        self.code = code
        super().__init__(message)


class UpstreamStoreError(Exception):
    """Catalog or object store call failed; message is passed through verbatim"""
    def __init__(self, message: str, code: str = "UPSTREAM_UNAVAILABLE"):
        self.message = message
        self.code = code
        super().__init__(message)


class StreamingFailure(Exception):
    """Upstream broke after the response body started; only loggable, never a status"""
    def __init__(self, message: str, code: str = "STREAM_INTERRUPTED"):
        self.message = message
        self.code = code
        super().__init__(message)
