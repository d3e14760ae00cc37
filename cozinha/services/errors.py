class ServiceError(Exception):
    pass


class CatalogUnavailableError(ServiceError):
    pass


class MalformedRecordError(ServiceError):
    pass


class GenerationError(ServiceError):
    pass


class GeminiConfigurationError(ServiceError):
    pass


class RateLimitedError(ServiceError):
    pass


class NetworkTimeoutError(ServiceError):
    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(f"Network timeout after {timeout_seconds}s: {url}")
        self.url = url
        self.timeout_seconds = timeout_seconds
