from __future__ import annotations

from cozinha.services.errors import (
    CatalogUnavailableError,
    GeminiConfigurationError,
    GenerationError,
    MalformedRecordError,
    NetworkTimeoutError,
    RateLimitedError,
    ServiceError,
)


class TestServiceErrors:
    def test_subclasses(self) -> None:
        for error_type in (
            CatalogUnavailableError,
            MalformedRecordError,
            GenerationError,
            GeminiConfigurationError,
            RateLimitedError,
        ):
            assert issubclass(error_type, ServiceError)

    def test_network_timeout_keeps_url_and_timeout(self) -> None:
        error = NetworkTimeoutError("https://example.com/search.php", 5.0)

        assert isinstance(error, ServiceError)
        assert error.url == "https://example.com/search.php"
        assert error.timeout_seconds == 5.0
        assert str(error) == "Network timeout after 5.0s: https://example.com/search.php"
