"""Custom exceptions for the portal catalog.

Provides a hierarchy of exceptions for different error conditions:
- CatalogError: Base exception for all catalog errors
- FetchError: Error during a portal request
- ArcGISServiceError: Portal answered with an ArcGIS error payload
- NLPModelNotAvailableError: spaCy or its language model not installed
"""


class CatalogError(Exception):
    """Base exception for catalog errors."""


class FetchError(CatalogError):
    """Error during a portal request.

    Attributes:
        url: The URL that failed to fetch.
    """

    def __init__(self, url: str, message: str) -> None:
        """Initialize FetchError.

        Args:
            url: The URL that failed to fetch.
            message: Description of what went wrong.
        """
        self.url = url
        super().__init__(f"Failed to fetch {url}: {message}")


class ArcGISServiceError(FetchError):
    """ArcGIS REST error payload.

    ArcGIS Server reports most failures with HTTP 200 and a body of the
    form ``{"error": {"code": 400, "message": "..."}}``.

    Attributes:
        code: The ArcGIS error code, if the payload carried one.
    """

    def __init__(self, url: str, message: str, code: int | None = None) -> None:
        """Initialize ArcGISServiceError.

        Args:
            url: The URL that returned the error payload.
            message: The error message from the payload.
            code: The error code from the payload.
        """
        self.code = code
        super().__init__(url, message)


class NLPModelNotAvailableError(CatalogError):
    """spaCy package or language model not installed.

    Raised when keyword extraction is requested but the tokenizer
    cannot be loaded.
    """

    def __init__(self, model: str) -> None:
        """Initialize NLPModelNotAvailableError.

        Args:
            model: Name of the spaCy model that failed to load.
        """
        self.model = model
        super().__init__(
            f"spaCy model '{model}' not available. "
            f"Run: python -m spacy download {model}"
        )
