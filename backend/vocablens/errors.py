class VocabLensError(Exception):
    """Base class for every error raised by the gateway and the word store."""


class ConfigurationError(VocabLensError):
    """No usable API credential is configured."""


class UpstreamError(VocabLensError):
    """The model endpoint answered with a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class MalformedResponseError(VocabLensError):
    """The endpoint answered but the completion did not match the expected shape."""

    def __init__(self, message: str, payload: str | None = None):
        super().__init__(message)
        self.payload = payload


class PersistenceError(VocabLensError):
    """Writing to local storage failed."""
