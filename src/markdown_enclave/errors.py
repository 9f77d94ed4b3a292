"""Exceptions raised by markdown-enclave."""


class EnclaveError(Exception):
    """Base class for markdown-enclave errors."""


class UrlParseError(EnclaveError):
    """Raised when an image destination is not a parseable URL."""

    def __init__(self, destination: str, reason: str):
        self.destination = destination
        self.reason = reason
        super().__init__(f"failed to parse url: {destination}, {reason}")


class RenderError(EnclaveError):
    """Raised when an enclave cannot be turned into HTML."""
