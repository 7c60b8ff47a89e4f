"""Error taxonomy shared by all registry clients and geometry helpers."""

from __future__ import annotations


class PdokError(Exception):
    """Base exception for all pdok-apis errors."""


class NetworkFailure(PdokError):
    """The request could not be sent or no response was received."""

    def __init__(self, url: str, cause: Exception | None = None):
        self.url = url
        self.cause = cause
        reason = f"{type(cause).__name__}: {cause}" if cause else "no response"
        super().__init__(f"Request to {url} failed ({reason})")


class DecodeFailure(PdokError):
    """A response was received but did not have the expected shape."""

    def __init__(self, url: str, detail: str, status_code: int | None = None):
        self.url = url
        self.detail = detail
        self.status_code = status_code
        prefix = f"HTTP {status_code} from" if status_code else "Undecodable response from"
        super().__init__(f"{prefix} {url}: {detail}")


class EmptyResult(PdokError):
    """A well-formed response contained zero entities where at least one was expected."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"No results for {query}")


class MalformedGeometry(PdokError):
    """A geometry payload violated the 2D/3D position contract."""

    def __init__(self, position: object, detail: str = "position must have 2 or 3 components"):
        self.position = position
        super().__init__(f"Malformed geometry at {position!r}: {detail}")
