from __future__ import annotations


class IngestError(RuntimeError):
    """Raised when a platform cannot be read at all."""


class RedditAuthError(IngestError):
    pass


class TwitterAuthError(IngestError):
    pass
