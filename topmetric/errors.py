"""Exception hierarchy for the result pipeline.

Everything raised on purpose inherits from ``TopMetricError`` so the
presentation layer can tell "nothing found" apart from "something broke".
"""


class TopMetricError(Exception):
    """Base exception for all topmetric errors."""


class UpstreamFailure(TopMetricError):
    """The trending service reported ``success: false`` or returned garbage."""

    DEFAULT_MESSAGE = "Trending analysis failed"

    def __init__(self, message=None):
        self.message = message or self.DEFAULT_MESSAGE
        super().__init__(self.message)


class ExportError(TopMetricError):
    """Raised when a result set cannot be exported (e.g. it is empty)."""


class InvalidTierError(TopMetricError):
    """Raised for a quality tier key that is not defined."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"Unknown quality tier: {key!r}")
