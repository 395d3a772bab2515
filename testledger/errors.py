"""Exceptions raised by the reporter."""


class TestledgerError(Exception):
    """Base class of all reporter errors."""
    __test__ = False


class ConfigError(TestledgerError):
    """A required setting is missing or invalid."""


class AggregationError(TestledgerError):
    """The log directory cannot be turned into a report at all."""


class LogParseError(TestledgerError):
    """A single reporter log file could not be read or parsed."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f'{filename}: {reason}')
        self.filename = filename
        self.reason = reason
