"""Typed exceptions for keyword parsing, value generation and processes."""


class KeywordError(ValueError):
    """Base class for keyword generator errors."""


class InvalidFormatError(KeywordError):
    """Raised when a keyword string is malformed or contains unknown text."""


class InvalidArgumentError(KeywordError):
    """Raised when a generator is configured with an invalid value."""


class ProcessError(RuntimeError):
    """Base class for external process errors."""


class ProcessTimeoutError(ProcessError):
    """Raised when a process does not finish within the allotted time."""
