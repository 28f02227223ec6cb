"""Exceptions raised inside the PhishCheck engine."""


class PhishCheckError(Exception):
    """Base class for engine errors."""


class MalformedURL(PhishCheckError, ValueError):
    """Input cannot be parsed as an absolute URL with a scheme and host."""


class SignalSourceUnavailable(PhishCheckError, RuntimeError):
    """An external reputation source timed out, errored or returned garbage."""
