"""
Engine exceptions.

ConfigurationError is a ValueError so callers that already guard configuration
loading with `except ValueError` (which also catches pydantic's ValidationError)
keep working. Collaborator failures are never raised; they become warnings on
the result.
"""


class SlateEngineError(ValueError):
    """Base class for errors raised by the slate engine."""


class ConfigurationError(SlateEngineError):
    """Bad weight set or engine configuration, detected at load time."""
