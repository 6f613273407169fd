"""
Error Types
===========

Every failure the package raises on purpose derives from FrontierCloudError.
Input problems additionally derive from ValueError so callers that only
catch ValueError keep working.
"""


class FrontierCloudError(Exception):
    """Base class for all frontier-cloud errors."""


class DataLoadError(FrontierCloudError):
    """One of the input datasets could not be fetched, read or parsed."""


class ValidationError(FrontierCloudError, ValueError):
    """A user-supplied value was rejected. No state is changed."""


class InvalidWeights(ValidationError):
    """A weight vector has a zero or non-finite sum and cannot be normalized."""


class ConfigurationError(FrontierCloudError, ValueError):
    """The loaded datasets disagree in dimension."""
