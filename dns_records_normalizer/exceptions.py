"""
Exceptions raised by the DNS Records Normalizer.
"""


class NormalizerError(Exception):
    """Base class for all normalizer errors."""


class RecordExtractionError(NormalizerError):
    """A record that passed the malformed-input guard could not be mapped."""

    def __init__(self, message, record_type=None, field=None):
        super(RecordExtractionError, self).__init__(message)
        self.record_type = record_type
        self.field = field


class SourceError(NormalizerError):
    """A record source could not load the requested zone."""
