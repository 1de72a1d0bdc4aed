"""
Core record normalization functionality.

This package contains the record models, the normalizer and the
filtering/comparison helpers built on top of it.
"""

from .normalizer import RecordNormalizer, derive_fqdn, is_malformed, normalize
from .record_manager import RecordManager, filter_records
from .records import NormalizedRecord, RawRecord

__all__ = [
    "RecordNormalizer",
    "RecordManager",
    "NormalizedRecord",
    "RawRecord",
    "derive_fqdn",
    "filter_records",
    "is_malformed",
    "normalize",
]
