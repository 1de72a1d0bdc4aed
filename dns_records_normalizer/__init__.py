"""
DNS Records Normalizer - Uniform export of DNS resource records

Reshapes DNS resource records of every type into one flat, ordered record
shape suitable for CSV/JSON export, filtering and comparison.
"""

__version__ = "1.0.0"
__author__ = "DNS Records Normalizer Team"
__description__ = "Normalize DNS resource records for export and reporting"

from .core.export_manager import ExportManager
from .core.normalizer import RecordNormalizer, normalize
from .core.records import NormalizedRecord, RawRecord
from .providers.dns_client import DNSClient

__all__ = [
    "ExportManager",
    "RecordNormalizer",
    "NormalizedRecord",
    "RawRecord",
    "DNSClient",
    "normalize",
]
