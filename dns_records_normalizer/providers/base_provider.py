"""
Base record source interface.

This module defines the abstract base class that all DNS record sources must implement.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from ..core.records import RawRecord


class DNSProvider(ABC):
    """Abstract base class for DNS record sources."""

    @abstractmethod
    def get_records(self, zone: str, zone_file: str = None) -> Iterable[RawRecord]:
        """Get all raw DNS records for a zone, optionally from an explicit zone file."""
        pass
