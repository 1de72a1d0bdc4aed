"""
Mock record source for testing and demonstration.

This module provides a record source that serves raw records from memory.
"""

import logging
from typing import Dict, Iterator, List

from .base_provider import DNSProvider
from ..core.records import RawRecord

logger = logging.getLogger(__name__)


class MockDNSProvider(DNSProvider):
    """Mock record source for testing and demonstration purposes."""

    def __init__(self, config: Dict = None):
        """Initialize mock provider, optionally seeded with ``records``."""
        self.records: List[RawRecord] = list((config or {}).get("records", []))
        logger.info("Mock DNS provider initialized")

    def add_record(self, record: RawRecord) -> None:
        """Append a raw record to the served set."""
        self.records.append(record)

    def get_records(self, zone: str, zone_file: str = None) -> Iterator[RawRecord]:
        """Get all raw records, regardless of zone."""
        logger.info(f"Mock: Serving {len(self.records)} records for {zone}")
        return iter(list(self.records))
