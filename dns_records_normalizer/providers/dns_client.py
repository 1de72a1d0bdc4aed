"""
DNS Client - Unified interface for DNS record sources

This module provides a common interface for the configured record sources,
currently supporting BIND (zone file or zone transfer) and an in-memory mock.
"""

import logging
from typing import Dict, Iterable

from .base_provider import DNSProvider
from .bind_provider import BINDProvider
from .mock_provider import MockDNSProvider
from ..core.records import RawRecord

logger = logging.getLogger(__name__)


class DNSClient:
    """Unified DNS client that supports multiple record sources."""

    def __init__(self, config: Dict):
        """Initialize DNS client with configuration."""
        self.config = config
        self.provider = self._get_provider()

    def _get_provider(self) -> DNSProvider:
        """Get record source based on configuration."""
        provider_name = self.config.get("default_provider", "bind")
        provider_config = self.config.get("dns_providers", {}).get(provider_name) or {}

        if provider_name == "bind":
            return BINDProvider(provider_config)
        elif provider_name == "mock":
            return MockDNSProvider(provider_config)
        else:
            logger.warning(f"Unknown provider '{provider_name}', using mock provider")
            return MockDNSProvider()

    def get_records(self, zone: str, zone_file: str = None) -> Iterable[RawRecord]:
        """Get all raw DNS records for a zone."""
        return self.provider.get_records(zone, zone_file=zone_file)
