"""
DNS record source implementations.

This package contains the record sources that feed raw records to the
normalizer: a dnspython-backed BIND source and a mock source.
"""

from .base_provider import DNSProvider
from .bind_provider import BINDProvider
from .dns_client import DNSClient
from .mock_provider import MockDNSProvider

__all__ = ["DNSClient", "DNSProvider", "BINDProvider", "MockDNSProvider"]
