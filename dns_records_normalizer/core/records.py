"""
Record models - raw records, typed payloads and the normalized record shape.

Sources yield RawRecord objects whose ``record_data`` is one of the payload
dataclasses below (or any other object for record types outside that set).
The normalizer turns each of them into a NormalizedRecord, which is only
flattened into an ordered dictionary at the export boundary.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

BASE_FIELDS = (
    "distinguishedName",
    "hostName",
    "fqdn",
    "recordClass",
    "recordType",
    "timestamp",
    "timeToLive",
    "type",
    "dnsServer",
)


@dataclass(frozen=True)
class RawRecord:
    """A resource record as handed over by a record source."""

    distinguished_name: Optional[str]
    host_name: Optional[str]
    record_class: Optional[str]
    record_type: Optional[str]
    type: Optional[int]
    record_data: Any = None
    timestamp: Optional[datetime] = None
    time_to_live: Optional[timedelta] = None


@dataclass(frozen=True)
class ARecordData:
    ipv4_address: Any


@dataclass(frozen=True)
class AAAARecordData:
    ipv6_address: Any


@dataclass(frozen=True)
class CNAMERecordData:
    host_name_alias: str


@dataclass(frozen=True)
class TXTRecordData:
    descriptive_text: str


@dataclass(frozen=True)
class NSRecordData:
    name_server: str


@dataclass(frozen=True)
class SRVRecordData:
    domain_name: str
    port: int
    priority: int
    weight: int


@dataclass(frozen=True)
class SOARecordData:
    expire_limit: timedelta
    minimum_time_to_live: timedelta
    primary_server: str
    refresh_interval: timedelta
    responsible_person: str
    retry_delay: timedelta
    serial_number: int


@dataclass(frozen=True)
class MXRecordData:
    mail_exchange: str
    preference: int


@dataclass(frozen=True)
class PTRRecordData:
    ptr_domain_name: str


@dataclass(frozen=True)
class NormalizedRecord:
    """Uniform record: fixed base fields plus ordered type-specific fields."""

    distinguished_name: Optional[str]
    host_name: Optional[str]
    fqdn: Optional[str]
    record_class: Optional[str]
    record_type: Optional[str]
    timestamp: Optional[str]
    time_to_live: Optional[str]
    type: Optional[int]
    dns_server: Optional[str]
    extension: Tuple[Tuple[str, Any], ...] = ()
    malformed: bool = False

    @classmethod
    def placeholder(cls, server_name: Optional[str]) -> "NormalizedRecord":
        """Build the stand-in emitted for a malformed raw record."""
        return cls(
            distinguished_name=None,
            host_name=None,
            fqdn=None,
            record_class=None,
            record_type=None,
            timestamp=None,
            time_to_live=None,
            type=None,
            dns_server=server_name,
            malformed=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into export order: base fields first, then extension fields."""
        values = {
            "distinguishedName": self.distinguished_name,
            "hostName": self.host_name,
            "fqdn": self.fqdn,
            "recordClass": self.record_class,
            "recordType": self.record_type,
            "timestamp": self.timestamp,
            "timeToLive": self.time_to_live,
            "type": self.type,
            "dnsServer": self.dns_server,
        }
        row = {}
        for name in BASE_FIELDS:
            # placeholders carry no fqdn column at all
            if name == "fqdn" and self.malformed:
                continue
            row[name] = values[name]
        for name, value in self.extension:
            row[name] = value
        return row

    def get(self, name: str, default: Any = None) -> Any:
        """Look up a field by its export name."""
        return self.to_dict().get(name, default)
