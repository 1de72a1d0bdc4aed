"""
Record Normalizer - Flatten heterogeneous DNS records into one shape

Each raw record is reshaped independently: a malformed-input guard runs first,
then the base fields are copied (with the FQDN derived from host and zone
names) and finally the type-specific fields are pulled out of the payload
according to a fixed per-type table.
"""

import logging
import socket
from collections.abc import Mapping, Sized
from typing import Any, Iterable, Iterator, Optional, Tuple

from ..exceptions import RecordExtractionError
from .formatting import (
    format_duration,
    format_required_duration,
    format_timestamp,
    render_payload,
)
from .records import NormalizedRecord

logger = logging.getLogger(__name__)

UNKNOWN_FQDN = "Unknown"
ZONE_APEX = "@"

_MISSING = object()


def _text(value: Any) -> str:
    if value is None:
        raise ValueError("value is missing")
    return str(value)


# (export name, payload attribute, formatter) in export order
EXTENSION_FIELDS = {
    "A": (("ipv4", "ipv4_address", _text),),
    "AAAA": (("ipv6", "ipv6_address", _text),),
    "CNAME": (("hostNameAlias", "host_name_alias", None),),
    "TXT": (("descriptiveText", "descriptive_text", None),),
    "NS": (("nameServer", "name_server", None),),
    "SRV": (
        ("domainName", "domain_name", None),
        ("port", "port", None),
        ("priority", "priority", None),
        ("weight", "weight", None),
    ),
    "SOA": (
        ("expireLimit", "expire_limit", format_required_duration),
        ("minimumTimeToLive", "minimum_time_to_live", format_required_duration),
        ("primaryServer", "primary_server", None),
        ("refreshInterval", "refresh_interval", format_required_duration),
        ("responsiblePerson", "responsible_person", None),
        ("retryDelay", "retry_delay", format_required_duration),
        ("serialNumber", "serial_number", None),
    ),
    "MX": (
        ("mailExchange", "mail_exchange", None),
        ("preference", "preference", None),
    ),
    "PTR": (("ptrDomainName", "ptr_domain_name", None),),
}

UNKNOWN_FIELD = "unknownRecordType"


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _lookup(obj: Any, name: str, default: Any = _MISSING) -> Any:
    """Read ``name`` (or its camelCase form) from a mapping key or an attribute."""
    for key in (name, _camel_case(name)):
        if isinstance(obj, Mapping):
            if key in obj:
                return obj[key]
        else:
            value = getattr(obj, key, _MISSING)
            if value is not _MISSING:
                return value

    if default is _MISSING:
        raise KeyError(name)
    return default


def default_server_name() -> str:
    """Return the local host name used when no DNS server name is given."""
    return socket.gethostname()


def derive_fqdn(host_name: Optional[str], zone_name: Optional[str]) -> str:
    """
    Build the fully-qualified owner name of a record.

    Args:
        host_name: Owner name relative to the zone, ``"@"`` for the apex
        zone_name: Zone the record belongs to

    Returns:
        The zone name for the apex, ``host.zone`` otherwise, or ``"Unknown"``
        when either part is empty
    """
    if host_name == ZONE_APEX and zone_name:
        return zone_name
    if host_name and zone_name:
        return f"{host_name}.{zone_name}"
    return UNKNOWN_FQDN


def is_malformed(raw: Any) -> bool:
    """Check whether a raw record lacks a type discriminant or a payload."""
    if not _lookup(raw, "record_type", None):
        return True

    payload = _lookup(raw, "record_data", None)
    if payload is None:
        return True
    if isinstance(payload, Sized) and len(payload) == 0:
        return True
    return False


def extract_extension(record_type: str, payload: Any) -> Tuple[Tuple[str, Any], ...]:
    """Pull the type-specific fields out of a payload, in export order."""
    specs = EXTENSION_FIELDS.get(record_type)
    if specs is None:
        return ((UNKNOWN_FIELD, render_payload(payload)),)

    fields = []
    for name, attribute, formatter in specs:
        try:
            value = _lookup(payload, attribute)
            if formatter is not None:
                value = formatter(value)
        except KeyError as e:
            raise RecordExtractionError(
                f"{record_type} payload has no '{attribute}' field",
                record_type=record_type,
                field=name,
            ) from e
        except (TypeError, ValueError) as e:
            raise RecordExtractionError(
                f"Cannot render {record_type} field '{name}': {e}",
                record_type=record_type,
                field=name,
            ) from e
        fields.append((name, value))

    return tuple(fields)


class RecordNormalizer:
    """Maps raw DNS records onto NormalizedRecord objects."""

    def __init__(self, zone_name: Optional[str] = None, server_name: Optional[str] = None):
        """Initialize normalizer with the zone and DNS server the records come from."""
        self.zone_name = zone_name
        self.server_name = server_name or default_server_name()

    def normalize(self, raw_records: Iterable[Any]) -> Iterator[NormalizedRecord]:
        """
        Normalize a stream of raw records.

        One record is produced per input, in input order. Malformed inputs
        become placeholders; an extraction error on a well-formed record
        stops the stream and propagates.
        """
        for index, raw in enumerate(raw_records):
            yield self.normalize_record(raw, index=index)

    def normalize_record(self, raw: Any, index: Optional[int] = None) -> NormalizedRecord:
        """Normalize a single raw record."""
        if is_malformed(raw):
            logger.warning(
                f"Malformed record at position {index} "
                f"(type={_lookup(raw, 'record_type', None)!r}), emitting placeholder"
            )
            return NormalizedRecord.placeholder(self.server_name)

        record_type = _lookup(raw, "record_type")
        host_name = _lookup(raw, "host_name", None)

        try:
            timestamp = format_timestamp(_lookup(raw, "timestamp", None))
            time_to_live = format_duration(_lookup(raw, "time_to_live", None))
            extension = extract_extension(record_type, _lookup(raw, "record_data"))
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to normalize {record_type} record '{host_name}': {e}")
            raise RecordExtractionError(
                f"Cannot render base fields of {record_type} record '{host_name}': {e}",
                record_type=record_type,
            ) from e
        except RecordExtractionError as e:
            logger.error(f"Failed to normalize {record_type} record '{host_name}': {e}")
            raise

        return NormalizedRecord(
            distinguished_name=_lookup(raw, "distinguished_name", None),
            host_name=host_name,
            fqdn=derive_fqdn(host_name, self.zone_name),
            record_class=_lookup(raw, "record_class", None),
            record_type=record_type,
            timestamp=timestamp,
            time_to_live=time_to_live,
            type=_lookup(raw, "type", None),
            dns_server=self.server_name,
            extension=extension,
        )


def normalize(
    raw_records: Iterable[Any],
    zone_name: Optional[str] = None,
    server_name: Optional[str] = None,
) -> Iterator[NormalizedRecord]:
    """Normalize raw records for ``zone_name`` as served by ``server_name``."""
    return RecordNormalizer(zone_name, server_name).normalize(raw_records)
