"""
BIND record source implementation.

This module reads zones from BIND zone files or by zone transfer using the
dnspython library and turns every rdata into a RawRecord.
"""

import logging
import re
from datetime import timedelta
from typing import Dict, Iterator, Optional

import dns.exception
import dns.name
import dns.query
import dns.rdataclass
import dns.rdatatype
import dns.tsigkeyring
import dns.zone

from .base_provider import DNSProvider
from ..core.records import (
    AAAARecordData,
    ARecordData,
    CNAMERecordData,
    MXRecordData,
    NSRecordData,
    PTRRecordData,
    RawRecord,
    SOARecordData,
    SRVRecordData,
    TXTRecordData,
)
from ..exceptions import SourceError

logger = logging.getLogger(__name__)


class BINDProvider(DNSProvider):
    """BIND record source implementation using dnspython library."""

    def __init__(self, config: Dict):
        """Initialize BIND provider."""
        self.config = config
        self.nameserver = config.get("nameserver", "127.0.0.1")
        self.port = config.get("port", 53)
        self.key_file = config.get("key_file", "")
        self.key_name = config.get("key_name", "")
        self.zone_file = config.get("zone_file", "")

        self.keyring = None
        if self.key_file and self.key_name:
            try:
                with open(self.key_file, "r") as f:
                    key_content = f.read().strip()

                secret = self._parse_bind_key_file(key_content, self.key_name)

                if secret:
                    self.keyring = dns.tsigkeyring.from_text({self.key_name: secret})
                    logger.info(f"TSIG key loaded from {self.key_file}")
                else:
                    logger.warning(
                        f"Could not extract secret for key '{self.key_name}' from {self.key_file}"
                    )
            except OSError as e:
                logger.warning(f"Failed to load TSIG key: {e}")
                logger.debug("Zone transfers will not be signed")

        logger.info(
            f"BIND provider initialized for nameserver {self.nameserver}:{self.port}"
        )

    def _parse_bind_key_file(self, key_content: str, key_name: str) -> Optional[str]:
        """Parse BIND key file format to extract the secret for a specific key."""
        key_pattern = rf'key\s+"{re.escape(key_name)}"\s*{{(.*?)}};'
        match = re.search(key_pattern, key_content, re.DOTALL)
        if match:
            secret_match = re.search(r'secret\s+"([^"]+)"', match.group(1))
            if secret_match:
                return secret_match.group(1)
        return None

    def get_records(self, zone: str, zone_file: str = None) -> Iterator[RawRecord]:
        """Get all raw records of a zone from a zone file or by zone transfer."""
        zone_file = zone_file or self.zone_file
        if zone_file:
            zone_obj = self._load_zone_file(zone, zone_file)
        else:
            zone_obj = self._zone_transfer(zone)
        return self._iter_records(zone_obj)

    def _load_zone_file(self, zone: str, zone_file: str) -> dns.zone.Zone:
        """Parse a BIND zone file."""
        try:
            zone_obj = dns.zone.from_file(zone_file, origin=zone, relativize=True)
            logger.info(f"Loaded zone {zone} from {zone_file}")
            return zone_obj
        except (OSError, dns.exception.DNSException) as e:
            logger.error(f"Failed to load zone file {zone_file}: {e}")
            raise SourceError(f"Cannot load zone {zone} from {zone_file}: {e}") from e

    def _zone_transfer(self, zone: str) -> dns.zone.Zone:
        """Transfer a zone from the configured nameserver."""
        try:
            zone_obj = dns.zone.from_xfr(
                dns.query.xfr(
                    self.nameserver,
                    zone,
                    port=self.port,
                    keyring=self.keyring,
                    keyname=self.key_name or None,
                )
            )
            logger.info(f"Transferred zone {zone} from {self.nameserver}:{self.port}")
            return zone_obj
        except (OSError, dns.exception.DNSException) as e:
            logger.error(f"Zone transfer failed for {zone}: {e}")
            raise SourceError(f"Zone transfer of {zone} failed: {e}") from e

    def _iter_records(self, zone_obj: dns.zone.Zone) -> Iterator[RawRecord]:
        """Yield one RawRecord per rdata in zone order."""
        origin = zone_obj.origin
        for name, node in zone_obj.nodes.items():
            distinguished_name = name.derelativize(origin).to_text()
            for rdataset in node.rdatasets:
                for rdata in rdataset:
                    yield RawRecord(
                        distinguished_name=distinguished_name,
                        host_name=name.to_text(),
                        record_class=dns.rdataclass.to_text(rdataset.rdclass),
                        record_type=dns.rdatatype.to_text(rdataset.rdtype),
                        type=int(rdataset.rdtype),
                        record_data=record_data_from_rdata(rdata, origin),
                        timestamp=None,
                        time_to_live=timedelta(seconds=rdataset.ttl),
                    )


def _absolute(name: dns.name.Name, origin: dns.name.Name) -> str:
    return name.derelativize(origin).to_text()


def record_data_from_rdata(rdata, origin: dns.name.Name):
    """
    Convert a dnspython rdata into the matching payload dataclass.

    Record types without a dedicated payload are returned unchanged so the
    normalizer can render them as text.
    """
    rdtype = rdata.rdtype

    if rdtype == dns.rdatatype.A:
        return ARecordData(ipv4_address=rdata.address)
    if rdtype == dns.rdatatype.AAAA:
        return AAAARecordData(ipv6_address=rdata.address)
    if rdtype == dns.rdatatype.CNAME:
        return CNAMERecordData(host_name_alias=_absolute(rdata.target, origin))
    if rdtype == dns.rdatatype.TXT:
        return TXTRecordData(
            descriptive_text=b"".join(rdata.strings).decode("utf-8", errors="replace")
        )
    if rdtype == dns.rdatatype.NS:
        return NSRecordData(name_server=_absolute(rdata.target, origin))
    if rdtype == dns.rdatatype.SRV:
        return SRVRecordData(
            domain_name=_absolute(rdata.target, origin),
            port=rdata.port,
            priority=rdata.priority,
            weight=rdata.weight,
        )
    if rdtype == dns.rdatatype.SOA:
        return SOARecordData(
            expire_limit=timedelta(seconds=rdata.expire),
            minimum_time_to_live=timedelta(seconds=rdata.minimum),
            primary_server=_absolute(rdata.mname, origin),
            refresh_interval=timedelta(seconds=rdata.refresh),
            responsible_person=_absolute(rdata.rname, origin),
            retry_delay=timedelta(seconds=rdata.retry),
            serial_number=rdata.serial,
        )
    if rdtype == dns.rdatatype.MX:
        return MXRecordData(
            mail_exchange=_absolute(rdata.exchange, origin),
            preference=rdata.preference,
        )
    if rdtype == dns.rdatatype.PTR:
        return PTRRecordData(ptr_domain_name=_absolute(rdata.target, origin))

    return rdata
