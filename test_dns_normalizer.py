#!/usr/bin/env python3
"""
Test suite for DNS Records Normalizer collaborators

This module covers the record sources, exporters, filtering and comparison,
the export manager and the command-line interface.
"""

import csv
import io
import json
import os
import shutil
import tempfile
import unittest
from datetime import timedelta
from unittest.mock import patch

import yaml

from dns_records_normalizer.cli.main import get_default_config, load_config, main
from dns_records_normalizer.core.export_manager import ExportManager
from dns_records_normalizer.core.normalizer import normalize
from dns_records_normalizer.core.record_manager import RecordManager, filter_records
from dns_records_normalizer.core.records import (
    ARecordData,
    BASE_FIELDS,
    MXRecordData,
    RawRecord,
)
from dns_records_normalizer.exceptions import SourceError
from dns_records_normalizer.exporters import CSVExporter, JSONExporter, collect_fieldnames
from dns_records_normalizer.providers import BINDProvider, DNSClient, MockDNSProvider

ZONE = "contoso.com"
SERVER = "DC01"

ZONE_FILE = """$ORIGIN contoso.com.
$TTL 3600
@           IN SOA  dc01.contoso.com. hostmaster.contoso.com. ( 42 900 600 86400 3600 )
@           IN NS   dc01.contoso.com.
@           IN SPF  "v=spf1 -all"
dc01        IN A    192.0.2.10
v6          IN AAAA 2001:db8::1
www         IN CNAME dc01
mail        IN MX   10 dc01
_ldap._tcp  IN SRV  0 100 389 dc01
info   300  IN TXT  "hello world"
10          IN PTR  dc01
"""

CHANGED_ZONE_FILE = """$ORIGIN contoso.com.
$TTL 3600
@           IN SOA  dc01.contoso.com. hostmaster.contoso.com. ( 42 900 600 86400 3600 )
@           IN NS   dc01.contoso.com.
dc01        IN A    192.0.2.11
www         IN CNAME dc01
extra       IN A    192.0.2.50
"""


def a_record(host_name, address):
    return RawRecord(
        distinguished_name=None,
        host_name=host_name,
        record_class="IN",
        record_type="A",
        type=1,
        record_data=ARecordData(address),
        time_to_live=timedelta(hours=1),
    )


def mx_record(host_name, exchange, preference):
    return RawRecord(
        distinguished_name=None,
        host_name=host_name,
        record_class="IN",
        record_type="MX",
        type=15,
        record_data=MXRecordData(exchange, preference),
        time_to_live=timedelta(hours=1),
    )


class ZoneFileTestCase(unittest.TestCase):
    """Base class writing zone files into a temporary directory."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.zone_file = self._write("contoso.com.zone", ZONE_FILE)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, name, content):
        path = os.path.join(self.temp_dir, name)
        with open(path, "w") as f:
            f.write(content)
        return path


class TestBINDProvider(ZoneFileTestCase):
    """Test the BIND record source."""

    def setUp(self):
        super().setUp()
        self.provider = BINDProvider({"zone_file": self.zone_file})

    def _by_type(self):
        return {record.record_type: record for record in self.provider.get_records(ZONE)}

    def test_config_parsing(self):
        config = {
            "nameserver": "192.168.1.10",
            "port": 5353,
            "key_file": "/path/to/key",
            "key_name": "my-key",
            "zone_file": "/path/to/zone",
        }
        provider = BINDProvider(config)

        self.assertEqual(provider.nameserver, "192.168.1.10")
        self.assertEqual(provider.port, 5353)
        self.assertEqual(provider.key_name, "my-key")
        self.assertEqual(provider.zone_file, "/path/to/zone")
        self.assertIsNone(provider.keyring)

    def test_tsig_key_loading(self):
        key_file = self._write(
            "update-key.conf",
            'key "update-key" {\n'
            "    algorithm hmac-sha256;\n"
            '    secret "c2VjcmV0c2VjcmV0c2VjcmV0";\n'
            "};\n",
        )
        provider = BINDProvider({"key_file": key_file, "key_name": "update-key"})
        self.assertIsNotNone(provider.keyring)

    def test_reads_every_record_type(self):
        records = self._by_type()
        self.assertEqual(
            set(records),
            {"SOA", "NS", "SPF", "A", "AAAA", "CNAME", "MX", "SRV", "TXT", "PTR"},
        )

    def test_apex_and_base_fields(self):
        ns = self._by_type()["NS"]

        self.assertEqual(ns.host_name, "@")
        self.assertEqual(ns.distinguished_name, "contoso.com.")
        self.assertEqual(ns.record_class, "IN")
        self.assertEqual(ns.type, 2)
        self.assertIsNone(ns.timestamp)
        self.assertEqual(ns.time_to_live, timedelta(hours=1))
        self.assertEqual(ns.record_data.name_server, "dc01.contoso.com.")

    def test_payload_conversion(self):
        records = self._by_type()

        self.assertEqual(records["A"].record_data.ipv4_address, "192.0.2.10")
        self.assertEqual(records["AAAA"].record_data.ipv6_address, "2001:db8::1")
        self.assertEqual(records["CNAME"].record_data.host_name_alias, "dc01.contoso.com.")
        self.assertEqual(records["MX"].record_data.mail_exchange, "dc01.contoso.com.")
        self.assertEqual(records["MX"].record_data.preference, 10)
        self.assertEqual(records["TXT"].record_data.descriptive_text, "hello world")
        self.assertEqual(records["TXT"].time_to_live, timedelta(minutes=5))
        self.assertEqual(records["PTR"].record_data.ptr_domain_name, "dc01.contoso.com.")

        srv = records["SRV"].record_data
        self.assertEqual(
            (srv.domain_name, srv.port, srv.priority, srv.weight),
            ("dc01.contoso.com.", 389, 0, 100),
        )

        soa = records["SOA"].record_data
        self.assertEqual(soa.serial_number, 42)
        self.assertEqual(soa.refresh_interval, timedelta(seconds=900))
        self.assertEqual(soa.responsible_person, "hostmaster.contoso.com.")

    def test_normalized_zone(self):
        rows = {
            record.record_type: record.to_dict()
            for record in normalize(self.provider.get_records(ZONE), ZONE, SERVER)
        }

        self.assertEqual(rows["SOA"]["fqdn"], "contoso.com")
        self.assertEqual(rows["SOA"]["expireLimit"], "1.00:00:00")
        self.assertEqual(rows["SOA"]["refreshInterval"], "00:15:00")
        self.assertEqual(rows["SRV"]["fqdn"], "_ldap._tcp.contoso.com")
        self.assertEqual(rows["A"]["ipv4"], "192.0.2.10")
        self.assertEqual(rows["SPF"]["unknownRecordType"], '"v=spf1 -all"')

    def test_missing_zone_file(self):
        provider = BINDProvider({})
        with self.assertRaises(SourceError):
            provider.get_records(ZONE, zone_file=os.path.join(self.temp_dir, "missing.zone"))

    def test_zone_transfer_failure(self):
        provider = BINDProvider({"nameserver": "192.0.2.53"})
        with patch(
            "dns_records_normalizer.providers.bind_provider.dns.query.xfr",
            side_effect=OSError("connection refused"),
        ):
            with self.assertRaises(SourceError):
                provider.get_records(ZONE)


class TestDNSClient(unittest.TestCase):
    """Test record source selection."""

    def test_mock_provider(self):
        client = DNSClient({"default_provider": "mock"})
        self.assertIsInstance(client.provider, MockDNSProvider)

    def test_unknown_provider_falls_back_to_mock(self):
        client = DNSClient({"default_provider": "route53"})
        self.assertIsInstance(client.provider, MockDNSProvider)

    def test_bind_provider(self):
        client = DNSClient({"default_provider": "bind", "dns_providers": {"bind": None}})
        self.assertIsInstance(client.provider, BINDProvider)

    def test_mock_records(self):
        provider = MockDNSProvider({"records": [a_record("www", "192.0.2.1")]})
        provider.add_record(a_record("web", "192.0.2.2"))

        records = list(provider.get_records(ZONE))
        self.assertEqual([r.host_name for r in records], ["www", "web"])


class TestExporters(unittest.TestCase):
    """Test CSV and JSON export."""

    def setUp(self):
        """Set up test fixtures."""
        self.records = list(
            normalize(
                [
                    a_record("www", "192.0.2.1"),
                    mx_record("@", "mail.contoso.com.", 10),
                ],
                ZONE,
                SERVER,
            )
        )

    def test_collect_fieldnames(self):
        rows = [{"a": 1, "b": 2}, {"a": 3, "c": 4}, {"d": 5, "b": 6}]
        self.assertEqual(collect_fieldnames(rows), ["a", "b", "c", "d"])

    def test_csv_header_follows_first_seen_order(self):
        output = io.StringIO()
        count = CSVExporter(output).export(self.records)

        self.assertEqual(count, 2)
        output.seek(0)
        reader = csv.DictReader(output)
        self.assertEqual(
            reader.fieldnames,
            list(BASE_FIELDS) + ["ipv4", "mailExchange", "preference"],
        )

        rows = list(reader)
        self.assertEqual(rows[0]["ipv4"], "192.0.2.1")
        self.assertEqual(rows[0]["mailExchange"], "")
        self.assertEqual(rows[0]["timestamp"], "")
        self.assertEqual(rows[1]["fqdn"], "contoso.com")
        self.assertEqual(rows[1]["preference"], "10")

    def test_csv_to_file(self):
        temp_dir = tempfile.mkdtemp()
        try:
            path = os.path.join(temp_dir, "records.csv")
            CSVExporter(path).export(self.records)

            with open(path, newline="") as f:
                self.assertEqual(len(list(csv.DictReader(f))), 2)
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)

    def test_json_keeps_field_order(self):
        output = io.StringIO()
        JSONExporter(output).export(self.records)

        rows = json.loads(output.getvalue())
        self.assertEqual(len(rows), 2)
        self.assertEqual(list(rows[1]), list(BASE_FIELDS) + ["mailExchange", "preference"])
        self.assertIsNone(rows[0]["timestamp"])
        self.assertEqual(rows[1]["preference"], 10)


class TestRecordManager(unittest.TestCase):
    """Test filtering and comparison."""

    def setUp(self):
        """Set up test fixtures."""
        self.record_manager = RecordManager()

    def _normalize(self, raws):
        return list(normalize(raws, ZONE, SERVER))

    def test_filter_records(self):
        records = self._normalize(
            [a_record("www", "192.0.2.1"), mx_record("@", "mail.", 10), {"host_name": "x"}]
        )

        self.assertEqual(len(list(filter_records(records))), 3)
        self.assertEqual(
            [r.record_type for r in filter_records(records, ["MX"])], ["MX"]
        )
        self.assertEqual(list(filter_records(records, ["mx"])), [])

    def test_compare_identical(self):
        reference = self._normalize([a_record("www", "192.0.2.1")])
        candidate = self._normalize([a_record("WWW", "192.0.2.1")])

        comparison = self.record_manager.compare(reference, candidate)
        self.assertEqual(comparison["total_differences"], 0)
        self.assertEqual(len(comparison["unchanged"]), 1)

    def test_compare_differences(self):
        reference = self._normalize(
            [a_record("www", "192.0.2.1"), a_record("old", "192.0.2.2")]
        )
        candidate = self._normalize(
            [a_record("www", "192.0.2.9"), a_record("new", "192.0.2.3")]
        )

        comparison = self.record_manager.compare(reference, candidate)

        self.assertEqual(comparison["total_differences"], 3)
        self.assertEqual(comparison["only_in_reference"][0]["fqdn"], "old.contoso.com")
        self.assertEqual(comparison["only_in_candidate"][0]["fqdn"], "new.contoso.com")
        changed = comparison["changed"][0]
        self.assertEqual(changed["fqdn"], "www.contoso.com")
        self.assertEqual(changed["reference"], [{"ipv4": "192.0.2.1"}])
        self.assertEqual(changed["candidate"], [{"ipv4": "192.0.2.9"}])

    def test_compare_skips_placeholders(self):
        reference = self._normalize([{"host_name": "broken"}])
        comparison = self.record_manager.compare(reference, [])
        self.assertEqual(comparison["total_differences"], 0)


class TestExportManager(ZoneFileTestCase):
    """Test the export manager."""

    def setUp(self):
        super().setUp()
        self.config = {
            "default_provider": "mock",
            "dns_providers": {
                "mock": {
                    "records": [
                        a_record("www", "192.0.2.1"),
                        {"host_name": "broken"},
                        mx_record("@", "mail.contoso.com.", 10),
                    ]
                }
            },
            "server_name": SERVER,
            "export": {"format": "json"},
        }

    def test_export_uses_config_defaults(self):
        output = io.StringIO()
        success = ExportManager(self.config).export(ZONE, output=output)

        self.assertTrue(success)
        rows = json.loads(output.getvalue())
        self.assertEqual(len(rows), 3)
        self.assertTrue(all(row["dnsServer"] == SERVER for row in rows))
        self.assertNotIn("fqdn", rows[1])

    def test_export_filters_types(self):
        output = io.StringIO()
        ExportManager(self.config).export(
            ZONE, output=output, fmt="csv", record_types=["MX"], server_name="DC02"
        )

        output.seek(0)
        rows = list(csv.DictReader(output))
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["recordType"], "MX")
        self.assertEqual(rows[0]["dnsServer"], "DC02")

    def test_unsupported_format(self):
        with self.assertRaises(ValueError):
            ExportManager(self.config).export(ZONE, output=io.StringIO(), fmt="xml")

    def test_compare_zone_files(self):
        changed_zone_file = self._write("changed.zone", CHANGED_ZONE_FILE)
        manager = ExportManager({"default_provider": "bind", "server_name": SERVER})

        comparison = manager.compare(
            ZONE, self.zone_file, changed_zone_file, record_types=["A", "CNAME"]
        )

        self.assertEqual(
            [e["fqdn"] for e in comparison["changed"]], ["dc01.contoso.com"]
        )
        self.assertEqual(
            [e["fqdn"] for e in comparison["only_in_candidate"]], ["extra.contoso.com"]
        )
        self.assertEqual(
            [e["fqdn"] for e in comparison["unchanged"]], ["www.contoso.com"]
        )


class TestCLI(ZoneFileTestCase):
    """Test the command-line interface."""

    def setUp(self):
        super().setUp()
        self.config_file = self._write(
            "config.yaml",
            yaml.dump(
                {
                    "default_provider": "bind",
                    "dns_providers": {"bind": {}},
                    "export": {"format": "csv"},
                }
            ),
        )

    def _run(self, *argv):
        with patch("dns_records_normalizer.cli.main.config_logger"):
            with self.assertRaises(SystemExit) as ctx:
                main(["--config", self.config_file] + list(argv))
        return ctx.exception.code

    def test_export_csv(self):
        output = os.path.join(self.temp_dir, "out.csv")
        code = self._run("--zone", ZONE, "--zone-file", self.zone_file, "-s", SERVER, "-o", output)

        self.assertEqual(code, 0)
        with open(output, newline="") as f:
            rows = list(csv.DictReader(f))
        self.assertEqual(len(rows), 10)
        self.assertTrue(all(row["dnsServer"] == SERVER for row in rows))

    def test_export_json_with_type_filter(self):
        output = os.path.join(self.temp_dir, "out.json")
        code = self._run(
            "-z", ZONE, "-f", self.zone_file, "--format", "json", "-t", "A", "-t", "AAAA", "-o", output
        )

        self.assertEqual(code, 0)
        with open(output) as f:
            rows = json.load(f)
        self.assertEqual(sorted(row["recordType"] for row in rows), ["A", "AAAA"])

    def test_missing_zone_file(self):
        code = self._run("-z", ZONE, "-f", os.path.join(self.temp_dir, "missing.zone"))
        self.assertEqual(code, 1)

    def test_compare_exit_status(self):
        changed_zone_file = self._write("changed.zone", CHANGED_ZONE_FILE)

        self.assertEqual(
            self._run("-z", ZONE, "-f", self.zone_file, "--compare-zone-file", self.zone_file),
            0,
        )
        self.assertEqual(
            self._run("-z", ZONE, "-f", self.zone_file, "--compare-zone-file", changed_zone_file),
            2,
        )

    def test_source_error_exits_with_failure(self):
        broken = self._write("broken.zone", "this is not a zone file\n")
        self.assertEqual(self._run("-z", ZONE, "-f", broken), 1)

    def test_load_config_defaults(self):
        config = load_config(os.path.join(self.temp_dir, "missing.yaml"))
        self.assertEqual(config, get_default_config())


if __name__ == "__main__":
    unittest.main()
