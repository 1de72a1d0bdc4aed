"""
Export Manager - Orchestrates retrieval, normalization and export

This module pulls raw records from the configured record source, normalizes
them, applies the record-type filter and hands the result to an exporter,
reporting a summary on the console.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, Optional

from rich.console import Console
from rich.table import Table

from ..exporters import CSVExporter, JSONExporter
from ..providers.dns_client import DNSClient
from .normalizer import RecordNormalizer
from .record_manager import RecordManager, filter_records
from .records import NormalizedRecord

console = Console(stderr=True)
logger = logging.getLogger(__name__)

EXPORTERS = {
    "csv": CSVExporter,
    "json": JSONExporter,
}


class ExportManager:
    """Main class that wires record source, normalizer and exporter together."""

    def __init__(self, config: Dict):
        """Initialize the export manager with configuration."""
        self.config = config or {}
        self.dns_client = DNSClient(self.config)
        self.record_manager = RecordManager()

    def normalized_records(
        self,
        zone: str,
        server_name: Optional[str] = None,
        zone_file: Optional[str] = None,
        record_types: Optional[Iterable[str]] = None,
    ) -> Iterable[NormalizedRecord]:
        """Return the lazy stream of normalized, filtered records for a zone."""
        server_name = server_name or self.config.get("server_name") or None
        normalizer = RecordNormalizer(zone_name=zone, server_name=server_name)
        raw_records = self.dns_client.get_records(zone, zone_file=zone_file)
        return filter_records(normalizer.normalize(raw_records), record_types)

    def export(
        self,
        zone: str,
        output=None,
        fmt: Optional[str] = None,
        record_types: Optional[Iterable[str]] = None,
        server_name: Optional[str] = None,
        zone_file: Optional[str] = None,
    ) -> bool:
        """Normalize the records of a zone and write them out."""
        fmt = fmt or self.config.get("export", {}).get("format", "csv")
        if fmt not in EXPORTERS:
            raise ValueError(f"Unsupported export format '{fmt}'")

        records = list(
            self.normalized_records(zone, server_name, zone_file, record_types)
        )
        if not records:
            console.print(f"[yellow]No records found for zone {zone}[/yellow]")
            logger.warning(f"No records to export for zone {zone}")

        count = EXPORTERS[fmt](output).export(records)
        self._display_export_summary(zone, records)
        logger.info(f"Exported {count} records for zone {zone} as {fmt}")
        return True

    def compare(
        self,
        zone: str,
        zone_file: Optional[str],
        other_zone_file: str,
        record_types: Optional[Iterable[str]] = None,
    ) -> Dict:
        """Compare a zone against a second copy of it loaded from another zone file."""
        reference = self.normalized_records(
            zone, zone_file=zone_file, record_types=record_types
        )
        candidate = self.normalized_records(
            zone, zone_file=other_zone_file, record_types=record_types
        )
        comparison = self.record_manager.compare(reference, candidate)
        self._display_comparison_summary(comparison)
        return comparison

    def _display_export_summary(self, zone: str, records: Iterable[NormalizedRecord]):
        """Display record counts per record type."""
        counts = Counter(
            "(malformed)" if record.malformed else record.record_type
            for record in records
        )

        table = Table(title=f"Normalized Records - {zone}")
        table.add_column("Record Type", style="cyan")
        table.add_column("Count", style="magenta")

        for record_type, count in sorted(counts.items()):
            table.add_row(record_type, str(count))

        console.print(table)
        console.print(f"\n[bold]Total records: {sum(counts.values())}[/bold]")

    def _display_comparison_summary(self, comparison: Dict):
        """Display a summary of the differences between two snapshots."""
        table = Table(title="DNS Record Comparison")
        table.add_column("Category", style="cyan")
        table.add_column("Count", style="magenta")
        table.add_column("Details", style="white")

        rows = [
            ("Only in reference", "only_in_reference"),
            ("Only in candidate", "only_in_candidate"),
            ("Changed", "changed"),
            ("Unchanged", "unchanged"),
        ]
        for label, key in rows:
            entries = comparison[key]
            if entries:
                table.add_row(
                    label,
                    str(len(entries)),
                    ", ".join(f"{e['fqdn']} {e['recordType']}" for e in entries),
                )

        console.print(table)
        console.print(
            f"\n[bold]Total differences: {comparison['total_differences']}[/bold]"
        )
