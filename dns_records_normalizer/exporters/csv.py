import csv
import logging
from typing import Iterable

from .base import Output, collect_fieldnames, open_output
from ..core.records import NormalizedRecord

logger = logging.getLogger(__name__)


class CSVExporter:
    def __init__(self, output: Output = None):
        self.output = output

    def export(self, records: Iterable[NormalizedRecord]) -> int:
        """Write records as CSV; the header follows first-seen field order."""
        rows = [record.to_dict() for record in records]
        fieldnames = collect_fieldnames(rows)

        with open_output(self.output, newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, restval="")
            writer.writeheader()
            for row in rows:
                writer.writerow({k: ("" if v is None else v) for k, v in row.items()})

        logger.info(f"Exported {len(rows)} records as CSV")
        return len(rows)
