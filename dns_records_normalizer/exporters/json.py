import json
import logging
from typing import Iterable

from .base import Output, open_output
from ..core.records import NormalizedRecord

logger = logging.getLogger(__name__)


class JSONExporter:
    def __init__(self, output: Output = None, indent: int = 2):
        self.output = output
        self.indent = indent

    def export(self, records: Iterable[NormalizedRecord]) -> int:
        """Write records as a JSON array of objects in field order."""
        rows = [record.to_dict() for record in records]

        with open_output(self.output) as f:
            json.dump(rows, f, indent=self.indent, default=str)
            f.write("\n")

        logger.info(f"Exported {len(rows)} records as JSON")
        return len(rows)
