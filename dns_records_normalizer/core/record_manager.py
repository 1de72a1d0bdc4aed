"""
Record Manager - Filtering and comparison of normalized DNS records

This module narrows normalized record streams down to selected record types
and compares two snapshots of the same zone (for example two DNS servers,
or a zone before and after a change).
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .records import NormalizedRecord

logger = logging.getLogger(__name__)

RecordKey = Tuple[str, str]


def filter_records(
    records: Iterable[NormalizedRecord], record_types: Optional[Iterable[str]] = None
) -> Iterator[NormalizedRecord]:
    """
    Keep only records of the given types.

    Args:
        records: Normalized records, possibly a lazy stream
        record_types: Record type codes to keep (case-sensitive); empty keeps all

    Returns:
        Lazy iterator over the matching records
    """
    wanted = set(record_types or ())
    for record in records:
        if not wanted or record.record_type in wanted:
            yield record


class RecordManager:
    """Compares normalized record snapshots."""

    def compare(
        self,
        reference: Iterable[NormalizedRecord],
        candidate: Iterable[NormalizedRecord],
    ) -> Dict:
        """
        Compare two snapshots of normalized records.

        Args:
            reference: Records considered authoritative
            candidate: Records to check against the reference

        Returns:
            Dictionary containing categorized differences
        """
        logger.info("Comparing DNS record snapshots...")

        reference_index = self._index(reference)
        candidate_index = self._index(candidate)

        only_in_reference = []
        only_in_candidate = []
        changed = []
        unchanged = []

        for key, values in reference_index.items():
            if key not in candidate_index:
                only_in_reference.append(self._entry(key, values))
                logger.info(f"Only in reference: {key[0]} {key[1]}")
            elif candidate_index[key] != values:
                changed.append(
                    {
                        "fqdn": key[0],
                        "recordType": key[1],
                        "reference": self._sorted(values),
                        "candidate": self._sorted(candidate_index[key]),
                    }
                )
                logger.info(f"Changed: {key[0]} {key[1]}")
            else:
                unchanged.append(self._entry(key, values))

        for key, values in candidate_index.items():
            if key not in reference_index:
                only_in_candidate.append(self._entry(key, values))
                logger.info(f"Only in candidate: {key[0]} {key[1]}")

        total_differences = len(only_in_reference) + len(only_in_candidate) + len(changed)

        comparison = {
            "only_in_reference": only_in_reference,
            "only_in_candidate": only_in_candidate,
            "changed": changed,
            "unchanged": unchanged,
            "total_differences": total_differences,
        }

        logger.info(
            f"Comparison complete: {len(only_in_reference)} only in reference, "
            f"{len(only_in_candidate)} only in candidate, {len(changed)} changed, "
            f"{len(unchanged)} unchanged"
        )

        return comparison

    def _normalize_fqdn(self, fqdn: str) -> str:
        """Normalize FQDN by removing trailing dot and case for consistent comparison."""
        return fqdn.rstrip(".").lower() if fqdn else fqdn

    def _index(self, records: Iterable[NormalizedRecord]) -> Dict[RecordKey, Set[tuple]]:
        """Group extension values by (fqdn, recordType), skipping placeholders."""
        index: Dict[RecordKey, Set[tuple]] = {}
        for record in records:
            if record.malformed:
                continue
            key = (self._normalize_fqdn(record.fqdn), record.record_type)
            index.setdefault(key, set()).add(
                tuple((name, str(value)) for name, value in record.extension)
            )
        return index

    def _sorted(self, values: Set[tuple]) -> List[Dict[str, str]]:
        return [dict(value) for value in sorted(values)]

    def _entry(self, key: RecordKey, values: Set[tuple]) -> Dict:
        return {"fqdn": key[0], "recordType": key[1], "values": self._sorted(values)}
