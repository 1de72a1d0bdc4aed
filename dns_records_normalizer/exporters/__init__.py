"""
Exporters for normalized records.

This package contains CSV and JSON writers that lay out columns and keys
in first-seen field order.
"""

from .base import collect_fieldnames
from .csv import CSVExporter
from .json import JSONExporter

__all__ = ["CSVExporter", "JSONExporter", "collect_fieldnames"]
