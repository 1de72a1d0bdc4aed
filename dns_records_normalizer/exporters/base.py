"""
Shared helpers for record exporters.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, TextIO, Union

logger = logging.getLogger(__name__)

Output = Union[str, TextIO]


def collect_fieldnames(rows: Iterable[Dict]) -> List[str]:
    """Return the union of row keys in first-seen order."""
    fieldnames = {}
    for row in rows:
        for name in row:
            fieldnames.setdefault(name, None)
    return list(fieldnames)


@contextmanager
def open_output(output: Output = None, newline: str = None) -> Iterator[TextIO]:
    """Yield a writable text stream for a path, an open stream or stdout."""
    if output is None or output == "-":
        yield sys.stdout
        return

    if not isinstance(output, str):
        yield output
        return

    try:
        with open(output, "w", encoding="utf-8", newline=newline) as f:
            yield f
    except OSError as e:
        logger.error(f"Failed to write export to {output}: {e}")
        raise
