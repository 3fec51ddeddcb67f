"""Manual portion overrides.

The override file is plain comma separated text with one portion per line::

    identifier, gram_weight, unit, modifier

There is no header row and no quoting. Every portion has an amount of 1.
The modifier column may be left off.
"""

import logging
import math
from pathlib import Path

from food_sync.domain.foods import PortionEntry

_MIN_COLUMNS = 3

_logger = logging.getLogger(__name__)


def parse_portion_overrides(text: str) -> dict[str, list[PortionEntry]]:
    """Parse override rows into portions grouped by identifier in file order.

    Malformed rows are skipped with a warning.
    """
    overrides: dict[str, list[PortionEntry]] = {}
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        fields = [value.strip() for value in line.split(",")]
        if len(fields) < _MIN_COLUMNS or not fields[0]:
            _logger.warning("Skipping override line %s: %r", line_number, line)
            continue
        identifier, raw_weight, unit = fields[:_MIN_COLUMNS]
        modifier = fields[_MIN_COLUMNS] if len(fields) > _MIN_COLUMNS else ""
        try:
            gram_weight = float(raw_weight)
            if not math.isfinite(gram_weight):
                raise ValueError(raw_weight)
        except ValueError:
            _logger.warning(
                "Skipping override line %s: invalid gram weight %r",
                line_number,
                raw_weight,
            )
            continue
        portion = PortionEntry(
            amount=1,
            unit=unit,
            gram_weight=gram_weight,
            portion_description="",
            modifier=modifier,
        )
        overrides.setdefault(identifier, []).append(portion)
    return overrides


def load_portion_overrides(path: str | Path) -> dict[str, list[PortionEntry]]:
    """Read and parse an override file; a missing file raises ``OSError``."""
    return parse_portion_overrides(Path(path).read_text(encoding="utf-8"))
