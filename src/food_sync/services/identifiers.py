"""Identifier source resolution."""

from collections.abc import Iterable
from pathlib import Path


def read_identifier_file(path: str | Path) -> list[str]:
    """Read one identifier per line, dropping blank lines.

    A missing or unreadable file raises ``OSError``.
    """
    text = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def resolve_identifiers(
    explicit: Iterable[str],
    list_file: str | Path | None = None,
    override_keys: Iterable[str] = (),
) -> list[str]:
    """Merge identifier sources into one ordered, duplicate-free list.

    Sources are taken in order: explicit identifiers, the list file, then
    keys of the portion override file. The first occurrence wins.
    """
    candidates = list(explicit)
    if list_file is not None:
        candidates.extend(read_identifier_file(list_file))
    candidates.extend(override_keys)

    resolved: dict[str, None] = {}
    for candidate in candidates:
        identifier = candidate.strip()
        if identifier:
            resolved.setdefault(identifier, None)
    return list(resolved)
