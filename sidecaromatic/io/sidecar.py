"""
Read and edit JSON sidecars in place.

Every helper works on one ``*.json`` document at a time and only rewrites the
text of the field it edits:

* an existing field has its value replaced where it stands;
* a new field is inserted after the last top-level field;
* everything else (key order, indentation, one-line numeric arrays as written
  by heudiconv's ``json_dumps_pretty``, the trailing newline) is copied
  through as-is.

Positions are found with the :mod:`json` scanner itself, so keys containing
escapes or values holding nested objects are located exactly.

Writes go to a temporary file in the same directory which then replaces the
original with :func:`os.replace`. An interrupted run therefore never leaves a
half-written sidecar behind.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from json.decoder import scanstring
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from sidecaromatic.utils.errors import DuplicateAssociation, InvalidDocument

log = logging.getLogger(__name__)

# First indented line of a pretty-printed document, e.g. '\t"EchoTime": …'.
_INDENT_RE = re.compile(r"^([ \t]+)\S", re.M)
_WS_RE = re.compile(r"[ \t\n\r]*")
_EMPTY_LIST_RE = re.compile(r"\[\s*\]")
_DECODER = json.JSONDecoder()


# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────
def load_sidecar(path: Path) -> dict[str, Any]:
    """Return the top-level JSON object stored in *path*.

    Raises:
        InvalidDocument: When the file is missing, empty, not valid JSON or
            does not hold a JSON object.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidDocument(path, exc.strerror or "unreadable") from exc
    if not text.strip():
        raise InvalidDocument(path, "empty file")
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidDocument(path, f"line {exc.lineno}: {exc.msg}") from exc
    if not isinstance(doc, dict):
        raise InvalidDocument(path, "top-level value is not an object")
    return doc


def _as_token(value: Any) -> str:
    """Render one JSON value as the bare text used for equality checks."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def read_field(path: Path, name: str) -> str:
    """Return field *name* of *path* as a single comparison string.

    Scalars come back without quotes; lists come back as their elements
    joined with ``", "`` so that e.g. two ``ShimSetting`` vectors compare as
    opaque tokens. A missing field yields ``""``; so does an unreadable
    document, after a warning.
    """
    try:
        doc = load_sidecar(path)
    except InvalidDocument as exc:
        log.warning("%s", exc)
        return ""

    value = doc.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(_as_token(v) for v in value)
    return _as_token(value)


# ─────────────────────────────────────────────────────────────────────────────
# Text layout
# ─────────────────────────────────────────────────────────────────────────────
def _skip_ws(text: str, idx: int) -> int:
    return _WS_RE.match(text, idx).end()


def _value_spans(text: str) -> Tuple[Dict[str, Tuple[int, int]], int]:
    """Locate the value of every top-level key in the JSON object *text*.

    Returns:
        ``(spans, last_end)`` where *spans* maps each key to the
        ``(start, end)`` offsets of its value (the last occurrence wins, like
        :func:`json.loads`) and *last_end* is the offset right after the final
        value, or ``-1`` for an empty object.

    *text* must already be known to hold a JSON object.
    """
    spans: Dict[str, Tuple[int, int]] = {}
    last_end = -1
    idx = _skip_ws(text, _skip_ws(text, 0) + 1)
    while text[idx] == '"':
        key, idx = scanstring(text, idx + 1)
        idx = _skip_ws(text, _skip_ws(text, idx) + 1)  # past ':'
        _, end = _DECODER.raw_decode(text, idx)
        spans[key] = (idx, end)
        last_end = end
        idx = _skip_ws(text, end)
        if text[idx] != ",":
            break
        idx = _skip_ws(text, idx + 1)
    return spans, last_end


def _layout_of(text: str) -> tuple[str, str]:
    """Return ``(indent, trailer)`` used by the document *text*."""
    m = _INDENT_RE.search(text)
    indent = m.group(1) if m else "  "
    trailer = "\n" if text.endswith("\n") else ""
    return indent, trailer


def _render(value: Any, indent: str, *, compact: bool) -> str:
    """Serialise *value* for use as a top-level field value."""
    if compact or not isinstance(value, (list, dict)) or not value:
        return json.dumps(value, ensure_ascii=False)
    nested = json.dumps(value, indent=indent, ensure_ascii=False)
    return nested.replace("\n", "\n" + indent)


def _is_one_line_list(span: str) -> bool:
    return span.startswith("[") and "\n" not in span and not _EMPTY_LIST_RE.fullmatch(span)


def _splice(original: str, name: str, value: Any) -> str:
    """Return *original* with field *name* set to *value*."""
    indent, trailer = _layout_of(original)
    spans, last_end = _value_spans(original)

    if name in spans:
        start, end = spans[name]
        compact = _is_one_line_list(original[start:end])
        return original[:start] + _render(value, indent, compact=compact) + original[end:]

    if last_end < 0:
        doc = {name: value}
        return json.dumps(doc, indent=indent, ensure_ascii=False) + trailer

    key = json.dumps(name, ensure_ascii=False)
    if "\n" in original.strip():
        entry = f",\n{indent}{key}: {_render(value, indent, compact=False)}"
    else:
        entry = f", {key}: {_render(value, indent, compact=True)}"
    return original[:last_end] + entry + original[last_end:]


def _atomic_write(path: Path, text: str) -> None:
    """Write *text* next to *path* then swap it in with one rename."""
    fd, tmp = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.stem}.", suffix=".json.tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        mode = path.stat().st_mode & 0o777
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


# ─────────────────────────────────────────────────────────────────────────────
# Public editors
# ─────────────────────────────────────────────────────────────────────────────
def write_scalar_field(path: Path, name: str, value: Any) -> bool:
    """Set field *name* of *path* to *value*.

    An existing field is replaced at its current position; a missing one is
    appended after the last field.

    Returns:
        ``True`` when the document changed on disk.

    Raises:
        InvalidDocument: When *path* has no recognisable field structure.
    """
    path = Path(path)
    doc = load_sidecar(path)
    if name in doc and doc[name] == value and type(doc[name]) is type(value):
        log.debug("%s already %s=%r", path.name, name, value)
        return False

    action = "updated" if name in doc else "added"
    original = path.read_text(encoding="utf-8")
    _atomic_write(path, _splice(original, name, value))
    log.info("%s %s=%r in %s", action, name, value, path.name)
    return True


def _ensure_absent(item: str, entries: list[Any], path: Path) -> None:
    """Raise :class:`DuplicateAssociation` when *item* is already in *entries*."""
    if item in entries:
        raise DuplicateAssociation(item, path)


def write_list_field(
    path: Path,
    name: str,
    items: Iterable[str],
    *,
    preserve_existing: bool = True,
) -> List[str]:
    """Merge *items* into the list-valued field *name* of *path*.

    When the field exists and *preserve_existing* is set, new items are
    appended after the current entries and items already listed are skipped
    with a warning. When the field is absent (or *preserve_existing* is
    false) it is (re)created with exactly *items*, minus repeats.

    Returns:
        The entries actually added, in order.

    Raises:
        InvalidDocument: When *path* has no recognisable field structure.
    """
    path = Path(path)
    doc = load_sidecar(path)
    original = path.read_text(encoding="utf-8")

    current = doc.get(name) if preserve_existing else None
    if current is None:
        merged: list[Any] = []
    elif isinstance(current, list):
        merged = list(current)
    else:
        merged = [current]

    added: list[str] = []
    for item in items:
        try:
            _ensure_absent(item, merged, path)
        except DuplicateAssociation as exc:
            log.warning("%s", exc)
            continue
        merged.append(item)
        added.append(item)

    if name in doc and doc[name] == merged:
        return added

    _atomic_write(path, _splice(original, name, merged))
    log.info("%s: %d new %s entr%s", path.name, len(added), name,
             "y" if len(added) == 1 else "ies")
    return added


__all__ = [
    "load_sidecar",
    "read_field",
    "write_scalar_field",
    "write_list_field",
]
