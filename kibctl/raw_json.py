"""
Helpers working on JSON text rather than decoded values.

Kibana payloads are spliced and sliced as text so that the records they
contain reach the output exactly as the server sent them. The scanning is
delegated to ``json.JSONDecoder.raw_decode``, which reports where each value
ends; only the object and array punctuation is handled here.
"""
import json
import re
from typing import List, NamedTuple, Optional, Sequence, Tuple

_decoder = json.JSONDecoder()
_WHITESPACE = re.compile(r"[ \t\n\r]*")


class ArraySpan(NamedTuple):
    """Location of an array inside a JSON text.

    ``start`` is the index of the opening bracket, ``end`` the index of the
    closing bracket and ``elements`` the ``(start, end)`` slice of each
    element.
    """
    start: int
    end: int
    elements: List[Tuple[int, int]]


def _skip_ws(text: str, idx: int) -> int:
    return _WHITESPACE.match(text, idx).end()


def _expect(text: str, idx: int, char: str) -> None:
    if not text.startswith(char, idx):
        found = repr(text[idx]) if idx < len(text) else "end of document"
        raise ValueError(f"expected {char!r} at position {idx}, found {found}")


def _scan_array(text: str, start: int) -> ArraySpan:
    elements: List[Tuple[int, int]] = []
    idx = _skip_ws(text, start + 1)
    if text.startswith("]", idx):
        return ArraySpan(start, idx, elements)
    while True:
        _, end = _decoder.raw_decode(text, idx)
        elements.append((idx, end))
        idx = _skip_ws(text, end)
        if text.startswith(",", idx):
            idx = _skip_ws(text, idx + 1)
            continue
        _expect(text, idx, "]")
        return ArraySpan(start, idx, elements)


def find_array(text: str, key: str) -> Optional[ArraySpan]:
    """
    Locate the array stored under a top-level key of a JSON object text.

    Args:
        text: JSON text whose root is an object
        key: Top-level key to look for

    Returns:
        Optional[ArraySpan]: The array location, or None if the key is absent

    Raises:
        ValueError: If the text is not a JSON object or the value is not an array
    """
    idx = _skip_ws(text, 0)
    _expect(text, idx, "{")
    idx = _skip_ws(text, idx + 1)
    if text.startswith("}", idx):
        return None
    while True:
        name, idx = _decoder.raw_decode(text, idx)
        if not isinstance(name, str):
            raise ValueError(f"expected an object key before position {idx}")
        idx = _skip_ws(text, idx)
        _expect(text, idx, ":")
        idx = _skip_ws(text, idx + 1)
        if name == key:
            _expect(text, idx, "[")
            return _scan_array(text, idx)
        _, idx = _decoder.raw_decode(text, idx)
        idx = _skip_ws(text, idx)
        if text.startswith(",", idx):
            idx = _skip_ws(text, idx + 1)
            continue
        _expect(text, idx, "}")
        return None


def array_elements(text: str, key: str) -> List[str]:
    """Return the verbatim text of every element of the array under ``key``."""
    span = find_array(text, key)
    if span is None:
        return []
    return [text[start:end] for start, end in span.elements]


def append_to_array(text: str, key: str, raw_elements: Sequence[str]) -> str:
    """
    Append raw JSON values to the end of the array under a top-level key.

    The text outside the insertion point is left untouched.

    Args:
        text: JSON text whose root is an object
        key: Top-level key holding the array
        raw_elements: JSON texts to append, in order

    Returns:
        str: The new JSON text

    Raises:
        ValueError: If the key is missing or does not hold an array
    """
    if not raw_elements:
        return text
    span = find_array(text, key)
    if span is None:
        raise ValueError(f"no {key!r} array in document")
    insertion = ",".join(raw_elements)
    if span.elements:
        position = span.elements[-1][1]
        insertion = "," + insertion
    else:
        position = span.start + 1
    return text[:position] + insertion + text[position:]
