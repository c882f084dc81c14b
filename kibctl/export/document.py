"""
The dashboard export document.

Kibana answers the dashboard export endpoint with ``{"objects": [...]}``,
one saved object per element. The document is kept as the text received from
the server together with its decoded form: reads go through the decoded
objects, writes splice the text so existing records stay byte for byte.
"""
import json
from typing import Any, Dict, Iterator, List, Sequence

from kibctl.errors import ParseError
from kibctl.raw_json import append_to_array

OBJECTS_KEY = "objects"


class ExportDocument:
    """A dashboard export, as text plus decoded saved objects."""

    def __init__(self, text: str, objects: List[Any]):
        self._text = text
        self._objects = objects

    @classmethod
    def from_bytes(cls, content: bytes) -> "ExportDocument":
        """
        Parse an export payload.

        Raises:
            ParseError: If the payload is not a JSON object with an
                ``objects`` array
        """
        try:
            text = content.decode("utf-8")
            data = json.loads(text)
        except ValueError as e:
            raise ParseError("dashboard export", str(e)) from e
        if not isinstance(data, dict) or not isinstance(data.get(OBJECTS_KEY), list):
            raise ParseError("dashboard export", f"no {OBJECTS_KEY!r} array in document")
        return cls(text, data[OBJECTS_KEY])

    @property
    def objects(self) -> List[Any]:
        """Decoded saved objects, in document order."""
        return self._objects

    @property
    def text(self) -> str:
        return self._text

    def append_objects(self, raw_records: Sequence[str]) -> None:
        """
        Append saved objects, given as JSON text, to the ``objects`` array.

        Args:
            raw_records: One JSON object text per record, appended verbatim
        """
        decoded: List[Dict[str, Any]] = []
        for raw in raw_records:
            try:
                decoded.append(json.loads(raw))
            except ValueError as e:
                raise ParseError("saved object", str(e)) from e
        try:
            self._text = append_to_array(self._text, OBJECTS_KEY, raw_records)
        except ValueError as e:
            raise ParseError("dashboard export", str(e)) from e
        self._objects = self._objects + decoded

    def to_bytes(self) -> bytes:
        return self._text.encode("utf-8")

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._objects)
