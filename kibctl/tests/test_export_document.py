import json

import pytest

from kibctl.errors import ParseError
from kibctl.export.document import ExportDocument

ORIGINAL = (
    b'{"version":"6.8.0","objects":[\n'
    b'  {"id":"abc123","type":"dashboard","attributes":{"title":"Sales","ratio":1.0}},\n'
    b'  {"id":"v1","type":"visualization","attributes":{"title":"caf\\u00e9"}}\n'
    b']}'
)


def test_from_bytes_decodes_objects():
    document = ExportDocument.from_bytes(ORIGINAL)

    assert len(document) == 2
    assert [o["id"] for o in document] == ["abc123", "v1"]


def test_append_keeps_original_elements_byte_for_byte():
    document = ExportDocument.from_bytes(ORIGINAL)
    record = '{"id":"ip1","type":"index-pattern","attributes":{"title":"logs-*"}}'

    document.append_objects([record])
    merged = document.to_bytes()

    # Number formatting and escapes of the server's text survive untouched
    assert b'"ratio":1.0' in merged
    assert b'caf\\u00e9' in merged
    assert merged.startswith(ORIGINAL[:-3])
    assert record.encode() in merged
    decoded = json.loads(merged)["objects"]
    assert decoded[:2] == json.loads(ORIGINAL)["objects"]
    assert decoded[2] == json.loads(record)
    assert len(document) == 3


@pytest.mark.parametrize(
    "payload",
    [b"not json", b"[]", b'{"objects": {}}', b'{"version": "6"}', b"\xff\xfe"],
)
def test_malformed_export_raises_parse_error(payload):
    with pytest.raises(ParseError, match="dashboard export"):
        ExportDocument.from_bytes(payload)


def test_appending_malformed_record_raises_parse_error():
    document = ExportDocument.from_bytes(b'{"objects": []}')

    with pytest.raises(ParseError):
        document.append_objects(["{broken"])
    assert document.to_bytes() == b'{"objects": []}'
