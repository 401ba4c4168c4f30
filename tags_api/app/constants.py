"""API-level constants shared across modules."""
from __future__ import annotations


class TagSourceBackend:
    EXIFTOOL = "exiftool"
    FILE = "file"


class XmlElement:
    TABLE = "table"
    TAG = "tag"
    DESC = "desc"


STREAM_OPEN = b'{"tags": ['
STREAM_SEPARATOR = b","
STREAM_CLOSE = b"]}"

TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})
