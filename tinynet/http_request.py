"""An HTTP request as parsed from the wire."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from tinynet.timestamp import Timestamp

# The characters C's isspace() accepts in the default locale.
_SPACES = " \t\n\v\f\r"


class Method(Enum):
    INVALID = 0
    GET = 1
    POST = 2
    HEAD = 3
    PUT = 4
    DELETE = 5


class Version(Enum):
    UNKNOWN = 0
    HTTP10 = 1
    HTTP11 = 2


_METHODS_BY_NAME = {m.name: m for m in Method if m is not Method.INVALID}


@dataclass
class HttpRequest:
    """Method, version, path, query, receive time and headers of a request."""

    method: Method = Method.INVALID
    version: Version = Version.UNKNOWN
    path: str = ""
    query: str = ""
    receive_time: Timestamp = field(default_factory=Timestamp)
    headers: Dict[str, str] = field(default_factory=dict)

    def set_method(self, name: str) -> bool:
        """Set the method from its name; return False if it is not supported."""
        self.method = _METHODS_BY_NAME.get(name, Method.INVALID)
        return self.method is not Method.INVALID

    def method_string(self) -> str:
        """The method's name, or ``UNKNOWN`` for an invalid method."""
        if self.method is Method.INVALID:
            return "UNKNOWN"
        return self.method.name

    def add_header(self, field: str, value: str) -> None:
        """Store a header; whitespace around the value is dropped."""
        self.headers[field] = value.strip(_SPACES)

    def get_header(self, field: str) -> str:
        """The header's value, or an empty string if it is absent."""
        return self.headers.get(field, "")