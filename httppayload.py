import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from httperrors import InvalidHeader, UnsupportedMethod

logger = logging.getLogger(__name__)

HTTP_VERSION = "HTTP/1.1"
CRLF = b"\r\n"
FORBIDDEN_CHARS = ("\r", "\n", "\0")
# Header names the builder writes itself
RESERVED_HEADERS = ("host", "content-length")
BODY_RESERVED_HEADERS = RESERVED_HEADERS + ("connection",)


class HttpMethod(Enum):
    GET = "GET"
    DELETE = "DELETE"
    POST = "POST"
    PUT = "PUT"

    @property
    def has_body(self):
        return self in (HttpMethod.POST, HttpMethod.PUT)


def validate_method(method):
    """Return the HttpMethod for a method name, case-insensitive"""
    if isinstance(method, HttpMethod):
        return method
    try:
        return HttpMethod(str(method).upper())
    except ValueError:
        raise UnsupportedMethod(method) from None


def parse_header_args(values):
    """Build a read-only header set from 'Name: value' strings"""
    headers = {}
    for value in values or ():
        if ':' not in value:
            logger.debug("Ignoring header argument without ':': %r", value)
            continue
        name, val = value.split(':', 1)
        headers[name.strip()] = val.strip()
    return MappingProxyType(headers)


def _check_field(kind, value):
    if any(c in value for c in FORBIDDEN_CHARS):
        raise InvalidHeader(f"{kind} contains control characters: {value!r}")


@dataclass(frozen=True)
class HttpRequest:
    """
    One request to put on the wire.

    Headers are copied into a read-only mapping; the caller's dict is never
    touched after construction.
    """
    method: HttpMethod
    target: str
    host: str
    body: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "method", validate_method(self.method))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))

        _check_field("request-target", self.target)
        _check_field("host", self.host)
        reserved = BODY_RESERVED_HEADERS if self.method.has_body else RESERVED_HEADERS
        for name, value in self.headers.items():
            _check_field("header name", name)
            _check_field("header value", value)
            if name.lower() in reserved:
                raise InvalidHeader(f"header {name!r} is set by the request builder")

    @property
    def body_bytes(self):
        if not self.method.has_body:
            return b""
        return (self.body or "").encode("utf-8")

    def head_lines(self):
        """Request line and header lines in the order they are written"""
        lines = [
            f"{self.method.value} {self.target} {HTTP_VERSION}",
            f"Host: {self.host}",
        ]
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        if self.method.has_body:
            lines.append("Connection: close")
            lines.append(f"Content-Length: {len(self.body_bytes)}")
        return lines

    def serialize(self):
        buf = bytearray()
        for line in self.head_lines():
            buf += line.encode("utf-8")
            buf += CRLF
        buf += CRLF
        buf += self.body_bytes
        return bytes(buf)


def build_request(method, target, host, body=None, headers=None):
    """Serialize a request straight to bytes"""
    return HttpRequest(method, target, host, body, headers or {}).serialize()
