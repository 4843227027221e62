import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from httperrors import EmptyResponse, ReadFailure, ShortBody

logger = logging.getLogger(__name__)

# Header bytes are latin-1 on the wire; every byte maps to one character
HEADER_ENCODING = "iso-8859-1"
READ_CHUNK = 8192


def lookup_header(headers, key):
    """Case-insensitive lookup; the last matching name wins"""
    key = key.lower()
    found = None
    for name, value in headers.items():
        if name.lower() == key:
            found = value
    return found


@dataclass
class HttpResponse:
    status_line: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def get_header(self, key: str) -> Optional[str]:
        return lookup_header(self.headers, key)

    @property
    def status_code(self) -> Optional[int]:
        parts = self.status_line.split(' ', 2)
        if len(parts) > 1 and parts[1].isdigit():
            return int(parts[1])
        return None


class ParserState(Enum):
    AWAITING_STATUS_LINE = 1
    READING_HEADERS = 2
    READING_BODY = 3
    DONE = 4


def content_length(value):
    """Body length from a Content-Length value; missing or bad values count as 0"""
    if value is None:
        return 0
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        logger.debug("Unparseable Content-Length %r, reading no body", value)
        return 0
    return int(value)


class ResponseParser:
    """
    Reads one response off a buffered binary stream.

    The steps only run in order: status line, header block, body. Each
    step moves the parser to the next state.
    """

    def __init__(self, reader):
        self.reader = reader
        self.state = ParserState.AWAITING_STATUS_LINE
        self.status_line = None
        self.headers = {}
        self.body = b""

    def _expect(self, state):
        if self.state is not state:
            raise RuntimeError(f"parser is in state {self.state.name}, expected {state.name}")

    def _readline(self):
        try:
            return self.reader.readline()
        except OSError as e:
            raise ReadFailure(f"error reading response: {e}") from e

    def read_status_line(self):
        self._expect(ParserState.AWAITING_STATUS_LINE)
        line = self._readline()
        if not line:
            raise EmptyResponse("connection closed before status line")
        self.status_line = line.decode(HEADER_ENCODING).rstrip()
        self.state = ParserState.READING_HEADERS
        return self.status_line

    def read_headers(self, on_line=None):
        """Read the header block; on_line sees every trimmed line as received"""
        self._expect(ParserState.READING_HEADERS)
        while True:
            raw = self._readline()
            line = raw.decode(HEADER_ENCODING).strip()
            if on_line:
                on_line(line)
            if not line:
                # blank line, or the stream ended inside the header block
                break
            if ':' not in line:
                continue
            name, value = line.split(':', 1)
            self.headers[name.strip()] = value.strip()
        self.state = ParserState.READING_BODY
        return self.headers

    def read_body(self):
        self._expect(ParserState.READING_BODY)
        expected = content_length(lookup_header(self.headers, "Content-Length"))
        chunks = []
        received = 0
        while received < expected:
            try:
                chunk = self.reader.read(min(expected - received, READ_CHUNK))
            except OSError as e:
                raise ReadFailure(f"error reading body: {e}") from e
            if not chunk:
                raise ShortBody(expected, received)
            chunks.append(chunk)
            received += len(chunk)
        self.body = b"".join(chunks)
        self.state = ParserState.DONE
        return self.body

    def result(self):
        self._expect(ParserState.DONE)
        logger.debug("Parsed %r with %d headers and %d body bytes",
                     self.status_line, len(self.headers), len(self.body))
        return HttpResponse(self.status_line, self.headers, self.body)

    def parse(self):
        self.read_status_line()
        self.read_headers()
        self.read_body()
        return self.result()


def read_response(reader):
    return ResponseParser(reader).parse()
