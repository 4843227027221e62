#!/usr/bin/env python3

import socket, sys, argparse, logging
from collections import namedtuple
from contextlib import closing
from urllib.parse import quote, urlsplit

import httpconfig
from httperrors import (ConnectionFailure, HttpCurlError, InvalidURL,
                        WriteFailure)
from httppayload import HttpRequest, parse_header_args, validate_method
from httpreader import ResponseParser

logger = logging.getLogger(__name__)

Target = namedtuple("Target", "scheme host port request_target")

PATH_SAFE = "/%:@!$&'()*+,;=-._~"
QUERY_SAFE = PATH_SAFE + "?"


def resolve_url(url):
    """Split an absolute URL into scheme, host, port and request-target"""
    try:
        parsed = urlsplit(url)
        port = parsed.port
    except ValueError as e:
        raise InvalidURL(f"invalid URL {url!r}: {e}") from e
    if not parsed.scheme or not parsed.hostname:
        raise InvalidURL(f"invalid URL {url!r}: need scheme and host")

    # https only picks the port; the connection stays plain TCP
    if port is None:
        port = httpconfig.HTTPS_PORT if parsed.scheme == 'https' else httpconfig.HTTP_PORT

    # Escape what the request line cannot carry; existing %XX escapes stay
    target = quote(parsed.path, safe=PATH_SAFE) or '/'
    if parsed.query:
        target += '?' + quote(parsed.query, safe=QUERY_SAFE)
    return Target(parsed.scheme, parsed.hostname, port, target)


class VerboseEcho:
    """Mirror request and response lines the way curl -v does"""

    def __init__(self, stream=None):
        self.stream = stream

    def sent(self, line):
        print(f"> {line}", file=self.stream or sys.stderr)

    def received(self, line):
        print(f"< {line}", file=self.stream or sys.stderr)


def send_request(request, port, timeout=None, echo=None):
    """Send one request over a fresh connection and parse the response"""
    logger.debug("Connecting to %s:%s", request.host, port)
    try:
        sock = socket.create_connection((request.host, port), timeout=timeout)
    except OSError as e:
        raise ConnectionFailure(f"cannot connect to {request.host}:{port}: {e}") from e

    with closing(sock):
        payload = request.serialize()
        try:
            sock.sendall(payload)
        except OSError as e:
            raise WriteFailure(f"error writing request: {e}") from e
        logger.debug("Wrote %d bytes", len(payload))

        if echo:
            for line in request.head_lines():
                echo.sent(line)
            echo.sent("")

        with closing(sock.makefile('rb')) as reader:
            parser = ResponseParser(reader)
            status_line = parser.read_status_line()
            if echo:
                echo.received(status_line)
            parser.read_headers(echo.received if echo else None)
            parser.read_body()
            return parser.result()


def curl(method, url, body=None, headers=None, verbose=False, timeout=None):
    """Validate, resolve, send, and return the parsed HttpResponse"""
    method = validate_method(method)
    target = resolve_url(url)
    logger.debug("Resolved %s to %s", url, target)

    request = HttpRequest(method, target.request_target, target.host, body, headers or {})
    echo = VerboseEcho() if verbose else None
    return send_request(request, target.port, timeout, echo)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="httpcurl", description="Minimal HTTP/1.1 client over a raw socket")
    parser.add_argument('url', help='URL to request')
    parser.add_argument('-X', dest='method', default='GET', help='HTTP method (GET, DELETE, POST, PUT)')
    parser.add_argument('-d', dest='data', help='Data for POST and PUT requests')
    parser.add_argument('-H', dest='headers', action='append', default=[],
                        help="Header to include, 'Name: value' (repeatable)")
    parser.add_argument('-v', dest='verbose', action='store_true', help='Verbose output')
    parser.add_argument('--timeout', type=float, default=httpconfig.TIMEOUT,
                        help='Seconds to wait on connect, write and read')
    parser.add_argument('--debug', action='store_true', help='Log diagnostics to stderr')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else httpconfig.LOG_LEVEL,
        format=httpconfig.LOG_FORMAT,
    )

    try:
        response = curl(args.method, args.url, args.data, parse_header_args(args.headers),
                        verbose=args.verbose, timeout=args.timeout)
    except HttpCurlError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.verbose:
        print(response.status_line)
    print(response.body.decode('utf-8', errors='replace'))
    return 0


if __name__ == "__main__":
    sys.exit(main())
