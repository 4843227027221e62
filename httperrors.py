"""Exceptions raised by the httpcurl client"""


class HttpCurlError(Exception):
    """Base class for every failure of a single request attempt"""


class UnsupportedMethod(HttpCurlError, ValueError):
    def __init__(self, method):
        super().__init__(f"method not supported: {method}")
        self.method = method


class InvalidURL(HttpCurlError, ValueError):
    pass


class InvalidHeader(HttpCurlError, ValueError):
    pass


class ConnectionFailure(HttpCurlError):
    pass


class WriteFailure(HttpCurlError):
    pass


class ReadFailure(HttpCurlError):
    pass


class EmptyResponse(ReadFailure):
    """Connection closed before a status line arrived"""


class ShortBody(ReadFailure):
    """Connection closed before Content-Length bytes of body arrived"""

    def __init__(self, expected, received):
        super().__init__(f"expected {expected} body bytes, connection closed after {received}")
        self.expected = expected
        self.received = received
