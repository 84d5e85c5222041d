import typing

if typing.TYPE_CHECKING:
    from .request import MockHttpRequest


class XHRMockError(Exception):
    """Base error type for 'xhrmock' which may carry the request
    whose lifecycle raised it and the encapsulated error value if
    this error wraps a different exception or a simulated failure.
    """

    def __init__(
        self,
        message: str,
        request: typing.Optional["MockHttpRequest"] = None,
        error: typing.Any = None,
    ):
        super().__init__(message)

        self.message = message
        self.request = request
        self.error = error


class InvalidMethod(XHRMockError):
    """Error raised when 'open()' is given a method that isn't a string"""


class InvalidURL(XHRMockError):
    """Error raised when 'open()' is given a URL that isn't a string"""


class SecurityError(XHRMockError):
    """Error raised for methods a browser refuses to send:
    'CONNECT', 'TRACE' and 'TRACK' in any letter case.
    """


class InvalidStateError(XHRMockError):
    """Error raised when an operation is called while the request
    isn't in a ready state that allows it, eg 'send()' before 'open()'
    or answering a request twice.
    """


class NetworkError(XHRMockError):
    """Raised from 'err()' on a synchronous request when the simulated
    failure isn't an exception itself. The value passed to 'err()'
    is kept on '.error'.
    """


class ProtocolError(XHRMockError):
    """Generic error relating to rendering or parsing HTTP/1.1 messages"""


class LocalProtocolError(ProtocolError):
    """Error raised when the request can't be rendered as valid HTTP/1.1"""


class RemoteProtocolError(ProtocolError):
    """Error raised when a response given to 'receive_raw()' isn't valid HTTP/1.1"""
