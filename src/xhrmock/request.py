"""Emulated 'XMLHttpRequest' (see http://www.w3.org/TR/XMLHttpRequest)

Application code drives it with 'open()', 'set_request_header()',
'send()' and 'abort()' and reads the response like it would from
a real client. For test interaction it also exposes:

- method, url, url_parts, is_async, user, password
- request_text
- get_request_header(name)
- set_response_header(name, value)
- receive(status, data) / receive_raw(data)
- err(exception)
- authenticate(user, password)
- raw_request()
"""
import logging
import typing

from . import http11
from .auth import parse_basic_auth
from .exceptions import (
    InvalidMethod,
    InvalidURL,
    SecurityError,
    InvalidStateError,
    NetworkError,
)
from .models import (
    BODYLESS_METHODS,
    FORBIDDEN_METHODS,
    HIDDEN_RESPONSE_HEADERS,
    NORMALIZED_METHODS,
    Callback,
    Headers,
    ReadyState,
    is_forbidden_request_header,
    status_text,
)
from .uri import URIParts, parse_uri
from .utils import decode_text

log = logging.getLogger(__name__)

BodyType = typing.Optional[typing.Union[str, bytes]]


def _noop(request: "MockHttpRequest") -> None:
    pass


class MockHttpRequest:
    UNSENT = ReadyState.UNSENT
    OPENED = ReadyState.OPENED
    HEADERS_RECEIVED = ReadyState.HEADERS_RECEIVED
    LOADING = ReadyState.LOADING
    DONE = ReadyState.DONE

    def __init__(self) -> None:
        self.ready_state = ReadyState.UNSENT

        self.method: typing.Optional[str] = None
        self.url: typing.Optional[str] = None
        self.url_parts: typing.Optional[URIParts] = None
        self.is_async = True
        self.user: typing.Optional[str] = None
        self.password: typing.Optional[str] = None

        self.request_headers = Headers()
        self.request_text: BodyType = None

        self.status = 0
        self.status_text = ""
        self.response_headers = Headers()
        self.response_text: typing.Optional[str] = ""

        # Internal flags
        self.error = False
        self.sent = False

        # Notification hooks, each is called with the request.
        self.onsend: Callback = _noop
        self.onreadystatechange: Callback = _noop
        self.onprogress: Callback = _noop
        self.onload: Callback = _noop
        self.onerror: Callback = _noop
        self.onabort: Callback = _noop

    # Request

    def open(
        self,
        method: str,
        url: str,
        is_async: bool = True,
        user: typing.Optional[str] = None,
        password: typing.Optional[str] = None,
    ) -> None:
        if not isinstance(method, str):
            raise InvalidMethod(
                f"method must be a string, not {method!r}", request=self
            )
        if method.upper() in FORBIDDEN_METHODS:
            raise SecurityError(f"method '{method}' isn't allowed", request=self)
        if method.upper() in NORMALIZED_METHODS:
            method = method.upper()
        self.method = method

        if not isinstance(url, str):
            raise InvalidURL(f"url must be a string, not {url!r}", request=self)
        self.url = url
        self.url_parts = parse_uri(url)

        self.is_async = is_async
        self.user = user
        self.password = password

        log.debug("Opened %s %s (async=%s)", self.method, self.url, is_async)
        self.ready_state = ReadyState.OPENED
        self.onreadystatechange(self)

    def set_request_header(self, name: str, value: str) -> None:
        if is_forbidden_request_header(name):
            log.debug("Dropped forbidden request header %r", name)
            return
        self.request_headers[name] = value

    def send(self, data: BodyType = None) -> None:
        if self.ready_state != ReadyState.OPENED or self.sent:
            raise InvalidStateError(
                f"can't send a request in state {self.ready_state.name}"
                f"{' that was already sent' if self.sent else ''}",
                request=self,
            )
        if self.method in BODYLESS_METHODS:
            data = None

        self.error = False
        self.sent = True
        self.onreadystatechange(self)

        self.request_text = data
        log.debug("Sent %s %s", self.method, self.url)
        self.onsend(self)

    def abort(self) -> None:
        self.response_text = None
        self.error = True
        self.request_headers.clear()
        self.request_text = None
        log.debug("Aborted %s %s", self.method, self.url)
        self.onreadystatechange(self)
        self.onabort(self)
        self.ready_state = ReadyState.UNSENT

    # Response

    def get_response_header(self, name: str) -> typing.Optional[str]:
        if self.ready_state < ReadyState.HEADERS_RECEIVED or self.error:
            return None
        return self.response_headers.get_folded(name)

    def get_all_response_headers(self) -> str:
        return "".join(
            f"{name}: {value}\r\n"
            for name, value in self.response_headers.items()
            if name not in HIDDEN_RESPONSE_HEADERS
        )

    # Test interaction

    def get_request_header(self, name: str) -> typing.Optional[str]:
        return self.request_headers.get(name)

    def set_response_header(self, name: str, value: str) -> None:
        self.response_headers[name] = value

    def receive(self, status: int, data: BodyType) -> None:
        """Simulates the server answering with 'status' and the body 'data'.
        A 'bytes' body is decoded using the 'Content-Type' response
        header's charset, or chardet if there isn't one.
        """
        self._check_answerable()
        if isinstance(data, bytes):
            data = decode_text(data, self.response_headers.get("content-type"))

        log.debug("Received %s for %s %s", status, self.method, self.url)
        self.status = status
        self.status_text = status_text(status)
        self.ready_state = ReadyState.HEADERS_RECEIVED
        self.onprogress(self)
        self.onreadystatechange(self)

        self.response_text = data

        self.ready_state = ReadyState.LOADING
        self.onprogress(self)
        self.onreadystatechange(self)

        self.ready_state = ReadyState.DONE
        self.onreadystatechange(self)
        self.onprogress(self)
        self.onload(self)

    def receive_raw(self, data: bytes) -> None:
        """Simulates the server answering with a complete HTTP/1.1 response
        given as wire bytes. Headers are stored like 'set_response_header()'
        does and the decoded body is handed to 'receive()'.
        """
        self._check_answerable()
        status, headers, body = http11.parse_response(self, data)
        for name, value in headers:
            self.response_headers.add(name, value)
        self.receive(status, body)

    def raw_request(self) -> bytes:
        """Renders the request as it would have gone over the wire in HTTP/1.1"""
        if not self.sent:
            raise InvalidStateError("request hasn't been sent", request=self)
        return http11.render_request(self)

    def err(self, exception: typing.Any) -> None:
        """Simulates a transport failure. Synchronous requests raise
        'exception' to the caller instead of calling 'onerror'.
        """
        self._check_answerable()

        self.response_text = None
        self.error = True
        self.request_headers.clear()
        self.ready_state = ReadyState.DONE
        log.debug("Failed %s %s: %r", self.method, self.url, exception)
        if not self.is_async:
            if isinstance(exception, BaseException) or (
                isinstance(exception, type) and issubclass(exception, BaseException)
            ):
                raise exception
            raise NetworkError(str(exception), request=self, error=exception)
        self.onreadystatechange(self)
        self.onerror(self)

    def authenticate(self, user: str, password: str) -> bool:
        """Checks credentials against those given to 'open()', then those
        within the URL and finally a Basic 'Authorization' header.
        """
        if self.user:
            return user == self.user and password == self.password

        if self.url_parts is not None and self.url_parts.user:
            return (user, password) == (self.url_parts.user, self.url_parts.password)

        credentials = parse_basic_auth(self.get_request_header("authorization"))
        if credentials is None:
            return False
        return (user, password) == credentials

    def _check_answerable(self) -> None:
        # Can't respond to an unopened or unsent request.
        if self.ready_state != ReadyState.OPENED or not self.sent:
            raise InvalidStateError(
                f"can't answer a request in state {self.ready_state.name}"
                f"{'' if self.sent else ' that was never sent'}",
                request=self,
            )

    def __repr__(self) -> str:
        return f"<MockHttpRequest [{self.method} {self.ready_state.name}]>"
