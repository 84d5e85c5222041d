import typing
import zlib

import h11

from .exceptions import LocalProtocolError, RemoteProtocolError
from .uri import parse_uri
from .utils import decode_content, to_bytes

if typing.TYPE_CHECKING:
    from .request import MockHttpRequest


def render_request(request: "MockHttpRequest") -> bytes:
    conn = h11.Connection(h11.CLIENT)
    try:
        return b"".join(
            conn.send(event) or b"" for event in _request_to_h11_events(request)
        )
    except (h11.LocalProtocolError, UnicodeError) as e:
        raise LocalProtocolError(str(e), request=request, error=e) from e


def parse_response(
    request: "MockHttpRequest", data: bytes
) -> typing.Tuple[int, typing.List[typing.Tuple[str, str]], bytes]:
    """Parses a complete HTTP/1.1 response to 'request' into its
    status code, headers and decoded body. 1XX responses are dropped.
    """
    conn = h11.Connection(h11.CLIENT)

    # h11 only needs the method to know how the response body
    # is framed so the rest of the request doesn't matter here.
    try:
        conn.send(
            h11.Request(
                method=to_bytes(request.method or "GET"),
                target=b"/",
                headers=[(b"host", b"localhost")],
            )
        )
        conn.send(h11.EndOfMessage())
    except h11.LocalProtocolError as e:
        raise LocalProtocolError(str(e), request=request, error=e) from e

    conn.receive_data(data)
    conn.receive_data(b"")

    status: typing.Optional[int] = None
    headers: typing.List[typing.Tuple[str, str]] = []
    body = bytearray()
    while True:
        try:
            event = conn.next_event()
        except h11.RemoteProtocolError as e:
            raise RemoteProtocolError(str(e), request=request, error=e) from e

        if isinstance(event, h11.InformationalResponse):
            continue
        elif isinstance(event, h11.Response):
            status = event.status_code
            headers = [
                (k.decode("latin-1"), v.decode("latin-1")) for k, v in event.headers
            ]
        elif isinstance(event, h11.Data):
            body += event.data
        elif isinstance(event, h11.EndOfMessage):
            break
        else:
            raise RemoteProtocolError(
                f"incomplete response, got {event!r}", request=request
            )

    content_encoding = ", ".join(v for k, v in headers if k == "content-encoding")
    try:
        content = decode_content(bytes(body), content_encoding)
    except zlib.error as e:
        raise RemoteProtocolError(
            f"couldn't decode '{content_encoding}' body", request=request, error=e
        ) from e
    return typing.cast(int, status), headers, content


def _request_to_h11_events(request: "MockHttpRequest") -> typing.List[typing.Any]:
    url_parts = request.url_parts or parse_uri(request.url or "")
    host = url_parts.host.encode("idna")
    if url_parts.port:
        host += b":" + url_parts.port.encode()
    target = url_parts.path or "/"
    if url_parts.query:
        target = f"{target}?{url_parts.query}"

    body: typing.Optional[bytes] = None
    if request.request_text is not None:
        body = to_bytes(
            request.request_text
            if isinstance(request.request_text, (str, bytes))
            else str(request.request_text)
        )

    # Put the 'Host' header first in the request as it's required.
    h11_headers = [(b"host", host)]
    for k, v in request.request_headers.items():
        h11_headers.append((k.encode(), str(v).encode()))
    if body is not None:
        h11_headers.append((b"content-length", str(len(body)).encode()))

    events: typing.List[typing.Any] = [
        h11.Request(
            method=to_bytes(request.method or ""),
            target=target.encode(),
            headers=h11_headers,
        )
    ]
    if body:
        events.append(h11.Data(data=body))
    events.append(h11.EndOfMessage())
    return events
