import gzip
import zlib
import pytest
import xhrmock
from xhrmock import MockHttpRequest, ReadyState


def sent_request(method="POST", url="http://some.host/path", data="ping"):
    request = MockHttpRequest()
    request.open(method, url)
    request.set_request_header("Content-Type", "text/plain")
    request.send(data)
    return request


def test_raw_request_with_body():
    request = sent_request(url="http://some.host/path?x=1#fragment")
    raw = request.raw_request()

    assert raw.startswith(b"POST /path?x=1 HTTP/1.1\r\nhost: some.host\r\n")
    assert b"content-type: text/plain\r\n" in raw
    assert b"content-length: 4\r\n" in raw
    assert raw.endswith(b"\r\n\r\nping")


def test_raw_request_without_body():
    request = sent_request("GET", "http://some.host:8080", data="ignored")
    raw = request.raw_request()

    assert raw.startswith(b"GET / HTTP/1.1\r\nhost: some.host:8080\r\n")
    assert b"content-length" not in raw
    assert raw.endswith(b"\r\n\r\n")


def test_raw_request_bytes_body():
    request = sent_request(data=b"\x00\x01")

    assert request.raw_request().endswith(b"content-length: 2\r\n\r\n\x00\x01")


def test_raw_request_before_send():
    request = MockHttpRequest()
    request.open("POST", "http://some.host/path")

    with pytest.raises(xhrmock.InvalidStateError):
        request.raw_request()


def test_raw_request_invalid_header_value():
    request = MockHttpRequest()
    request.open("POST", "http://some.host/path")
    request.set_request_header("X-Robot", "bender\r\nX-Injected: yes")
    request.send("ping")

    with pytest.raises(xhrmock.LocalProtocolError):
        request.raw_request()


def test_receive_raw(count_calls):
    request = sent_request()
    request.onload = count_calls()
    request.receive_raw(
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: text/plain; charset=utf-8\r\n"
        b"Content-Length: 4\r\n"
        b"X-Robot: bender\r\n"
        b"\r\n"
        b"pong"
    )

    assert request.ready_state == ReadyState.DONE
    assert request.status == 200
    assert request.status_text == "200 OK"
    assert request.response_text == "pong"
    assert request.get_response_header("X-Robot") == "bender"
    assert request.get_response_header("content-length") == "4"
    assert request.onload.call_count == 1


def test_receive_raw_multiple_values():
    request = sent_request()
    request.receive_raw(
        b"HTTP/1.1 200 OK\r\n"
        b"Set-Cookie: a=1\r\n"
        b"Vary: Accept\r\n"
        b"Set-Cookie: b=2\r\n"
        b"Vary: Cookie\r\n"
        b"Content-Length: 0\r\n"
        b"\r\n"
    )

    assert request.get_response_header("set-cookie") == "a=1, b=2"
    assert request.get_response_header("vary") == "Accept, Cookie"
    assert request.get_all_response_headers() == (
        "vary: Accept\r\nvary: Cookie\r\ncontent-length: 0\r\n"
    )


@pytest.mark.parametrize(
    ["content_encoding", "body"],
    [
        ("gzip", gzip.compress(b"pong")),
        ("deflate", zlib.compress(b"pong")),
        ("deflate", zlib.compress(b"pong")[2:-4]),
        ("identity", b"pong"),
        ("br-but-unknown", b"pong"),
    ],
)
def test_receive_raw_content_encoding(content_encoding, body):
    request = sent_request()
    request.receive_raw(
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Encoding: %b\r\n"
        b"Content-Length: %d\r\n"
        b"\r\n%b" % (content_encoding.encode(), len(body), body)
    )

    assert request.response_text == "pong"


def test_receive_raw_skips_informational_responses():
    request = sent_request()
    request.receive_raw(
        b"HTTP/1.1 100 Continue\r\n\r\n"
        b"HTTP/1.1 404 Not Found\r\nContent-Length: 0\r\n\r\n"
    )

    assert request.status == 404
    assert request.status_text == "404 Not Found"
    assert request.response_text == ""


def test_receive_raw_head_response_has_no_body():
    request = sent_request("HEAD")
    request.receive_raw(b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\n")

    assert request.response_text == ""
    assert request.get_response_header("content-length") == "5"


def test_receive_raw_read_until_close():
    request = sent_request()
    request.receive_raw(b"HTTP/1.1 200 OK\r\n\r\nuntil the end")

    assert request.response_text == "until the end"


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"not http",
        b"not http\r\n\r\n",
        b"HTTP/1.1 200 OK\r\nContent-Length: 10\r\n\r\nabc",
        b"HTTP/1.1 200 OK\r\nContent-Encoding: gzip\r\nContent-Length: 3\r\n\r\nabc",
    ],
)
def test_receive_raw_invalid_response(data, count_calls):
    request = sent_request()
    request.onreadystatechange = count_calls()

    with pytest.raises(xhrmock.RemoteProtocolError):
        request.receive_raw(data)

    assert request.ready_state == ReadyState.OPENED
    assert request.onreadystatechange.call_count == 0


def test_receive_raw_invalid_state():
    request = MockHttpRequest()
    request.open("GET", "http://some.host/path")

    with pytest.raises(xhrmock.InvalidStateError):
        request.receive_raw(b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n")
