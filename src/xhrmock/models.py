import enum
import typing

HeadersType = typing.Union[
    typing.Mapping[str, str],
    typing.Iterable[typing.Tuple[str, str]],
    "Headers",
]
Callback = typing.Callable[[typing.Any], None]


class ReadyState(enum.IntEnum):
    """Stages of a request's lifecycle, numbered like the
    'XMLHttpRequest.readyState' constants.
    """

    UNSENT = 0
    OPENED = 1
    HEADERS_RECEIVED = 2
    LOADING = 3
    DONE = 4


STATUS_REASONS: typing.Dict[int, str] = {
    100: "Continue",
    101: "Switching Protocols",
    102: "Processing",
    200: "OK",
    201: "Created",
    202: "Accepted",
    203: "Non-Authoritative Information",
    204: "No Content",
    205: "Reset Content",
    206: "Partial Content",
    207: "Multi-Status",
    300: "Multiple Choices",
    301: "Moved Permanently",
    302: "Moved Temporarily",
    303: "See Other",
    304: "Not Modified",
    305: "Use Proxy",
    307: "Temporary Redirect",
    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Time-out",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Request Entity Too Large",
    414: "Request-URI Too Large",
    415: "Unsupported Media Type",
    416: "Requested range not satisfiable",
    417: "Expectation Failed",
    422: "Unprocessable Entity",
    423: "Locked",
    424: "Failed Dependency",
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Time-out",
    505: "HTTP Version not supported",
    507: "Insufficient Storage",
}
UNKNOWN_REASON = "Unknown"

# Methods a browser normalizes to upper-case. Anything
# else is passed through exactly as the caller spelled it.
NORMALIZED_METHODS = frozenset(("DELETE", "GET", "HEAD", "OPTIONS", "POST", "PUT"))
FORBIDDEN_METHODS = frozenset(("CONNECT", "TRACE", "TRACK"))
BODYLESS_METHODS = frozenset(("GET", "HEAD"))

FORBIDDEN_REQUEST_HEADERS = frozenset(
    (
        "accept-charset",
        "accept-encoding",
        "connection",
        "content-length",
        "cookie",
        "cookie2",
        "content-transfer-encoding",
        "date",
        "expect",
        "host",
        "keep-alive",
        "referer",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "user-agent",
        "via",
    )
)
FORBIDDEN_REQUEST_HEADER_PREFIXES = ("proxy-", "sec-")

# Never rendered by 'getAllResponseHeaders()'
HIDDEN_RESPONSE_HEADERS = frozenset(("set-cookie", "set-cookie2"))


def status_text(status: int) -> str:
    """Renders 'status' the way the emulated client reports it, eg '200 OK'"""
    return f"{status} {STATUS_REASONS.get(status, UNKNOWN_REASON)}"


def is_forbidden_request_header(name: str) -> bool:
    name = name.lower()
    return name in FORBIDDEN_REQUEST_HEADERS or name.startswith(
        FORBIDDEN_REQUEST_HEADER_PREFIXES
    )


class Headers:
    """Case-insensitive header mapping. Keys are stored lower-cased
    and keep the position of their first insertion, so rendering
    follows the order headers were originally set in. A key can
    hold more than one value via 'add()', '__setitem__' always
    replaces whatever was stored before.
    """

    def __init__(self, values: typing.Optional[HeadersType] = None):
        self._internal: typing.Dict[str, typing.List[typing.Tuple[str, str]]] = {}
        if values:
            self.extend(values)

    def get_one(
        self, key: str, default: typing.Optional[str] = None
    ) -> typing.Optional[str]:
        try:
            return self._internal[self._normalize_key(key)][0][1]
        except (KeyError, IndexError):
            return default

    get = get_one

    def get_all(self, key: str) -> typing.List[str]:
        try:
            return [x[1] for x in self._internal[self._normalize_key(key)]]
        except KeyError:
            return []

    def get_folded(self, key: str) -> typing.Optional[str]:
        """Joins every value of 'key' into one string like a
        browser does, or 'None' if the header isn't present.
        """
        values = self.get_all(key)
        if not values:
            return None
        return ", ".join(values)

    def add(self, key: str, value: str) -> None:
        key = self._normalize_key(key)
        self._internal.setdefault(key, []).append((key, value))

    def extend(self, items: HeadersType) -> None:
        for k, v in items.items() if hasattr(items, "items") else items:
            self.add(k, v)

    def keys(self) -> typing.Iterable[str]:
        for items in self._internal.values():
            if items:
                yield items[0][0]

    def values(self) -> typing.Iterable[str]:
        for items in self._internal.values():
            for _, value in items:
                yield value

    def items(self) -> typing.Iterable[typing.Tuple[str, str]]:
        for items in self._internal.values():
            for k, v in items:
                yield k, v

    def clear(self) -> None:
        self._internal.clear()

    def __contains__(self, item: str) -> bool:
        return bool(self._internal.get(self._normalize_key(item), None))

    def __getitem__(self, item: str) -> str:
        try:
            return self._internal[self._normalize_key(item)][0][1]
        except (KeyError, IndexError):
            raise KeyError(item) from None

    def __setitem__(self, key: str, value: str) -> None:
        key = self._normalize_key(key)
        self._internal[key] = [(key, value)]

    def __delitem__(self, key: str) -> None:
        self._internal.pop(self._normalize_key(key), None)

    def __iter__(self) -> typing.Iterator[str]:
        return iter(list(self.keys()))

    def __len__(self) -> int:
        return sum(1 for _ in self.keys())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return list(other.items()) == list(self.items())
        if isinstance(other, typing.Mapping):
            return dict(self.items()) == {
                self._normalize_key(k): v for k, v in other.items()
            }
        return NotImplemented

    def _normalize_key(self, key: str) -> str:
        return key.lower()

    def __repr__(self) -> str:
        # Smart repr that switches to list-of-tuple mode when
        # multiple values for one key are detected. Most of the
        # time it's easier to read the dictionary.
        if any(len(x) > 1 for x in self._internal.values()):
            internal_repr = repr([(k, v) for k, v in self.items()])
        else:
            internal_repr = repr({k: v for (k, v), in self._internal.values()})
        return f"<Headers {internal_repr}>"

    __str__ = __repr__
