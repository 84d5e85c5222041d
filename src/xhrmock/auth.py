import base64
import binascii
import typing

from .utils import to_bytes

if typing.TYPE_CHECKING:
    from .request import MockHttpRequest


class BasicAuth:
    """Implements RFC 7617 - Basic Authentication"""

    def __init__(
        self,
        username: typing.Union[str, bytes],
        password: typing.Union[str, bytes],
        *,
        encoding="latin-1",
    ):
        username = to_bytes(username, encoding=encoding)
        password = to_bytes(password, encoding=encoding)

        self.header = (
            f"Basic {base64.b64encode(b'%b:%b' % (username, password)).decode()}"
        )

    def __call__(self, request: "MockHttpRequest") -> "MockHttpRequest":
        request.set_request_header("authorization", self.header)
        return request


def parse_basic_auth(
    value: typing.Any,
) -> typing.Optional[typing.Tuple[str, str]]:
    """Decodes an 'Authorization: Basic ...' value into (user, password).
    Only the first ':' splits, passwords may contain colons. Returns
    'None' for anything that isn't decodable Basic credentials.
    """
    if not isinstance(value, str) or not value.startswith("Basic "):
        return None
    try:
        decoded = base64.b64decode(value[6:].strip()).decode("latin-1")
    except (binascii.Error, ValueError):
        return None
    user, _, password = decoded.partition(":")
    return user, password
