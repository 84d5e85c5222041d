import logging
import typing

from .auth import BasicAuth
from .exceptions import (
    XHRMockError,
    InvalidMethod,
    InvalidURL,
    SecurityError,
    InvalidStateError,
    NetworkError,
    ProtocolError,
    LocalProtocolError,
    RemoteProtocolError,
)
from .models import Headers, ReadyState, STATUS_REASONS, status_text
from .registry import ClientRegistry, clients
from .request import MockHttpRequest
from .server import MockHttpServer
from .uri import URIParts, parse_uri

__all__ = [
    "BasicAuth",
    "ClientRegistry",
    "clients",
    "Headers",
    "MockHttpRequest",
    "MockHttpServer",
    "ReadyState",
    "STATUS_REASONS",
    "status_text",
    "URIParts",
    "parse_uri",
    "add_stderr_logger",
    "XHRMockError",
    "InvalidMethod",
    "InvalidURL",
    "SecurityError",
    "InvalidStateError",
    "NetworkError",
    "ProtocolError",
    "LocalProtocolError",
    "RemoteProtocolError",
]

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def add_stderr_logger(
    level: int = logging.DEBUG,
) -> "logging.StreamHandler[typing.TextIO]":
    """Helper for quickly adding a StreamHandler to the logger.
    Useful for seeing every state transition while debugging a test.
    Returns the handler after adding it.
    """
    logger = logging.getLogger(__name__)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.debug("Added a stderr logging handler to logger: %s", __name__)
    return handler
