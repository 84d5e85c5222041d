import typing

import pytest

from .server import MockHttpServer


@pytest.fixture
def mock_http_server() -> typing.Iterator[MockHttpServer]:
    """A started 'MockHttpServer' on the default registry, stopped on teardown.
    Assign 'mock_http_server.handle' to answer requests.
    """
    with MockHttpServer() as server:
        yield server
