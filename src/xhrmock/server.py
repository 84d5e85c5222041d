"""A small mock "server" that intercepts HTTP client requests
and diverts them to your handler.

Usage:

1. Initialize with either
      server = MockHttpServer(your_request_handler)
   or subclass and override 'handle()', or assign
      server.handle = your_request_handler

2. Call server.start() to start intercepting every request created
   through the client registry ('xhrmock.clients' by default).

3. Do your tests. The handler gets each request right after it's
   sent and answers it with 'receive()' or 'err()'.

4. Call server.stop() to tear down.

The server is also a context manager which does 2. and 4. for you.
"""
import logging
import typing

from .exceptions import InvalidStateError
from .registry import ClientRegistry, RequestFactory, clients
from .request import MockHttpRequest

log = logging.getLogger(__name__)

Handler = typing.Callable[[MockHttpRequest], None]


class MockHttpServer:
    def __init__(
        self,
        handler: typing.Optional[Handler] = None,
        *,
        registry: typing.Optional[ClientRegistry] = None,
    ):
        if handler is not None:
            self.handle = handler  # type: ignore
        self.registry = clients if registry is None else registry
        self.requests: typing.List[MockHttpRequest] = []

        self._original_factory: typing.Optional[RequestFactory] = None
        self._factory: typing.Optional[RequestFactory] = None
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        if self._started:
            raise InvalidStateError("server is already started")
        server = self

        class InterceptedHttpRequest(MockHttpRequest):
            mock_server = server

            def __init__(self, *args: typing.Any, **kwargs: typing.Any) -> None:
                super().__init__(*args, **kwargs)
                self.onsend = server._dispatch

        self._factory = InterceptedHttpRequest
        self._original_factory = self.registry.install(InterceptedHttpRequest)
        self._started = True
        log.debug("Started intercepting requests on %r", self.registry)

    def stop(self) -> None:
        if not self._started:
            return
        original = typing.cast(RequestFactory, self._original_factory)
        if self.registry.factory is self._factory:
            self.registry.restore(original)
        else:
            # Stopped out of order. Servers started after this one
            # restore to whatever this one replaced instead.
            self._unlink(original)
        self._original_factory = None
        self._factory = None
        self._started = False
        log.debug("Stopped intercepting requests on %r", self.registry)

    def _unlink(self, original: RequestFactory) -> None:
        factory = self.registry.factory
        while True:
            above = getattr(factory, "mock_server", None)
            if not isinstance(above, MockHttpServer) or not above._started:
                # Our factory isn't installed anymore, nothing links to it.
                return
            if above._original_factory is self._factory:
                above._original_factory = original
                return
            factory = typing.cast(RequestFactory, above._original_factory)

    def handle(self, request: MockHttpRequest) -> None:
        """Called with every intercepted request once it's sent.
        Instances should override this.
        """

    def _dispatch(self, request: MockHttpRequest) -> None:
        self.requests.append(request)
        log.debug("Dispatching %r to handler", request)
        # Looked up on every call so 'handle' can be swapped after start().
        self.handle(request)

    def __enter__(self) -> "MockHttpServer":
        self.start()
        return self

    def __exit__(self, *_: typing.Any) -> None:
        self.stop()
