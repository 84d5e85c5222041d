import logging
import typing

from .request import MockHttpRequest

log = logging.getLogger(__name__)

RequestFactory = typing.Callable[..., MockHttpRequest]


class ClientRegistry:
    """Holds the factory that application code calls to get "the"
    HTTP client. Tests swap the factory out with 'install()' and put
    the previous one back with 'restore()' once they're done, so code
    calling 'create()' transparently gets whatever is installed.

    The registry is process-wide state, tests that install factories
    concurrently on the same registry must serialize themselves.
    """

    def __init__(self, default_factory: RequestFactory = MockHttpRequest):
        self._default_factory = default_factory
        self._factory = default_factory

    @property
    def default_factory(self) -> RequestFactory:
        return self._default_factory

    @property
    def factory(self) -> RequestFactory:
        return self._factory

    def create(self, *args: typing.Any, **kwargs: typing.Any) -> MockHttpRequest:
        return self._factory(*args, **kwargs)

    __call__ = create

    def install(self, factory: RequestFactory) -> RequestFactory:
        """Makes 'factory' the current factory and returns the one it replaced"""
        previous = self._factory
        self._factory = factory
        log.debug("Installed HTTP client factory %r", factory)
        return previous

    def restore(self, factory: RequestFactory) -> None:
        self._factory = factory
        log.debug("Restored HTTP client factory %r", factory)

    def reset(self) -> None:
        self.restore(self._default_factory)

    def __repr__(self) -> str:
        return f"<ClientRegistry factory={self._factory!r}>"


clients = ClientRegistry()
