import pytest


@pytest.fixture
def count_calls():
    """Returns a factory for callables that count how often they're
    invoked, optionally wrapping an existing function.
    """

    def factory(inner=None):
        def func(*args):
            func.call_count += 1
            if inner is not None:
                inner(*args)

        func.call_count = 0
        return func

    return factory
