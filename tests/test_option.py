import pytest

from relaykit.errors import ProxyError
from relaykit.option import Handler, pop_option_handler, register_handler


class _Named(Handler):
    def __init__(self, label, rank):
        self.label = label
        self.rank = rank
        self.calls = 0

    def name(self):
        return self.label

    def handle(self):
        self.calls += 1

    def priority(self):
        return self.rank


def _drain():
    while True:
        try:
            pop_option_handler()
        except ProxyError:
            return


@pytest.fixture(autouse=True)
def empty_registry():
    _drain()
    yield
    _drain()


def test_pops_in_priority_order():
    register_handler(_Named("config", -1))
    register_handler(_Named("easy", 50))
    register_handler(_Named("stdin", 0))
    order = [pop_option_handler().name() for _ in range(3)]
    assert order == ["easy", "stdin", "config"]


def test_empty_registry_raises():
    with pytest.raises(ProxyError, match="no option left"):
        pop_option_handler()


def test_same_name_replaces():
    register_handler(_Named("dup", 1))
    replacement = _Named("dup", 2)
    register_handler(replacement)
    assert pop_option_handler() is replacement
    with pytest.raises(ProxyError):
        pop_option_handler()


def test_equal_priority_first_registered_wins():
    first = _Named("a", 5)
    register_handler(first)
    register_handler(_Named("b", 5))
    assert pop_option_handler() is first
    assert pop_option_handler().name() == "b"


def test_popped_handler_is_usable():
    register_handler(_Named("run", 0))
    handler = pop_option_handler()
    handler.handle()
    assert handler.calls == 1


def test_handler_is_abstract():
    with pytest.raises(TypeError):
        Handler()