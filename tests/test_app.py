import pytest

from serviceable import ServiceRegistry, app, get_default_registry, reset_default_registry


class Counter:
    def __init__(self):
        self.count = 0

    def up(self):
        self.count += 1


@pytest.fixture(autouse=True)
def default_registry():
    reset_default_registry()
    yield get_default_registry()
    reset_default_registry()


def test_app_shares_a_single_instance():
    app(Counter).up()
    app(Counter).up()

    assert app(Counter).count == 2


def test_app_fresh_builds_new_instance():
    app(Counter).up()

    assert app(Counter, fresh=True).count == 0
    assert app(Counter).count == 1


def test_app_resolves_from_default_registry(default_registry):
    instance = app(Counter)

    assert default_registry.resolve(Counter) is instance


def test_app_with_explicit_registry(default_registry):
    registry = ServiceRegistry()

    instance = app(Counter, registry=registry)

    assert registry.resolve(Counter) is instance
    assert Counter not in default_registry


def test_reset_default_registry():
    first = get_default_registry()

    reset_default_registry()

    assert get_default_registry() is not first
