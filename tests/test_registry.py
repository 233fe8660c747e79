import threading

import pytest

import unisms  # noqa: F401
from unisms.builders import BUILDERS
from unisms.registry import TransformerRegistry, get_transformer, registered_tags
from unisms.transformers.base import BaseTransformer

ALL_TAGS = sorted(BUILDERS)


def test_every_vendor_is_registered() -> None:
    assert registered_tags() == ALL_TAGS
    assert len(ALL_TAGS) == 12


@pytest.mark.parametrize("tag", ALL_TAGS)
def test_lookup_can_handle_only_its_own_tag(tag: str) -> None:
    transformer = get_transformer(tag)
    assert transformer is not None
    for other in ALL_TAGS:
        msg = BUILDERS[other]().to("13800138000").content("hi").build()
        assert transformer.can_handle(msg) is (other == tag)


def test_missing_tag() -> None:
    assert get_transformer("nope") is None


def test_register_replaces() -> None:
    registry = TransformerRegistry()
    first, second = BaseTransformer(), BaseTransformer()
    registry.register("Demo", first)
    registry.register("demo", second)
    assert registry.get("DEMO") is second
    assert len(registry) == 1
    registry.unregister("demo")
    assert "demo" not in registry


def test_concurrent_registration() -> None:
    registry = TransformerRegistry()

    def worker(n: int) -> None:
        for i in range(50):
            registry.register(f"t{n}-{i}", BaseTransformer())
            registry.get(f"t{n}-{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(registry.tags()) == 400
