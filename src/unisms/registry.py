import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from unisms.transformers.base import Transformer


class TransformerRegistry:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._transformers: dict[str, "Transformer"] = {}

    def register(self, tag: str, transformer: "Transformer") -> None:
        with self._lock:
            self._transformers[tag.lower()] = transformer

    def unregister(self, tag: str) -> None:
        with self._lock:
            self._transformers.pop(tag.lower(), None)

    def get(self, tag: str) -> "Transformer | None":
        return self._transformers.get(tag.lower())

    def tags(self) -> list[str]:
        with self._lock:
            return sorted(self._transformers)

    def __contains__(self, tag: str) -> bool:
        return tag.lower() in self._transformers

    def __len__(self) -> int:
        return len(self._transformers)


default_registry = TransformerRegistry()


def register_transformer(tag: str, transformer: "Transformer") -> None:
    default_registry.register(tag, transformer)


def get_transformer(tag: str) -> "Transformer | None":
    return default_registry.get(tag)


def registered_tags() -> list[str]:
    return default_registry.tags()
