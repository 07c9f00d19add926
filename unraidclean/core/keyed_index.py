"""Three-way keyed lookup shared by the activity and watch indexes."""

from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

V = TypeVar("V")


class KeyedIndex(Generic[V]):
    """Values reachable by external numeric ID, external string ID or title key.

    The same logical entity is usually stored under all three keys. Lookups
    prefer the numeric ID, then the string ID, then the title key, since
    that is the order of identifier reliability.
    """

    def __init__(self) -> None:
        self.by_numeric: dict[int, V] = {}
        self.by_string: dict[str, V] = {}
        self.by_title: dict[str, V] = {}

    def _slots(
        self, numeric_id: int, string_id: str, title_key: str
    ) -> Iterator[tuple[dict, int | str]]:
        if numeric_id and numeric_id > 0:
            yield self.by_numeric, numeric_id
        if string_id:
            yield self.by_string, string_id.lower()
        if title_key:
            yield self.by_title, title_key

    def values_for_update(
        self, numeric_id: int, string_id: str, title_key: str, factory: Callable[[], V]
    ) -> list[V]:
        """Return the value under every valid key, creating missing ones."""
        values = []
        for mapping, key in self._slots(numeric_id, string_id, title_key):
            if key not in mapping:
                mapping[key] = factory()
            values.append(mapping[key])
        return values

    def lookup(self, numeric_id: int, string_id: str, title_key: str) -> V | None:
        """Return the value for the most reliable key that has one."""
        for mapping, key in self._slots(numeric_id, string_id, title_key):
            if key in mapping:
                return mapping[key]
        return None

    def __len__(self) -> int:
        return len(self.by_numeric) + len(self.by_string) + len(self.by_title)
