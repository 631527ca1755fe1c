"""Translation collection: ordered, de-duplicated key -> value mapping.

Every operation returns a new collection; the receiver is never mutated, so
collections can be shared freely between extraction steps, post-processors
and compilers.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping


def default_sort_key(key: str) -> tuple[str, str]:
    """Case-insensitive order; exact string order breaks ties (``A`` before ``a``)."""
    return key.lower(), key


class TranslationCollection:
    """Immutable ordered mapping of translation keys to values."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values) if values else {}

    @classmethod
    def _wrap(cls, values: dict[str, str]) -> TranslationCollection:
        collection = cls.__new__(cls)
        collection._values = values
        return collection

    # -- accessors ----------------------------------------------------------

    @property
    def values(self) -> dict[str, str]:
        """A copy of the underlying mapping, in key order."""
        return dict(self._values)

    def keys(self) -> list[str]:
        return list(self._values)

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def has(self, key: str) -> bool:
        return key in self._values

    def count(self) -> int:
        return len(self._values)

    def is_empty(self) -> bool:
        return not self._values

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TranslationCollection):
            return NotImplemented
        return list(self._values.items()) == list(other._values.items())

    def __repr__(self) -> str:
        return f"TranslationCollection({self._values!r})"

    # -- transforms ---------------------------------------------------------

    def add(self, key: str, value: str | None = None) -> TranslationCollection:
        """Return a collection with ``key`` added.

        A new key gets ``value`` or, when omitted, the key itself. An existing
        key keeps its position; its value is replaced only when ``value`` is
        given. Empty keys are not valid translation keys and are ignored.
        """
        values = dict(self._values)
        if key:
            if value is not None:
                values[key] = value
            elif key not in values:
                values[key] = key
        return self._wrap(values)

    def add_keys(self, keys: Iterable[str]) -> TranslationCollection:
        values = dict(self._values)
        for key in keys:
            if key and key not in values:
                values[key] = key
        return self._wrap(values)

    def remove(self, key: str) -> TranslationCollection:
        return self.filter(lambda k, _v: k != key)

    def filter(self, predicate: Callable[[str, str], bool]) -> TranslationCollection:
        return self._wrap({k: v for k, v in self._values.items() if predicate(k, v)})

    def map(self, fn: Callable[[str, str], str]) -> TranslationCollection:
        """Return a collection with each value replaced by ``fn(key, value)``."""
        return self._wrap({k: fn(k, v) for k, v in self._values.items()})

    def union(self, other: TranslationCollection, overwrite: bool = False) -> TranslationCollection:
        """Merge ``other`` into a copy of this collection.

        Keys of this collection come first, followed by keys only present in
        ``other`` in their original order. On collision the first write wins
        (this collection's value) unless ``overwrite`` is set.
        """
        values = dict(self._values)
        for key, value in other._values.items():
            if overwrite or key not in values:
                values[key] = value
        return self._wrap(values)

    def intersect(self, other: TranslationCollection) -> TranslationCollection:
        """Keys of this collection that are also present in ``other``."""
        return self.filter(lambda k, _v: k in other._values)

    def sort(self, compare: Callable[[str], object] | None = None) -> TranslationCollection:
        """Keys ordered by the ``compare`` key function (default: ``default_sort_key``)."""
        sort_key = compare or default_sort_key
        return self._wrap({k: self._values[k] for k in sorted(self._values, key=sort_key)})
