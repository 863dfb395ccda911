"""In-memory view of the cookies a jar currently knows about.

Seeded once from the request's ``Cookie`` header, then mutated only by
jar operations so it mirrors what the response will leave on the client.
No validation here.
"""

from collections.abc import Iterable


class CookieStore:
    """Name to current value mapping, insertion ordered."""

    __slots__ = ("_values",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        self._values: dict[str, str] = {}
        self.load(pairs)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"CookieStore({self._values!r})"

    def load(self, pairs: Iterable[tuple[str, str]]) -> None:
        """Bulk insert; later pairs replace earlier ones."""
        self._values.update(pairs)

    def read(self, name: str) -> str | None:
        return self._values.get(name)

    def write(self, name: str, value: str) -> None:
        self._values[name] = value

    def contains(self, name: str) -> bool:
        return name in self._values

    def remove(self, name: str) -> bool:
        """Drop *name*; return whether it was present."""
        return self._values.pop(name, None) is not None

    def names(self) -> tuple[str, ...]:
        return tuple(self._values)
