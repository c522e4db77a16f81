"""Query string access for requests."""

from collections.abc import Iterator
from urllib.parse import parse_qsl


class QueryParams:
    """Decoded ``key=value`` pairs of a query string, in their original order.

    A key may repeat; indexing and ``get()`` see its first value and
    ``get_list()`` sees every value. Blank values are kept (``?flag=``).
    """

    __slots__ = ("_pairs", "_query_string")

    def __init__(self, query_string: bytes = b"") -> None:
        self._query_string = query_string.decode("latin-1")
        self._pairs = tuple(parse_qsl(self._query_string, keep_blank_values=True))

    @property
    def string(self) -> str:
        """The undecoded query string, without the leading ``?``."""
        return self._query_string

    def items(self) -> tuple[tuple[str, str], ...]:
        return self._pairs

    def get(self, key: str, default: str | None = None) -> str | None:
        for name, value in self._pairs:
            if name == key:
                return value
        return default

    def get_list(self, key: str) -> list[str]:
        return [value for name, value in self._pairs if name == key]

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self._pairs)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._pairs))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._pairs))

    def __bool__(self) -> bool:
        return bool(self._pairs)

    def __repr__(self) -> str:
        return f"QueryParams({self._query_string!r})"
