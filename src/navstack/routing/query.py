"""Immutable query parameters carried by a route.

Query data is transient state: it is not part of a route's identity, so
two routes that differ only in their query compare equal.  When an equal
route arrives for an existing stack entry, the existing instance adopts
the newcomer's query (see ``Route.on_update``).

Implements ``Mapping[str, str]`` with ``get_list`` for repeated keys.
"""

from collections.abc import Iterable, Iterator, Mapping
from urllib.parse import parse_qs, urlencode


class QueryParams(Mapping[str, str]):
    """Immutable query string parameters.

    Attributes:
        _data: Parsed query as field name -> list of values.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    _data: dict[str, list[str]]

    __slots__ = ("_data",)

    def __init__(
        self,
        query: str | Mapping[str, str] | Iterable[tuple[str, str]] = "",
    ) -> None:
        data: dict[str, list[str]] = {}
        if isinstance(query, str):
            data = parse_qs(query.lstrip("?"), keep_blank_values=True)
        else:
            items = query.items() if isinstance(query, Mapping) else query
            for key, value in items:
                data.setdefault(key, []).append(value)
        object.__setattr__(self, "_data", data)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryParams):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def encode(self) -> str:
        """Serialize back to a query string (without the leading ``?``)."""
        return urlencode([(k, v) for k, values in self._data.items() for v in values])
