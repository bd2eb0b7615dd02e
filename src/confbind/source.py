"""Immutable key/value configuration sources."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Iterator, Optional

__all__ = ["ConfigurationSource", "join_namespace"]


def join_namespace(namespace: str, key: str) -> str:
    """Dot-join a namespace and a key, skipping empty parts.

    Example:
        >>> join_namespace("LoginServer", "Host")  # Returns "LoginServer.Host"
        >>> join_namespace("", "Host")             # Returns "Host"
    """
    return ".".join(part for part in (namespace, key) if part)


class ConfigurationSource(Mapping):
    """A read-only mapping from fully-qualified keys to raw string values.

    The given entries are copied, so later changes to them do not affect the
    source. Keys absent from the source are a normal state, see :meth:`lookup`.

    Raises:
        TypeError: If any key or value is not a string.

    Example:
        >>> source = ConfigurationSource({"LoginServer.Host": "127.0.0.1"})
        >>> source.lookup("LoginServer.Host")  # Returns "127.0.0.1"
        >>> source.lookup("LoginServer.Port")  # Returns None
    """

    def __init__(self, entries: Optional[Mapping[str, str]] = None, **kwargs: str):
        values = {**(entries or {}), **kwargs}
        invalid = [key for key, value in values.items() if not isinstance(key, str) or not isinstance(value, str)]
        if invalid:
            raise TypeError(f"Configuration keys and values must be strings, got invalid entries for {invalid}")
        self._values = MappingProxyType(values)

    def lookup(self, key: str) -> Optional[str]:
        """Return the raw value of a fully-qualified key, or None if it is absent."""
        return self._values.get(key)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self):
        return f"ConfigurationSource({dict(self._values)!r})"
