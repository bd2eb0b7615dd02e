"""Raw type and type argument extraction for declared parameter types."""

import types
from dataclasses import dataclass, field
from typing import Annotated, Any, get_args, get_origin

from confbind.errors import UnsupportedTypeConversionError

__all__ = ["TypeToken", "raw_type_of", "type_arguments_of"]


def _strip_annotated(declared_type: Any) -> Any:
    while get_origin(declared_type) is Annotated:
        declared_type = get_args(declared_type)[0]
    return declared_type


def raw_type_of(declared_type: Any) -> type:
    """Return the class behind a plain or generic declared type.

    Args:
        declared_type: A class such as ``int`` or a generic alias such as ``list[int]``.

    Returns:
        The class itself, or the origin class of a generic alias.

    Raises:
        UnsupportedTypeConversionError: If the declared type is not backed by a class
            (type variables, ``Any``, unions, ``Literal``, forward references...).

    Example:
        >>> raw_type_of(dict[str, int])  # Returns dict
    """
    declared_type = _strip_annotated(declared_type)
    origin = get_origin(declared_type)
    if origin is None and isinstance(declared_type, type) and declared_type is not Any:
        return declared_type

    if isinstance(origin, type) and origin is not types.UnionType:
        return origin

    raise UnsupportedTypeConversionError(declared_type)


def type_arguments_of(declared_type: Any) -> tuple:
    """Return the actual type arguments of a generic declared type, or ``()``."""
    return get_args(_strip_annotated(declared_type))


@dataclass(frozen=True)
class TypeToken:
    """A possibly-generic declared type, split into its raw type and type arguments.

    Attributes:
        raw_type: The class used to select a converter.
        type_arguments: Tokens for the actual type arguments, in declaration order.
            ``Ellipsis`` is kept as-is, as in ``tuple[int, ...]``.
        declared_type: The original declared type, for error reporting.
    """

    raw_type: type
    type_arguments: tuple
    declared_type: Any = field(default=None, compare=False)

    @staticmethod
    def of(declared_type: Any) -> "TypeToken":
        return TypeToken(
            raw_type_of(declared_type),
            tuple(
                argument if argument is Ellipsis else TypeToken.of(argument)
                for argument in type_arguments_of(declared_type)
            ),
            _strip_annotated(declared_type),
        )

    @property
    def name(self) -> str:
        if not self.type_arguments:
            return self.raw_type.__name__
        arguments = ", ".join(
            "..." if argument is Ellipsis else argument.name for argument in self.type_arguments
        )
        return f"{self.raw_type.__name__}[{arguments}]"

    def __str__(self):
        return self.name
