"""High level entry point for binding configuration objects."""

from typing import Mapping, Optional, TypeVar

from confbind.binder import Binder
from confbind.converters import Converter, ConverterRegistry
from confbind.dependency import Comparator, DependencyResolver
from confbind.validation import ConstraintValidator, ValidatorRegistry

__all__ = ["make_binder", "bind"]

T = TypeVar("T")


def make_binder(
    converters: Optional[Mapping[type, Converter]] = None,
    comparators: Optional[Mapping[str, Comparator]] = None,
    validators: Optional[Mapping[type, ConstraintValidator]] = None,
) -> Binder:
    """Create a :class:`Binder` from plain converter and comparator mappings.

    Args:
        converters: Custom converters keyed by the raw type they produce.
        comparators: Dependency comparators keyed by their operator token.
        validators: Constraint validators keyed by constraint type.

    Returns:
        A binder that can be shared by any number of binds.

    Raises:
        InvalidDeclarationError: If a comparator is registered for the empty operator.
    """
    return Binder(ConverterRegistry(converters), DependencyResolver(comparators), ValidatorRegistry(validators))


def bind(
    target_type: type[T],
    source: Mapping[str, str],
    converters: Optional[Mapping[type, Converter]] = None,
    comparators: Optional[Mapping[str, Comparator]] = None,
    namespace: str = "",
    validators: Optional[Mapping[type, ConstraintValidator]] = None,
) -> T:
    """Bind a configuration type from a mapping of configuration entries in one call.

    Example:
        >>> server = bind(Server, {"Protocol": "TCP", "Port": "8080"})
        >>> server.port  # 8080
    """
    return make_binder(converters, comparators, validators).bind(target_type, source, namespace)
