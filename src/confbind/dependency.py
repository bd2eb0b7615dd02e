"""Evaluation of conditional property dependencies.

A dependency names another configuration key in the same namespace and the
value it must hold. With the default (empty) operator the raw configuration
text must equal the required value exactly. Any other operator is looked up
in the resolver's comparator table::

    >>> resolver = DependencyResolver({"!=": lambda actual, operator, required: actual != required})
"""

from types import MappingProxyType
from typing import Callable, Mapping, Optional

from confbind.domain import DependsOn
from confbind.errors import InvalidDeclarationError

__all__ = ["Comparator", "DEFAULT_OPERATOR", "DependencyResolver"]

Comparator = Callable[[str, str, str], bool]
"""``(dependency_value, operator, required_value) -> bool``."""

DEFAULT_OPERATOR = ""


class DependencyResolver:
    """Decides whether a :class:`~confbind.domain.DependsOn` condition holds.

    Args:
        comparators: Mapping of non-empty operator tokens to comparators. The empty
            operator is always exact string equality and cannot be overridden.

    Raises:
        InvalidDeclarationError: If a comparator is registered for the empty operator.
    """

    def __init__(self, comparators: Optional[Mapping[str, Comparator]] = None):
        comparators = dict(comparators or {})
        if DEFAULT_OPERATOR in comparators:
            raise InvalidDeclarationError(
                "The empty operator is reserved for exact string comparison"
            )
        self._comparators = MappingProxyType(comparators)

    @property
    def comparators(self) -> Mapping[str, Comparator]:
        return self._comparators

    def extend(self, comparators: Mapping[str, Comparator]) -> "DependencyResolver":
        return DependencyResolver({**self._comparators, **comparators})

    def is_satisfied(self, dependency: DependsOn, lookup: Callable[[str], Optional[str]]) -> bool:
        """Check a dependency against the raw configuration text of its target key.

        Args:
            dependency: The dependency declaration.
            lookup: Returns the raw text for a key of the active namespace, or
                None if the key is absent.

        Returns:
            False if the target key is absent, otherwise the result of the comparison.

        Raises:
            InvalidDeclarationError: If no comparator is registered for a non-empty
                operator, whether or not the target key is present.
        """
        comparator = None
        if dependency.operator != DEFAULT_OPERATOR:
            comparator = self._comparators.get(dependency.operator)
            if comparator is None:
                raise InvalidDeclarationError(
                    f"No comparator is registered for operator '{dependency.operator}' "
                    f"declared on the dependency on '{dependency.key}'"
                )

        actual = lookup(dependency.key)
        if actual is None:
            return False
        if comparator is None:
            return actual == dependency.value
        return bool(comparator(actual, dependency.operator, dependency.value))
