"""Constraint validation of converted property values.

Any ``Annotated`` metadata on a property that is not one of the binding markers
is a constraint. A validator is registered for the constraint's type and is
called with the constraint and the converted, modified value::

    >>> @dataclass(frozen=True)
    ... class Range:
    ...     low: int
    ...     high: int
    >>>
    >>> validators = ValidatorRegistry({Range: lambda rule, value: rule.low <= value <= rule.high})
    >>> port: Annotated[int, Property("Port", "80"), Range(1, 65535)]

Constraints without a registered validator are ignored.
"""

from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional

__all__ = ["ConstraintValidator", "ValidatorRegistry"]

ConstraintValidator = Callable[[Any, Any], bool]
"""``(constraint, value) -> bool``, True if the value satisfies the constraint."""


class ValidatorRegistry:
    """An immutable table of constraint validators keyed by constraint type.

    Args:
        validators: Mapping of constraint types to validators.

    Raises:
        TypeError: If a key is not a type.
    """

    def __init__(self, validators: Optional[Mapping[type, ConstraintValidator]] = None):
        validators = dict(validators or {})
        invalid = [key for key in validators if not isinstance(key, type)]
        if invalid:
            raise TypeError(f"Validators must be keyed by constraint type, got {invalid}")
        self._validators = MappingProxyType(validators)

    @property
    def validators(self) -> Mapping[type, ConstraintValidator]:
        return self._validators

    def extend(self, validators: Mapping[type, ConstraintValidator]) -> "ValidatorRegistry":
        return ValidatorRegistry({**self._validators, **validators})

    def validate(self, constraints: Iterable[Any], value: Any) -> None:
        """Check a value against every constraint that has a registered validator.

        Constraints are checked in declaration order and the first violation
        aborts the check.

        Raises:
            ValueError: If a validator rejects the value.
        """
        for constraint in constraints:
            validator = self._validators.get(type(constraint))
            if validator is not None and not validator(constraint, value):
                raise ValueError(
                    f"Value {value!r} violates the constraint {constraint!r}"
                )
