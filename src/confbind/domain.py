"""Metadata markers and the resolved binding plan of configuration types."""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union


@dataclass(frozen=True)
class Property:
    """Marks a constructor parameter as bound from a single configuration key.

    Attributes:
        key: The key of the property, relative to the enclosing namespace.
        default: The literal converted when the key is absent or the property's
            dependency is unsatisfied. Types without an empty representation
            (numbers, booleans, enums) need an explicit default.
        default_key: Optional key, in the same namespace, whose raw value is
            used instead of ``default`` when that key is present.

    Example:
        >>> port: Annotated[int, Property("Port", "80")]
    """

    key: str
    default: str = ""
    default_key: str = ""


@dataclass(frozen=True)
class Group:
    """Marks a constructor parameter whose value is a nested configuration type.

    Attributes:
        namespace: Appended to the enclosing namespace, dot-joined. An empty
            namespace resolves the group's properties in the enclosing namespace.
    """

    namespace: str = ""


@dataclass(frozen=True)
class DependsOn:
    """Makes a property fall back to its default unless another key has a given value.

    Attributes:
        key: The key whose raw configuration text is checked, resolved in the
            active namespace. It may name a sibling property or any other key.
        operator: Empty for exact string equality, otherwise the token of a
            comparator registered with the DependencyResolver.
        value: The value required for the dependency to be satisfied.
    """

    key: str
    operator: str = ""
    value: str = "true"


@dataclass(frozen=True)
class Modifier:
    """Transforms the converted value of a property before it is validated.

    A property may carry several modifiers; they are applied in declaration
    order, each to the result of the previous one.

    Example:
        >>> timeout: Annotated[int, Property("Timeout", "5"), Modifier(lambda seconds: seconds * 1000)]
    """

    func: Callable[[Any], Any]


Descriptor = Union[Property, Group]


@dataclass(frozen=True)
class ParameterBinding:
    """How one constructor parameter obtains its argument.

    Attributes:
        name: The parameter name the argument is passed as.
        declared_type: The declared type, stripped of its Annotated metadata.
        descriptor: The Property or Group marker of the parameter.
        dependency: The optional dependency of a Property parameter.
        modifiers: The modifiers of a Property parameter, in declaration order.
        constraints: The remaining Annotated metadata of a Property parameter,
            checked by the validators registered for their types.
    """

    name: str
    declared_type: Any
    descriptor: Descriptor
    dependency: Optional[DependsOn] = None
    modifiers: tuple[Modifier, ...] = ()
    constraints: tuple[Any, ...] = ()

    @property
    def is_group(self) -> bool:
        return isinstance(self.descriptor, Group)


@dataclass(frozen=True)
class BindingPlan:
    """The ordered metadata table of a configuration type.

    Attributes:
        target_type: The configuration type.
        factory: Called with the converted arguments as keywords to build an instance.
        parameters: The parameter bindings, in constructor declaration order.
    """

    target_type: type
    factory: Callable[..., Any]
    parameters: tuple[ParameterBinding, ...]
