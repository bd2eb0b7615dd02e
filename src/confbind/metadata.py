"""Introspection of configuration type constructors into binding plans.

Every constructor parameter of a configuration type carries exactly one
:class:`~confbind.domain.Property` or :class:`~confbind.domain.Group` marker in
its ``Annotated`` type hint. Properties may add a
:class:`~confbind.domain.DependsOn` marker, any number of
:class:`~confbind.domain.Modifier` markers, and constraint markers checked by
the validators registered with the binder::

    >>> @configuration
    ... @dataclass(frozen=True)
    ... class Server:
    ...     port: Annotated[int, Property("Port", "80"), DependsOn("Protocol", value="TCP")]
    ...     protocol: Annotated[str, Property("Protocol", "TCP")]

The markers are read once into a :class:`~confbind.domain.BindingPlan`.
"""

import functools
import inspect
from typing import Annotated, Any, Callable, Optional, get_args, get_origin, get_type_hints

from confbind.domain import BindingPlan, Descriptor, DependsOn, Group, Modifier, ParameterBinding, Property
from confbind.errors import InvalidDeclarationError

__all__ = ["configuration", "plan_of", "descriptor_of", "dependency_of", "modifiers_of", "constraints_of"]

_PLAN_ATTRIBUTE = "__binding_plan__"

_BINDING_MARKERS = (Property, Group, DependsOn, Modifier)

_UNBINDABLE_KINDS = {
    inspect.Parameter.POSITIONAL_ONLY: "positional-only",
    inspect.Parameter.VAR_POSITIONAL: "variadic positional",
    inspect.Parameter.VAR_KEYWORD: "variadic keyword",
}


def _markers(annotation: Any, marker_types: tuple) -> list:
    if get_origin(annotation) is not Annotated:
        return []
    _, *metadata = get_args(annotation)
    return [m for m in metadata if isinstance(m, marker_types)]


def _declared_type(annotation: Any) -> Any:
    if get_origin(annotation) is Annotated:
        return get_args(annotation)[0]
    return annotation


def _parameter_name(target_type: type, parameter: inspect.Parameter) -> str:
    return f"{target_type.__name__}.{parameter.name}"


def dependency_of(parameter: inspect.Parameter) -> Optional[DependsOn]:
    """Return the DependsOn marker of a parameter, or None if it has none."""
    dependencies = _markers(parameter.annotation, (DependsOn,))
    if len(dependencies) > 1:
        raise InvalidDeclarationError(
            f"Parameter '{parameter.name}' declares {len(dependencies)} dependencies, at most one is allowed"
        )
    return dependencies[0] if dependencies else None


def modifiers_of(parameter: inspect.Parameter) -> tuple[Modifier, ...]:
    """Return the Modifier markers of a parameter, in declaration order."""
    modifiers = tuple(_markers(parameter.annotation, (Modifier,)))
    for modifier in modifiers:
        if not callable(modifier.func):
            raise InvalidDeclarationError(
                f"Modifier of parameter '{parameter.name}' must wrap a callable, got {modifier.func!r}"
            )
    return modifiers


def constraints_of(parameter: inspect.Parameter) -> tuple[Any, ...]:
    """Return the Annotated metadata of a parameter that is not a binding marker."""
    if get_origin(parameter.annotation) is not Annotated:
        return ()
    _, *metadata = get_args(parameter.annotation)
    return tuple(m for m in metadata if not isinstance(m, _BINDING_MARKERS))


def descriptor_of(target_type: type, parameter: inspect.Parameter) -> Descriptor:
    """Return the Property or Group marker of a constructor parameter.

    Args:
        target_type: The configuration type declaring the parameter.
        parameter: The constructor parameter, with its type hint resolved.

    Raises:
        InvalidDeclarationError: If the parameter carries neither or both kinds of
            marker, a Property with an empty key, or a dependency or
            modifier on a Group.
    """
    name = _parameter_name(target_type, parameter)
    descriptors = _markers(parameter.annotation, (Property, Group))
    if not descriptors:
        raise InvalidDeclarationError(f"Parameter '{name}' is not annotated with Property or Group")
    if len(descriptors) > 1:
        raise InvalidDeclarationError(
            f"Parameter '{name}' must be annotated with exactly one Property or Group, got {descriptors}"
        )

    descriptor = descriptors[0]
    if isinstance(descriptor, Property) and not descriptor.key:
        raise InvalidDeclarationError(f"Property of parameter '{name}' declares an empty key")
    if isinstance(descriptor, Group) and dependency_of(parameter) is not None:
        raise InvalidDeclarationError(
            f"Group parameter '{name}' cannot declare a dependency; dependencies apply only to properties"
        )
    if isinstance(descriptor, Group) and modifiers_of(parameter):
        raise InvalidDeclarationError(
            f"Group parameter '{name}' cannot declare a modifier; modifiers apply only to properties"
        )
    return descriptor


def _python_constructor(target_type: type) -> Optional[Callable[..., Any]]:
    for base in target_type.__mro__:
        for name in ("__new__", "__init__"):
            if name in base.__dict__ and inspect.isfunction(getattr(target_type, name)):
                return getattr(target_type, name)
    return None


def _constructor_parameters(target_type: type) -> list[inspect.Parameter]:
    constructor = _python_constructor(target_type)
    if constructor is None:
        if target_type.__init__ is object.__init__ and target_type.__new__ is object.__new__:
            return []
        raise InvalidDeclarationError(
            f"{target_type.__name__} must declare its constructor in Python to be bound"
        )

    try:
        signature = inspect.signature(target_type)
    except (TypeError, ValueError) as e:
        raise InvalidDeclarationError(
            f"{target_type.__name__} must declare an inspectable constructor"
        ) from e

    try:
        hints = get_type_hints(constructor, include_extras=True)
    except (NameError, TypeError) as e:
        raise InvalidDeclarationError(
            f"Cannot resolve the constructor type hints of {target_type.__name__}: {e}"
        ) from e

    return [
        parameter.replace(annotation=hints.get(parameter.name, parameter.annotation))
        for parameter in signature.parameters.values()
    ]


@functools.lru_cache(maxsize=None)
def _introspect(target_type: type) -> tuple[ParameterBinding, ...]:
    bindings = []
    property_keys: dict[str, str] = {}

    for parameter in _constructor_parameters(target_type):
        name = _parameter_name(target_type, parameter)
        if parameter.kind in _UNBINDABLE_KINDS:
            raise InvalidDeclarationError(
                f"Parameter '{name}' is {_UNBINDABLE_KINDS[parameter.kind]} and cannot be bound"
            )

        descriptor = descriptor_of(target_type, parameter)
        if isinstance(descriptor, Group):
            bindings.append(ParameterBinding(parameter.name, _declared_type(parameter.annotation), descriptor))
            continue

        if descriptor.key in property_keys:
            raise InvalidDeclarationError(
                f"Configuration property '{descriptor.key}' declared on parameter '{name}' "
                f"is also declared on parameter '{property_keys[descriptor.key]}'"
            )
        property_keys[descriptor.key] = name

        bindings.append(
            ParameterBinding(
                parameter.name,
                _declared_type(parameter.annotation),
                descriptor,
                dependency_of(parameter),
                modifiers_of(parameter),
                constraints_of(parameter),
            )
        )

    return tuple(bindings)


def _make_plan(target_type: Any, factory: Optional[Callable[..., Any]]) -> BindingPlan:
    if not inspect.isclass(target_type):
        raise InvalidDeclarationError(f"{target_type!r} is not a class")
    return BindingPlan(target_type, factory or target_type, _introspect(target_type))


def _validated_plan(target_type: Any, enclosing: tuple) -> BindingPlan:
    if target_type in enclosing:
        chain = " -> ".join(t.__name__ for t in enclosing + (target_type,))
        raise InvalidDeclarationError(f"Configuration groups must form a tree, found cycle {chain}")

    if not inspect.isclass(target_type):
        raise InvalidDeclarationError(f"{target_type!r} is not a class")
    plan = target_type.__dict__.get(_PLAN_ATTRIBUTE) or _make_plan(target_type, None)

    for parameter in plan.parameters:
        if parameter.is_group:
            if not inspect.isclass(parameter.declared_type):
                raise InvalidDeclarationError(
                    f"Group parameter '{target_type.__name__}.{parameter.name}' must be declared "
                    f"with a configuration class, got {parameter.declared_type!r}"
                )
            _validated_plan(parameter.declared_type, enclosing + (target_type,))
    return plan


def plan_of(target_type: type) -> BindingPlan:
    """Return the binding plan of a configuration type.

    The plans of all nested group types are built too, so a declaration error
    anywhere in the type tree is raised here.

    Args:
        target_type: The configuration type.

    Returns:
        The plan stored by :func:`configuration`, or one built on demand.

    Raises:
        InvalidDeclarationError: If the type or any nested group type is
            incorrectly declared, or if the groups do not form a tree.
    """
    return _validated_plan(target_type, ())


def configuration(target_type: Optional[type] = None, *, factory: Optional[Callable[..., Any]] = None):
    """Class decorator that validates and stores the binding plan of a configuration type.

    Args:
        target_type: The decorated class, when used without arguments.
        factory: Optional callable building instances from keyword arguments;
            defaults to the class itself.

    Example:
        @configuration
        @dataclass(frozen=True)
        class Database:
            host: Annotated[str, Property("Host", "localhost")]
    """

    def decorator(cls: type) -> type:
        setattr(cls, _PLAN_ATTRIBUTE, _make_plan(cls, factory))
        plan_of(cls)
        return cls

    return decorator(target_type) if target_type is not None else decorator
