"""
Recursive construction of configuration objects from a configuration source.

A :class:`Binder` walks the binding plan of a configuration type in constructor
declaration order. Group parameters are bound recursively in a nested
namespace; property parameters select a raw literal (source value or default,
depending on presence and dependency state), convert it to the declared type,
apply the property's modifiers in order and check its constraints.
Once every argument is available the type's factory is called.

Binding is all-or-nothing: the first declaration, conversion or unsupported
type error aborts the bind and no partially-built object escapes.
"""

import logging
from typing import Any, Mapping, Optional, TypeVar

from confbind.converters import ConverterRegistry
from confbind.dependency import DependencyResolver
from confbind.domain import BindingPlan, ParameterBinding
from confbind.errors import (
    ConstraintViolationError,
    InvalidDeclarationError,
    UnsupportedTypeConversionError,
)
from confbind.metadata import plan_of
from confbind.source import ConfigurationSource, join_namespace
from confbind.validation import ValidatorRegistry

__all__ = ["Binder"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Binder:
    """Bind configuration sources to configuration types.

    A binder holds no per-bind state, so one instance may serve any number of
    concurrent binds once its registry and resolver have been assembled.

    Args:
        converters: Registry of custom converters; built-ins only if omitted.
        dependencies: Resolver holding the comparators for non-default dependency
            operators; exact string equality only if omitted.
        validators: Registry of constraint validators; constraints are not
            checked if omitted.
    """

    def __init__(
        self,
        converters: Optional[ConverterRegistry] = None,
        dependencies: Optional[DependencyResolver] = None,
        validators: Optional[ValidatorRegistry] = None,
    ):
        self._converters = converters or ConverterRegistry()
        self._dependencies = dependencies or DependencyResolver()
        self._validators = validators or ValidatorRegistry()

    def bind(self, target_type: type[T], source: Mapping[str, str], namespace: str = "") -> T:
        """Create a fully initialised instance of a configuration type.

        Args:
            target_type: The configuration type to build.
            source: The configuration entries, keyed by fully-qualified key.
            namespace: The namespace the type's keys are resolved in; the root
                namespace if empty.

        Returns:
            The constructed instance.

        Raises:
            InvalidDeclarationError: If the type tree's metadata is missing or contradictory.
            UnsupportedTypeConversionError: If a declared type has no converter.
            ConstraintViolationError: If a literal cannot be converted to its declared
                type, a modifier fails, or the value violates a constraint.
        """
        if not isinstance(source, ConfigurationSource):
            source = ConfigurationSource(source)

        plan = plan_of(target_type)
        logger.debug("Binding %s in namespace '%s'", target_type.__name__, namespace)
        return self._build(plan, source, namespace)

    def _build(self, plan: BindingPlan, source: ConfigurationSource, namespace: str) -> Any:
        arguments = {}

        for parameter in plan.parameters:
            if parameter.is_group:
                group_namespace = join_namespace(namespace, parameter.descriptor.namespace)
                arguments[parameter.name] = self._build(
                    plan_of(parameter.declared_type), source, group_namespace
                )
            else:
                arguments[parameter.name] = self._bind_property(parameter, source, namespace)

        return plan.factory(**arguments)

    def _bind_property(
        self, parameter: ParameterBinding, source: ConfigurationSource, namespace: str
    ) -> Any:
        key = join_namespace(namespace, parameter.descriptor.key)
        value = self._select_literal(parameter, source, namespace, key)

        try:
            converted = self._converters.convert(parameter.declared_type, value)
            for modifier in parameter.modifiers:
                converted = modifier.func(converted)
            self._validators.validate(parameter.constraints, converted)
        except (InvalidDeclarationError, UnsupportedTypeConversionError):
            raise
        except Exception as e:
            logger.debug("Failed to bind '%s' of key '%s': %s", value, key, e)
            raise ConstraintViolationError(key, parameter.declared_type, value, str(e)) from e
        return converted

    def _select_literal(
        self, parameter: ParameterBinding, source: ConfigurationSource, namespace: str, key: str
    ) -> str:
        if parameter.dependency is not None and not self._dependencies.is_satisfied(
            parameter.dependency,
            lambda dependency_key: source.lookup(join_namespace(namespace, dependency_key)),
        ):
            default = self._default_literal(parameter, source, namespace)
            logger.debug(
                "Dependency of '%s' on '%s' is not satisfied, using default '%s'",
                key,
                join_namespace(namespace, parameter.dependency.key),
                default,
            )
            return default

        value = source.lookup(key)
        if value is None:
            default = self._default_literal(parameter, source, namespace)
            logger.debug("Key '%s' is absent, using default '%s'", key, default)
            return default
        return value

    def _default_literal(self, parameter: ParameterBinding, source: ConfigurationSource, namespace: str) -> str:
        descriptor = parameter.descriptor
        if not descriptor.default_key:
            return descriptor.default

        default_key = join_namespace(namespace, descriptor.default_key)
        value = source.lookup(default_key)
        if value is None:
            logger.debug("Default key '%s' is absent, using literal default '%s'", default_key, descriptor.default)
            return descriptor.default
        return value
