import inspect
from dataclasses import dataclass
from typing import Annotated, NamedTuple

import pytest

from confbind.domain import DependsOn, Group, Modifier, ParameterBinding, Property
from confbind.errors import InvalidDeclarationError
from confbind.metadata import configuration, dependency_of, descriptor_of, modifiers_of, plan_of


@dataclass(frozen=True)
class Network:
    host: Annotated[str, Property("Host", "localhost")]
    port: Annotated[int, Property("Port", "80"), DependsOn("Protocol", value="TCP")]
    protocol: Annotated[str, Property("Protocol", "TCP")]


@dataclass(frozen=True)
class LoginServer:
    network: Annotated[Network, Group("Network")]
    name: Annotated[str, Property("Name")]


class Node:
    def __init__(self, child: Annotated["Node", Group("Child")]):
        self.child = child


def parameter(annotation, name="value"):
    return inspect.Parameter(name, inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=annotation)


def test_plan_lists_parameters_in_declaration_order():
    plan = plan_of(Network)

    assert plan.target_type is Network
    assert plan.factory is Network
    assert plan.parameters == (
        ParameterBinding("host", str, Property("Host", "localhost")),
        ParameterBinding("port", int, Property("Port", "80"), DependsOn("Protocol", value="TCP")),
        ParameterBinding("protocol", str, Property("Protocol", "TCP")),
    )


def test_group_parameters_are_identified():
    plan = plan_of(LoginServer)

    assert [p.is_group for p in plan.parameters] == [True, False]
    assert plan.parameters[0].declared_type is Network
    assert plan.parameters[0].descriptor == Group("Network")


def test_plain_classes_are_introspected_from_init():
    class Limits:
        def __init__(self, size: Annotated[int, Property("Size", "1")], *, name: Annotated[str, Property("Name")]):
            self.size = size
            self.name = name

    assert [p.name for p in plan_of(Limits).parameters] == ["size", "name"]


def test_descriptor_of_returns_marker():
    assert descriptor_of(Network, parameter(Annotated[str, Property("Host")])) == Property("Host")
    assert descriptor_of(LoginServer, parameter(Annotated[Network, Group()])) == Group()


def test_descriptor_of_unmarked_parameter_fails():
    with pytest.raises(InvalidDeclarationError, match="'Network.value' is not annotated with Property or Group"):
        descriptor_of(Network, parameter(str))


def test_descriptor_of_parameter_with_unrelated_metadata_fails():
    with pytest.raises(InvalidDeclarationError, match="not annotated with Property or Group"):
        descriptor_of(Network, parameter(Annotated[str, "Host"]))


def test_both_markers_fail():
    with pytest.raises(InvalidDeclarationError, match="exactly one Property or Group"):
        descriptor_of(Network, parameter(Annotated[Network, Group(), Property("Host")]))


def test_dependency_on_group_fails():
    with pytest.raises(InvalidDeclarationError, match="cannot declare a dependency"):
        descriptor_of(LoginServer, parameter(Annotated[Network, Group("Network"), DependsOn("Enabled")]))


def test_empty_property_key_fails():
    with pytest.raises(InvalidDeclarationError, match="empty key"):
        descriptor_of(Network, parameter(Annotated[str, Property("")]))


def test_dependency_of():
    assert dependency_of(parameter(Annotated[int, Property("Port"), DependsOn("Protocol", value="TCP")])) == DependsOn(
        "Protocol", value="TCP"
    )
    assert dependency_of(parameter(Annotated[int, Property("Port")])) is None


def test_multiple_dependencies_fail():
    with pytest.raises(InvalidDeclarationError, match="at most one is allowed"):
        dependency_of(parameter(Annotated[int, Property("Port"), DependsOn("A"), DependsOn("B")]))


def test_unmarked_constructor_parameter_fails_plan():
    @dataclass(frozen=True)
    class Partial:
        host: Annotated[str, Property("Host")]
        port: int

    with pytest.raises(InvalidDeclarationError, match="'Partial.port' is not annotated"):
        plan_of(Partial)


def test_unmarked_parameter_in_nested_group_fails_plan():
    @dataclass(frozen=True)
    class Inner:
        port: int

    @dataclass(frozen=True)
    class Outer:
        inner: Annotated[Inner, Group("Inner")]

    with pytest.raises(InvalidDeclarationError, match="'Inner.port' is not annotated"):
        plan_of(Outer)


def test_duplicate_property_keys_fail():
    @dataclass(frozen=True)
    class Duplicated:
        first: Annotated[str, Property("Host")]
        second: Annotated[str, Property("Host")]

    with pytest.raises(InvalidDeclarationError, match="'Host' declared on parameter 'Duplicated.second'"):
        plan_of(Duplicated)


def test_dependency_on_key_outside_the_type_is_allowed():
    @dataclass(frozen=True)
    class KeyDependent:
        port: Annotated[int, Property("Port", "80"), DependsOn("Mode", value="custom")]

    (binding,) = plan_of(KeyDependent).parameters

    assert binding.dependency == DependsOn("Mode", value="custom")


def test_variadic_parameters_fail():
    class Variadic:
        def __init__(self, *values: Annotated[str, Property("Values")]):
            self.values = values

    with pytest.raises(InvalidDeclarationError, match="variadic positional"):
        plan_of(Variadic)


def test_group_must_be_a_class():
    @dataclass(frozen=True)
    class Generic:
        items: Annotated[list[int], Group("Items")]

    with pytest.raises(InvalidDeclarationError, match="must be declared with a configuration class"):
        plan_of(Generic)


def test_target_must_be_a_class():
    with pytest.raises(InvalidDeclarationError, match="is not a class"):
        plan_of(lambda: None)


def test_group_cycles_fail():
    with pytest.raises(InvalidDeclarationError, match="must form a tree, found cycle Node -> Node"):
        plan_of(Node)


def test_configuration_decorator_stores_plan():
    @configuration
    @dataclass(frozen=True)
    class Decorated:
        host: Annotated[str, Property("Host")]

    assert Decorated.__binding_plan__ is plan_of(Decorated)


def test_configuration_decorator_registers_factory():
    def make_decorated(**arguments):
        return dict(arguments)

    @configuration(factory=make_decorated)
    @dataclass(frozen=True)
    class Decorated:
        host: Annotated[str, Property("Host")]

    assert plan_of(Decorated).factory is make_decorated


def test_configuration_decorator_fails_at_definition_time():
    with pytest.raises(InvalidDeclarationError, match="is not annotated with Property or Group"):

        @configuration
        @dataclass(frozen=True)
        class Broken:
            host: str


def test_class_without_constructor_parameters_has_empty_plan():
    class Empty:
        pass

    assert plan_of(Empty).parameters == ()


def test_named_tuples_are_introspected_from_new():
    class Endpoint(NamedTuple):
        host: Annotated[str, Property("Host", "localhost")]
        port: Annotated[int, Property("Port", "80")]

    plan = plan_of(Endpoint)

    assert [(p.name, p.declared_type, p.descriptor) for p in plan.parameters] == [
        ("host", str, Property("Host", "localhost")),
        ("port", int, Property("Port", "80")),
    ]


def test_builtin_constructor_fails():
    class Label(str):
        pass

    with pytest.raises(InvalidDeclarationError, match="Label must declare its constructor in Python"):
        plan_of(Label)


def test_modifiers_and_constraints_are_recorded_in_order():
    def double(value):
        return value * 2

    def negate(value):
        return -value

    @dataclass(frozen=True)
    class Limited:
        limit: Annotated[int, Property("Limit", "1"), Modifier(double), "positive", Modifier(negate)]

    (binding,) = plan_of(Limited).parameters

    assert binding.modifiers == (Modifier(double), Modifier(negate))
    assert binding.constraints == ("positive",)


def test_modifier_must_wrap_a_callable():
    with pytest.raises(InvalidDeclarationError, match="must wrap a callable"):
        modifiers_of(parameter(Annotated[int, Property("Limit"), Modifier(5)]))


def test_modifier_on_group_fails():
    with pytest.raises(InvalidDeclarationError, match="cannot declare a modifier"):
        descriptor_of(LoginServer, parameter(Annotated[Network, Group("Network"), Modifier(str)], "network"))
