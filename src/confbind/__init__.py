"""Confbind configuration binding.

Confbind binds flat, namespaced, textual key/value configuration into an
immutable tree of typed objects. Each configuration type declares, on the
parameters of its constructor, which configuration key or nested group every
argument comes from; a binder then converts the raw text to the declared types
and builds the objects, with no global state.

Key Features:
    - Declarative Property/Group metadata using standard ``Annotated`` type hints
    - Built-in conversion of numbers, booleans, characters, strings, enums and collections
    - Custom converters that take priority over the built-in conversions
    - Conditional defaults driven by dependencies on other properties' raw values
    - Pluggable dependency comparison operators
    - Defaults read from another configuration key
    - Value modifiers and constraint validators applied after conversion
    - All-or-nothing binding with contextual conversion errors

Basic Usage:
    >>> from dataclasses import dataclass
    >>> from typing import Annotated
    >>> from confbind.builders import bind
    >>> from confbind.domain import DependsOn, Property
    >>>
    >>> @dataclass(frozen=True)
    ... class Server:
    ...     port: Annotated[int, Property("Port", "80"), DependsOn("Protocol", value="TCP")]
    ...     protocol: Annotated[str, Property("Protocol", "TCP")]
    >>>
    >>> bind(Server, {"Protocol": "UDP", "Port": "8080"})
    Server(port=80, protocol='UDP')

The framework consists of several core modules:
    - metadata: Constructor introspection into binding plans
    - binder: Recursive object construction
    - builders: High-level binding functions
    - converters: Built-in conversions and the converter registry
    - dependency: Dependency evaluation and comparators
    - validation: Constraint validators
    - domain: Metadata markers and binding plans
    - source: Immutable configuration sources
    - type_token: Raw type and type argument extraction
    - primitives: Fixed-width numeric and character types
    - errors: Framework-specific exceptions
"""
