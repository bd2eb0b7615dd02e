from typing import Annotated, Any, List, Optional, TypeVar, Union

import pytest

from confbind.domain import Property
from confbind.errors import UnsupportedTypeConversionError
from confbind.type_token import TypeToken, raw_type_of, type_arguments_of

T = TypeVar("T")


def test_raw_type_of_plain_class():
    assert raw_type_of(int) is int


def test_raw_type_of_generic_alias_is_its_origin():
    assert raw_type_of(list[int]) is list
    assert raw_type_of(List[str]) is list
    assert raw_type_of(dict[str, int]) is dict


def test_annotated_metadata_is_ignored():
    assert raw_type_of(Annotated[int, Property("Port")]) is int


@pytest.mark.parametrize("declared_type", [T, Any, Optional[int], Union[int, str], int | None])
def test_unrecognised_type_shapes_are_unsupported(declared_type):
    with pytest.raises(UnsupportedTypeConversionError, match="Consider registering a custom converter"):
        raw_type_of(declared_type)


def test_type_arguments_of_non_generic_type_is_empty():
    assert type_arguments_of(str) == ()


def test_type_arguments_are_ordered():
    assert type_arguments_of(dict[str, int]) == (str, int)


def test_token_resolves_nested_type_arguments():
    token = TypeToken.of(dict[str, list[int]])

    assert token.raw_type is dict
    assert token.type_arguments == (TypeToken(str, ()), TypeToken(list, (TypeToken(int, ()),)))
    assert token.name == "dict[str, list[int]]"


def test_token_keeps_variadic_tuple_marker():
    token = TypeToken.of(tuple[int, ...])

    assert token.type_arguments == (TypeToken(int, ()), Ellipsis)
    assert str(token) == "tuple[int, ...]"
