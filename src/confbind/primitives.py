"""Fixed-width value types for configuration parameters.

Python's ``int``, ``float`` and ``str`` have no fixed width, so configuration
types that need the narrower semantics declare one of these instead::

    port: Annotated[Int16, Property("Port", "80")]

Each type validates on construction, so ``Int8(300)`` raises ``ValueError``
just as a failed conversion would.
"""

import struct

__all__ = ["Int8", "Int16", "Int32", "Int64", "Float32", "Char", "INTEGRAL_TYPES"]


class _BoundedInt(int):
    bits = 64

    def __new__(cls, value=0):
        result = super().__new__(cls, value)
        low, high = -(1 << (cls.bits - 1)), (1 << (cls.bits - 1)) - 1
        if not low <= result <= high:
            raise ValueError(f"Value {int(result)} is out of range for {cls.__name__} [{low}, {high}]")
        return result

    def __repr__(self):
        return f"{type(self).__name__}({int(self)})"


class Int8(_BoundedInt):
    bits = 8


class Int16(_BoundedInt):
    bits = 16


class Int32(_BoundedInt):
    bits = 32


class Int64(_BoundedInt):
    bits = 64


INTEGRAL_TYPES = (int, Int8, Int16, Int32, Int64)


class Float32(float):
    """A float rounded to IEEE 754 single precision."""

    def __new__(cls, value=0.0):
        try:
            (rounded,) = struct.unpack("f", struct.pack("f", float(value)))
        except OverflowError as e:
            raise ValueError(f"Value {value} is out of range for Float32") from e
        return super().__new__(cls, rounded)

    def __repr__(self):
        return f"Float32({float(self)!r})"


class Char(str):
    """A string of exactly one character."""

    def __new__(cls, value):
        if len(value) != 1:
            raise ValueError(f"Cannot convert '{value}' to char. Expected single character, got {len(value)}.")
        return super().__new__(cls, value)
