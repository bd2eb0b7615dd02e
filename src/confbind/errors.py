__all__ = [
    "ConfigurationError",
    "InvalidDeclarationError",
    "UnsupportedTypeConversionError",
    "ConstraintViolationError",
]


class ConfigurationError(Exception):
    """Base class for every error raised while binding configuration."""

    pass


class InvalidDeclarationError(ConfigurationError):
    """Raised when a configuration type's constructor metadata is missing or contradictory."""

    pass


class UnsupportedTypeConversionError(ConfigurationError):
    """Raised when no built-in or custom converter can produce a declared type."""

    def __init__(self, declared_type, value=None):
        type_name = declared_type.__name__ if isinstance(declared_type, type) else str(declared_type)
        if value is None:
            message = f"Conversions to type {type_name} are not supported."
        else:
            message = f"Cannot convert '{value}' to type {type_name}."
        super().__init__(
            message + " Consider registering a custom converter for it in the ConverterRegistry."
        )
        self.declared_type = declared_type


class ConstraintViolationError(ConfigurationError):
    """Raised when a configuration value cannot be converted to its declared type.

    Attributes:
        key: The fully-qualified configuration key being bound.
        declared_type: The declared type of the constructor parameter.
        value: The raw literal that failed to convert.
    """

    def __init__(self, key: str, declared_type, value: str, reason: str = ""):
        type_name = declared_type.__name__ if isinstance(declared_type, type) else str(declared_type)
        message = f"Cannot convert value '{value}' of key '{key}' to type {type_name}"
        super().__init__(f"{message}: {reason}" if reason else message)
        self.key = key
        self.declared_type = declared_type
        self.value = value
