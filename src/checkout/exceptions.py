"""Configuration errors raised while wiring the checkout.

Domain rule violations use ``protean.exceptions.ValidationError`` directly;
the classes here cover mistakes in the checkout configuration, which are
reported when the configuration is loaded rather than per request.
"""

from protean.exceptions import ConfigurationError


class NoSuchValidatorError(ConfigurationError):
    """A validation rule names a validator kind that is not registered."""


class InvalidValidationOptionsError(ConfigurationError):
    """A validator received options it does not support, or misses required ones."""


class UnknownPropertyError(ConfigurationError):
    """A validation rule targets a property the argument's model does not declare."""
