"""Field and object validators used by the checkout validation gate.

A validator checks one value and returns a ValidationResult. Property
validators (NotEmpty, EmailAddress, ...) are attached to an object validator
per property name; object validators are combined per argument by a
ConjunctionValidator. Options are checked when a validator is constructed,
so a bad rule fails while the configuration is loaded.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from protean.utils.reflection import declared_fields

from checkout.exceptions import InvalidValidationOptionsError


@dataclass(frozen=True)
class Error:
    message: str
    code: int


class ValidationResult:
    """Errors for one value, plus nested results per property."""

    def __init__(self) -> None:
        self.errors: list[Error] = []
        self.property_results: dict[str, ValidationResult] = {}

    def add_error(self, message: str, code: int) -> None:
        self.errors.append(Error(message, code))

    def for_property(self, name: str) -> "ValidationResult":
        return self.property_results.setdefault(name, ValidationResult())

    def merge(self, other: "ValidationResult") -> None:
        self.errors.extend(other.errors)
        for name, result in other.property_results.items():
            self.for_property(name).merge(result)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors) or any(result.has_errors for result in self.property_results.values())

    def flattened_errors(self, prefix: str = "") -> dict[str, list[str]]:
        """Error messages keyed by dotted property path."""
        flattened = {}
        if self.errors:
            flattened[prefix] = [error.message for error in self.errors]
        for name, result in self.property_results.items():
            path = f"{prefix}.{name}" if prefix else name
            flattened.update(result.flattened_errors(path))
        return flattened


def is_empty(value) -> bool:
    if value is None or value == "":
        return True
    if isinstance(value, (list, tuple, set, dict)) and not value:
        return True
    return False


class Validator:
    """Base validator.

    ``supported_options`` maps option name to ``(default, description, required)``.
    Empty values are skipped unless ``accepts_empty_values`` is False.
    """

    supported_options: dict[str, tuple[Any, str, bool]] = {}
    accepts_empty_values = True

    def __init__(self, **options) -> None:
        unsupported = sorted(set(options) - set(self.supported_options))
        if unsupported:
            raise InvalidValidationOptionsError(
                f"Unsupported validation option(s) for {type(self).__name__}: {', '.join(unsupported)}"
            )

        missing = [
            name for name, (_, _, required) in self.supported_options.items() if required and name not in options
        ]
        if missing:
            raise InvalidValidationOptionsError(
                f"Required validation option(s) missing for {type(self).__name__}: {', '.join(missing)}"
            )

        self.options = {name: options.get(name, default) for name, (default, _, _) in self.supported_options.items()}

    def validate(self, value) -> ValidationResult:
        result = ValidationResult()
        if not self.accepts_empty_values or not is_empty(value):
            self.is_valid(value, result)
        return result

    def is_valid(self, value, result: ValidationResult) -> None:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Property validators
# ---------------------------------------------------------------------------
class NotEmptyValidator(Validator):
    accepts_empty_values = False

    def is_valid(self, value, result):
        if is_empty(value):
            result.add_error("The given subject was empty.", 1221560718)


class EmptyValidator(Validator):
    """Passes only for empty values, e.g. for honeypot fields."""

    accepts_empty_values = False

    def is_valid(self, value, result):
        if not is_empty(value):
            result.add_error("The given subject was not empty.", 1347992400)


_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s.]+(\.[^@\s.]+)+$")


class EmailAddressValidator(Validator):
    def is_valid(self, value, result):
        if not isinstance(value, str) or not _EMAIL_PATTERN.match(value):
            result.add_error("The given subject was not a valid email address.", 1221559976)


def _coerce_numeric_options(validator, cast, names=("minimum", "maximum")):
    # Options read from environment variables arrive as strings
    for name in names:
        value = validator.options[name]
        if value is None or (isinstance(value, (int, float)) and not isinstance(value, bool)):
            continue
        try:
            validator.options[name] = cast(str(value).strip())
        except ValueError:
            raise InvalidValidationOptionsError(
                f"The option '{name}' of {type(validator).__name__} must be a number, got {value!r}."
            ) from None


class StringLengthValidator(Validator):
    supported_options = {
        "minimum": (0, "Minimum length for a valid string", False),
        "maximum": (None, "Maximum length for a valid string", False),
    }

    def __init__(self, **options) -> None:
        super().__init__(**options)
        _coerce_numeric_options(self, int)
        maximum = self.options["maximum"]
        if maximum is not None and maximum < self.options["minimum"]:
            raise InvalidValidationOptionsError("The 'maximum' is less than the 'minimum' in StringLength.")

    def is_valid(self, value, result):
        length = len(str(value))
        minimum, maximum = self.options["minimum"], self.options["maximum"]
        if length < minimum:
            result.add_error(f"The length of this text must be at least {minimum} characters.", 1238108068)
        elif maximum is not None and length > maximum:
            result.add_error(f"The length of this text must not exceed {maximum} characters.", 1238108069)


class RegularExpressionValidator(Validator):
    supported_options = {
        "regular_expression": (None, "The regular expression to use for validation", True),
    }

    def __init__(self, **options) -> None:
        super().__init__(**options)
        try:
            self._pattern = re.compile(self.options["regular_expression"])
        except (re.error, TypeError) as exc:
            raise InvalidValidationOptionsError(f"Invalid regular expression: {exc}") from exc

    def is_valid(self, value, result):
        if not self._pattern.search(str(value)):
            result.add_error("The given subject did not match the pattern.", 1221565130)


def _as_number(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def _parse_number(text):
    """``"3"`` -> 3, ``"2.5"`` -> 2.5; raises ValueError otherwise."""
    try:
        return int(text)
    except ValueError:
        return float(text)


class IntegerValidator(Validator):
    def is_valid(self, value, result):
        if isinstance(value, bool) or not re.fullmatch(r"-?\d+", str(value).strip()):
            result.add_error("A valid integer number is expected.", 1221560494)


class NumberValidator(Validator):
    def is_valid(self, value, result):
        if _as_number(value) is None:
            result.add_error("A valid number is expected.", 1221563685)


class NumberRangeValidator(Validator):
    supported_options = {
        "minimum": (0, "The minimum value to accept", False),
        "maximum": (None, "The maximum value to accept", False),
    }

    def __init__(self, **options) -> None:
        super().__init__(**options)
        _coerce_numeric_options(self, _parse_number)

    def is_valid(self, value, result):
        number = _as_number(value)
        if number is None:
            result.add_error("A valid number is expected.", 1221563685)
            return

        minimum, maximum = self.options["minimum"], self.options["maximum"]
        if number < minimum:
            result.add_error(f"Please enter a number of at least {minimum}.", 1221561046)
        elif maximum is not None and number > maximum:
            result.add_error(f"Please enter a number not greater than {maximum}.", 1221561046)


def _as_boolean(value):
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "on", "yes"):
            return True
        if lowered in ("0", "false", "off", "no", ""):
            return False
    return None


class BooleanValidator(Validator):
    supported_options = {
        "is": (None, "Boolean value the subject must equal", False),
    }
    accepts_empty_values = False

    def is_valid(self, value, result):
        if self.options["is"] is None:
            return

        actual = _as_boolean(value)
        if actual is None:
            result.add_error("The given subject is not a boolean.", 1361044026)
            return

        expected = _as_boolean(self.options["is"])
        if actual is not expected:
            result.add_error(f"The given subject is not {str(expected).lower()}.", 1361044027)


class AlphanumericValidator(Validator):
    def is_valid(self, value, result):
        if not isinstance(value, str) or not value.isalnum():
            result.add_error("The given subject was not a valid alphanumeric string.", 1221551320)


_TAG_PATTERN = re.compile(r"<[^>]*>")


class TextValidator(Validator):
    """Rejects text containing markup."""

    def is_valid(self, value, result):
        if not isinstance(value, str) or _TAG_PATTERN.search(value):
            result.add_error("The given subject was not a valid text (e.g. contained XML tags).", 1221565786)


# ---------------------------------------------------------------------------
# Object validators
# ---------------------------------------------------------------------------
class GenericObjectValidator(Validator):
    """Validates the properties of a model instance or mapping."""

    def __init__(self, **options) -> None:
        super().__init__(**options)
        self.property_validators: dict[str, list[Validator]] = {}

    def add_property_validator(self, property_name: str, validator: Validator) -> None:
        self.property_validators.setdefault(property_name, []).append(validator)

    def get_property_value(self, subject, property_name):
        if isinstance(subject, Mapping):
            return subject.get(property_name)
        return getattr(subject, property_name, None)

    def is_valid(self, value, result):
        for property_name, validators in self.property_validators.items():
            property_value = self.get_property_value(value, property_name)
            for validator in validators:
                result.for_property(property_name).merge(validator.validate(property_value))


class OrderItemValidator(GenericObjectValidator):
    """Object validator for order items.

    Properties the order item does not declare are looked up in its
    free-form ``additional`` data, so extra form fields can be validated
    the same way as regular ones.
    """

    def get_property_value(self, subject, property_name):
        if isinstance(subject, Mapping):
            if property_name in subject:
                return subject[property_name]
            return (subject.get("additional") or {}).get(property_name)

        if property_name in declared_fields(subject):
            return getattr(subject, property_name)
        return (getattr(subject, "additional", None) or {}).get(property_name)


class ConjunctionValidator(Validator):
    """Passes only if all of its validators pass. All validators always run."""

    def __init__(self, **options) -> None:
        super().__init__(**options)
        self.validators: list[Validator] = []

    def add_validator(self, validator: Validator) -> None:
        self.validators.append(validator)

    def validate(self, value) -> ValidationResult:
        result = ValidationResult()
        for validator in self.validators:
            result.merge(validator.validate(value))
        return result
