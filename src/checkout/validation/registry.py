"""Closed registry of validator kinds available to validation rules."""

from enum import Enum

from checkout.exceptions import NoSuchValidatorError
from checkout.validation.validators import (
    AlphanumericValidator,
    BooleanValidator,
    EmailAddressValidator,
    EmptyValidator,
    IntegerValidator,
    NotEmptyValidator,
    NumberRangeValidator,
    NumberValidator,
    RegularExpressionValidator,
    StringLengthValidator,
    TextValidator,
    Validator,
)


class ValidatorKind(Enum):
    NOT_EMPTY = "NotEmpty"
    EMPTY = "Empty"
    EMAIL_ADDRESS = "EmailAddress"
    STRING_LENGTH = "StringLength"
    REGULAR_EXPRESSION = "RegularExpression"
    INTEGER = "Integer"
    NUMBER = "Number"
    NUMBER_RANGE = "NumberRange"
    BOOLEAN = "Boolean"
    ALPHANUMERIC = "Alphanumeric"
    TEXT = "Text"


VALIDATORS: dict[ValidatorKind, type[Validator]] = {
    ValidatorKind.NOT_EMPTY: NotEmptyValidator,
    ValidatorKind.EMPTY: EmptyValidator,
    ValidatorKind.EMAIL_ADDRESS: EmailAddressValidator,
    ValidatorKind.STRING_LENGTH: StringLengthValidator,
    ValidatorKind.REGULAR_EXPRESSION: RegularExpressionValidator,
    ValidatorKind.INTEGER: IntegerValidator,
    ValidatorKind.NUMBER: NumberValidator,
    ValidatorKind.NUMBER_RANGE: NumberRangeValidator,
    ValidatorKind.BOOLEAN: BooleanValidator,
    ValidatorKind.ALPHANUMERIC: AlphanumericValidator,
    ValidatorKind.TEXT: TextValidator,
}


def create_validator(kind: str, options: dict | None = None) -> Validator:
    """Instantiate the validator registered for ``kind``.

    Raises NoSuchValidatorError for kinds outside the registry and
    InvalidValidationOptionsError for options the validator does not accept.
    """
    try:
        validator_kind = ValidatorKind(kind)
    except ValueError:
        raise NoSuchValidatorError(f'Validator "{kind}" could not be resolved.') from None

    return VALIDATORS[validator_kind](**(options or {}))
