"""Validation gate: configured field rules applied before the checkout starts.

For each argument (order item, billing address, shipping address) the gate
builds one ConjunctionValidator AND-ing:

- a model validator tailored to the argument (OrderItemValidator for the
  order item, GenericObjectValidator otherwise) carrying the configured
  per-property validators, and
- any parent validators registered for that argument.

All rules are resolved when the gate is built; unknown validator kinds,
bad options and unknown properties fail there, not during a request.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import structlog
from protean.utils.reflection import declared_fields

from checkout.exceptions import UnknownPropertyError
from checkout.order.item import BillingAddress, OrderItem, ShippingAddress
from checkout.validation.registry import create_validator
from checkout.validation.validators import (
    ConjunctionValidator,
    GenericObjectValidator,
    OrderItemValidator,
    ValidationResult,
    Validator,
)

logger = structlog.get_logger(__name__)

ARGUMENT_MODELS = {
    "order_item": OrderItem,
    "billing_address": BillingAddress,
    "shipping_address": ShippingAddress,
}


@dataclass
class GateResult:
    results: dict[str, ValidationResult] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not any(result.has_errors for result in self.results.values())

    def errors(self) -> dict[str, list[str]]:
        flattened = {}
        for argument, result in self.results.items():
            flattened.update(result.flattened_errors(argument))
        return flattened


class ValidationGate:
    def __init__(
        self,
        rules: Mapping | None = None,
        parent_validators: Mapping[str, Iterable[Validator]] | None = None,
    ) -> None:
        self._validators: dict[str, ConjunctionValidator] = {}

        for argument, configured in (parent_validators or {}).items():
            for validator in configured:
                self._conjunction_for(argument).add_validator(validator)

        for argument, argument_rules in (rules or {}).items():
            if argument not in ARGUMENT_MODELS:
                logger.warning("Validation rules for unknown argument ignored", argument=argument)
                continue
            if argument_rules.fields:
                self._conjunction_for(argument).add_validator(self._model_validator(argument, argument_rules.fields))

    @classmethod
    def from_settings(cls, settings, parent_validators=None) -> "ValidationGate":
        return cls(settings.validation, parent_validators)

    def validator_for(self, argument: str) -> ConjunctionValidator | None:
        return self._validators.get(argument)

    def validate(self, arguments: Mapping) -> GateResult:
        """Validate all arguments; absent (None) arguments pass."""
        gate_result = GateResult()
        for argument, validator in self._validators.items():
            gate_result.results[argument] = validator.validate(arguments.get(argument))

        if not gate_result.is_valid:
            logger.info("Checkout arguments failed validation", errors=gate_result.errors())
        return gate_result

    def _conjunction_for(self, argument: str) -> ConjunctionValidator:
        if argument not in self._validators:
            self._validators[argument] = ConjunctionValidator()
        return self._validators[argument]

    def _model_validator(self, argument, fields) -> GenericObjectValidator:
        model = ARGUMENT_MODELS[argument]
        if model is OrderItem:
            model_validator = OrderItemValidator()
        else:
            model_validator = GenericObjectValidator()

        known_properties = declared_fields(model)
        for property_name, config in fields.items():
            # Order items may validate keys of their ``additional`` data as well
            if model is not OrderItem and property_name not in known_properties:
                raise UnknownPropertyError(f'"{property_name}" is not a property of {model.__name__}')

            model_validator.add_property_validator(property_name, create_validator(config.validator, config.options))

        return model_validator
