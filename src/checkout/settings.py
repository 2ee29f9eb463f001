"""Checkout plugin settings.

Settings are read (in order of precedence) from keyword arguments, ``CART_*``
environment variables (nested keys separated by ``__``, e.g.
``CART_FEATURES__SPLIT_UP_PROCESS_ORDER_CREATE_EVENT=true``) and an optional
``cart.toml`` file in the working directory.

Example ``cart.toml``::

    [cart]
    pid = 12

    [order]
    pid = 14
    number_prefix = "ORD-"

    [features]
    split_up_process_order_create_event = true

    [validation.order_item.fields.email]
    validator = "EmailAddress"

    [payments.options.2.redirects.success]
    url = "https://shop.example.com/thank-you"
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)


# ---------------------------------------------------------------------------
# Validation rules
# ---------------------------------------------------------------------------
class ValidatorConfig(BaseModel):
    validator: str
    options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def options_must_be_a_mapping(cls, value):
        # Scalar or missing options are treated as "no options"
        return value if isinstance(value, dict) else {}


class ArgumentValidation(BaseModel):
    fields: dict[str, ValidatorConfig] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class SuccessRedirectConfig(BaseModel):
    url: str | None = None


class PaymentRedirects(BaseModel):
    success: SuccessRedirectConfig | None = None


class PaymentOption(BaseModel):
    title: str = ""
    provider: str = ""
    redirects: PaymentRedirects | None = None


class PaymentSettings(BaseModel):
    options: dict[int, PaymentOption] = Field(default_factory=dict)


class PaymentTypeSettings(PaymentSettings):
    """Default payment options plus per billing-country overrides."""

    countries: dict[str, PaymentSettings] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Persistence mapping (model property -> table column)
# ---------------------------------------------------------------------------
class ColumnMapping(BaseModel):
    map_on_property: str


class TableMapping(BaseModel):
    table_name: str
    columns: dict[str, ColumnMapping] = Field(default_factory=dict)


class ClassPersistence(BaseModel):
    mapping: TableMapping | None = None


class PersistenceSettings(BaseModel):
    classes: dict[str, ClassPersistence] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Cart / order / features
# ---------------------------------------------------------------------------
class CartConfig(BaseModel):
    pid: int = 0


class OrderConfig(BaseModel):
    pid: int = 0
    number_prefix: str = ""


class Features(BaseModel):
    split_up_process_order_create_event: bool = False


class CheckoutSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CART_",
        env_nested_delimiter="__",
        toml_file="cart.toml",
        extra="ignore",
    )

    cart: CartConfig = Field(default_factory=CartConfig)
    order: OrderConfig = Field(default_factory=OrderConfig)
    features: Features = Field(default_factory=Features)
    validation: dict[str, ArgumentValidation] = Field(default_factory=dict)
    payments: PaymentTypeSettings = Field(default_factory=PaymentTypeSettings)
    persistence: PersistenceSettings = Field(default_factory=PersistenceSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, TomlConfigSettingsSource(settings_cls))


_current_settings: CheckoutSettings | None = None


def get_settings() -> CheckoutSettings:
    """Return the active checkout settings, loading them on first use."""
    global _current_settings
    if _current_settings is None:
        _current_settings = CheckoutSettings()
    return _current_settings


def set_settings(settings: CheckoutSettings) -> None:
    """Override the active settings (useful for tests)."""
    global _current_settings
    _current_settings = settings


def reset_settings() -> None:
    """Forget the active settings; the next ``get_settings()`` reloads them."""
    global _current_settings
    _current_settings = None
