"""Success redirect lookup for the payment method chosen in the cart.

Payment options are configured per option id, optionally overridden per
billing country. An option may carry ``redirects.success.url``; when it does,
a finished checkout sends the customer there instead of rendering the
default confirmation view.
"""

from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SuccessRedirect:
    url: str
    status_code: int = 200


def type_plugin_settings(settings, cart, setting_type: str = "payments"):
    """Return the ``setting_type`` settings that apply to the cart's billing country.

    A country override replaces the default options as a whole.
    """
    type_settings = getattr(settings, setting_type)
    country = (cart.billing_country or "").lower()
    for code, country_settings in type_settings.countries.items():
        if code.lower() == country:
            return country_settings
    return type_settings


def resolve_success_redirect(payment_id, payment_settings) -> SuccessRedirect | None:
    """Look up the success redirect configured for ``payment_id``.

    Returns None if the option is unknown or has no success URL.
    """
    if payment_id is None:
        return None

    option = payment_settings.options.get(int(payment_id))
    if option is None or option.redirects is None or option.redirects.success is None:
        return None

    url = option.redirects.success.url
    if not url:
        return None

    logger.debug("Success redirect resolved", payment_id=payment_id, url=url)
    return SuccessRedirect(url=url)
