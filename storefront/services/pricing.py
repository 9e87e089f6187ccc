"""Price and localization helpers shared by catalog routes and the cart"""

from typing import Optional

from ..models.cart import PriceInfo
from ..models.product import Money, ProductProjection, ProductVariant

CURRENCY_SYMBOLS = {
    "GBP": "£",
    "USD": "$",
    "EUR": "€",
    "JPY": "¥",
}

FALLBACK_LOCALES = ("en", "en-US", "en-GB")


def from_minor_units(money: Money) -> float:
    """Convert a minor-unit amount to major units (e.g. 1999 cents -> 19.99)"""
    return money.cent_amount / (10 ** money.fraction_digits)


def format_price(money: Money) -> str:
    """Format a price for display, e.g. ``£19.99``"""
    amount = from_minor_units(money)
    symbol = CURRENCY_SYMBOLS.get(money.currency_code)
    formatted = f"{amount:,.{money.fraction_digits}f}"
    if symbol:
        return f"{symbol}{formatted}"
    return f"{money.currency_code} {formatted}"


def get_localized_value(
    localized: Optional[dict[str, str]],
    locale: str = "en",
) -> str:
    """Pick a localized string, falling back to English, then to any locale"""
    if not localized:
        return ""
    return (
        localized.get(locale)
        or localized.get("en")
        or next(iter(localized.values()), "")
        or ""
    )


def get_slug(localized: Optional[dict[str, str]]) -> str:
    """Slug used for URL matching (first hit across the fallback locales)"""
    if not isinstance(localized, dict) or not localized:
        return ""
    for locale in FALLBACK_LOCALES:
        if localized.get(locale):
            return localized[locale]
    return next(iter(localized.values()), "")


def price_info_for_variant(
    product: ProductProjection,
    variant: ProductVariant,
    locale: str = "en",
) -> PriceInfo:
    """Capture what a line item stores about a variant when it is added to the cart"""
    price = variant.prices[0].value if variant.prices else None
    image = variant.images[0].url if variant.images else None

    return PriceInfo(
        name=get_localized_value(product.name, locale) or None,
        price=from_minor_units(price) if price else None,
        currency=price.currency_code if price else None,
        image=image,
        sku=variant.sku,
        attributes={a.name: a.value for a in variant.attributes},
    )
