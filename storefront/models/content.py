"""
Homepage content models

Typed schema for the marketing sections rendered on the homepage, the fixed
default bundle served when the CMS is unconfigured or empty, and the pure
merge used to lay CMS entry fields over that default.
"""

from typing import Any, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DEFAULT_CATEGORY_COLOR = "text-[#5514B4]"


class ContentModel(BaseModel):
    """Base for content sections (camelCase field names, as stored in the CMS)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HeroContent(ContentModel):
    title: str
    subtitle: str


class PromoBannerContent(ContentModel):
    text: str
    link_url: str


class ExclusiveDealsContent(ContentModel):
    badge: str
    title: str
    subtitle: str
    cta_text_1: str
    cta_text_2: str
    image_url: str


class EeTvSectionContent(ContentModel):
    badge: str
    title: str
    description: str
    features: list[str]
    cta_text_1: str
    cta_text_2: str
    image_url: str


class ProductCardContent(ContentModel):
    category: str = ""
    category_color: str = DEFAULT_CATEGORY_COLOR
    title: str = ""
    description: str = ""
    cta_text: str = ""
    image_url: str = ""


class BtEeSectionContent(ContentModel):
    title: str
    subtitle: str
    products: list[ProductCardContent]


class HomepageContent(ContentModel):
    """Everything the homepage renders"""
    hero: HeroContent
    promo_banner: PromoBannerContent
    exclusive_deals: ExclusiveDealsContent
    ee_tv_section: EeTvSectionContent
    bt_ee_section: BtEeSectionContent


_ASSET_HOST = "https://www.bt.com/content/dam/bt"

DEFAULT_HOMEPAGE_CONTENT = HomepageContent(
    hero=HeroContent(
        title="Upgrade your home with BT Broadband",
        subtitle="Fast, reliable BT Broadband and EE TV packages for busy households.",
    ),
    promo_banner=PromoBannerContent(
        text="Don't have BT Broadband yet? Find your available deals",
        link_url="#",
    ),
    exclusive_deals=ExclusiveDealsContent(
        badge="Trusted, reliable broadband",
        title="Exclusive deals just for you",
        subtitle="Already a BT customer? Unlock personalised offers on broadband and TV.",
        cta_text_1="Log in for exclusive deals",
        cta_text_2="Manage My BT account",
        image_url=(
            f"{_ASSET_HOST}/storefront/bt-home/newcust/images/mainherobanner/2025/march/"
            "Homepage_NewCust_MainHero_v2_Desktop_1920x1200.webp"
        ),
    ),
    ee_tv_section=EeTvSectionContent(
        badge="EE TV",
        title="Experience entertainment like never before",
        description=(
            "Stream your favourite shows, movies, and sports all in one place. "
            "With EE TV, you get access to premium content from Netflix, Disney+, "
            "Apple TV+, and more."
        ),
        features=[
            "Over 100+ channels included",
            "Premium streaming apps built-in",
            "Pause and rewind live TV",
            "Voice control with your remote",
        ],
        cta_text_1="Get EE TV",
        cta_text_2="Learn more",
        image_url=f"{_ASSET_HOST}/consumer/homepage-images/Cards/products/ee-tv-box.png",
    ),
    bt_ee_section=BtEeSectionContent(
        title="BT + EE, the ultimate home entertainment",
        subtitle=(
            "Power your home with BT's Full Fibre Broadband (up to 900Mbps) and tailor "
            "your EE TV with Sky Sports, Netflix, or Now Cinema. Grab the best of both worlds."
        ),
        products=[
            ProductCardContent(
                category="BT Broadband",
                title="Reliable. Fast.",
                description="BT's trusted network with brilliant services",
                cta_text="View your personalised deals",
                image_url=f"{_ASSET_HOST}/consumer/homepage-images/Cards/products/bb-hub.png",
            ),
            ProductCardContent(
                category="iPhone offer",
                category_color="text-[#FF80FF]",
                title="Latest. iPhone 17 Pro",
                description=(
                    "New exclusive offer - BT Broadband customers now get 30% off "
                    "data plans, plus double data."
                ),
                cta_text="Buy now",
                image_url=f"{_ASSET_HOST}/consumer/homepage-images/Cards/products/iphone-16-pro.png",
            ),
            ProductCardContent(
                category="EE TV",
                title="Watch. Swap. Enjoy",
                description="Premium channels with the flexibility to swap each month",
                cta_text="Add EE TV to your broadband",
                image_url=f"{_ASSET_HOST}/consumer/homepage-images/Cards/products/ee-tv-box.png",
            ),
            ProductCardContent(
                category="EE Sports",
                title="Live. Sports. Action",
                description="TNT Sports, Sky Sports included",
                cta_text="Buy TNT Sports",
                image_url=f"{_ASSET_HOST}/consumer/homepage-images/Cards/products/tnt-sports.png",
            ),
            ProductCardContent(
                category="BT Business",
                title="Secure. Connected.",
                description="Business broadband solutions for your company",
                cta_text="Get unbeatable deals",
                image_url=f"{_ASSET_HOST}/consumer/homepage-images/Cards/products/bb-hub.png",
            ),
        ],
    ),
)


SectionT = TypeVar("SectionT", bound=ContentModel)


def _usable(value: Any, current: Any) -> bool:
    """Whether a CMS value may replace the current value of a field"""
    if isinstance(current, str):
        return isinstance(value, str) and value != ""
    if isinstance(current, list):
        return (
            isinstance(value, list)
            and len(value) > 0
            and all(isinstance(v, str) for v in value)
        )
    return False


def merge_section(default: SectionT, fields: Optional[Mapping[str, Any]]) -> SectionT:
    """
    Lay CMS entry fields over a default section.

    A field overrides the default only when it is present under its camelCase
    name, has the same shape as the default value and is not empty. Nested
    model fields are never taken from ``fields``.
    """
    if not fields:
        return default

    updates = {}
    for name, info in type(default).model_fields.items():
        key = info.alias or name
        if key in fields and _usable(fields[key], getattr(default, name)):
            updates[name] = fields[key]

    return default.model_copy(update=updates)


def merge_homepage(
    default: HomepageContent,
    sections: Mapping[str, Mapping[str, Any]],
    product_cards: Optional[list[Mapping[str, Any]]] = None,
) -> HomepageContent:
    """
    Build homepage content from per-section CMS fields.

    ``sections`` maps a section attribute name (``hero``, ``promo_banner``...)
    to that section's entry fields. Product cards replace the default card list
    wholesale when at least one is given.
    """
    updates = {
        name: merge_section(getattr(default, name), sections.get(name))
        for name in type(default).model_fields
    }

    if product_cards:
        cards = [merge_section(ProductCardContent(), card) for card in product_cards]
        updates["bt_ee_section"] = updates["bt_ee_section"].model_copy(
            update={"products": cards}
        )

    return default.model_copy(update=updates)
