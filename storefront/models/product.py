"""Catalog models mirroring the commerce backend's product projections"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Optional


class CommerceModel(BaseModel):
    """Base for records read from the commerce API (camelCase on the wire)"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


LocalizedString = dict[str, str]


class Reference(CommerceModel):
    type_id: Optional[str] = None
    id: str


class Money(CommerceModel):
    """Price amount in minor currency units"""
    cent_amount: int
    currency_code: str
    fraction_digits: int = 2


class Price(CommerceModel):
    id: Optional[str] = None
    value: Money
    country: Optional[str] = None


class Image(CommerceModel):
    url: str
    label: Optional[str] = None


class Attribute(CommerceModel):
    name: str
    value: Any = None


class ProductVariant(CommerceModel):
    """A sellable configuration of a product"""
    id: int
    sku: Optional[str] = None
    key: Optional[str] = None
    images: list[Image] = []
    prices: list[Price] = []
    attributes: list[Attribute] = []


class ProductProjection(CommerceModel):
    """Product as returned by the product projections endpoints"""
    id: str
    key: Optional[str] = None
    version: Optional[int] = None
    name: LocalizedString = {}
    description: Optional[LocalizedString] = None
    slug: LocalizedString = {}
    categories: list[Reference] = []
    master_variant: ProductVariant
    variants: list[ProductVariant] = []

    @property
    def all_variants(self) -> list[ProductVariant]:
        """Master variant followed by the alternate variants"""
        return [self.master_variant, *self.variants]

    def find_variant(self, variant_id: int) -> Optional[ProductVariant]:
        """Get a variant by its numeric ID"""
        return next((v for v in self.all_variants if v.id == variant_id), None)


class Category(CommerceModel):
    """Catalog category"""
    id: str
    key: Optional[str] = None
    version: Optional[int] = None
    name: LocalizedString = {}
    slug: LocalizedString = {}
    description: Optional[LocalizedString] = None
    order_hint: Optional[str] = None
    parent: Optional[Reference] = None


class CategoryProductsResponse(BaseModel):
    """Products listed under a category"""
    category: Category
    products: list[ProductProjection]
    total: int
