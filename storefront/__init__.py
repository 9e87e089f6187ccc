"""Storefront: catalog, homepage content and session carts over a headless commerce API and CMS."""

__version__ = "1.0.0"
