from __future__ import annotations

import logging
from typing import Any

import requests

from ..recommendations.models import Product
from .config import DEFAULT_STOREFRONT_CONFIG, StorefrontConfig

logger = logging.getLogger(__name__)

PRODUCTS_QUERY = """\
query GiftFinderProducts($first: Int!, $sortKey: ProductSortKeys!, $truncateAt: Int!) {
  products(first: $first, sortKey: $sortKey) {
    edges {
      node {
        id
        title
        handle
        vendor
        productType
        tags
        description(truncateAt: $truncateAt)
        priceRange { minVariantPrice { amount currencyCode } }
        images(first: 1) { edges { node { url altText } } }
      }
    }
  }
}"""


class CatalogError(RuntimeError):
    """Raised when the storefront product catalog cannot be fetched."""


def _first_image_url(node: dict[str, Any]) -> str | None:
    edges = (node.get("images") or {}).get("edges") or []
    if not edges:
        return None
    return (edges[0].get("node") or {}).get("url") or None


def _to_price(amount: Any) -> float:
    try:
        value = float(amount or 0)
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, value)


def map_product_node(node: dict[str, Any], default_currency: str = "INR") -> Product:
    """Map one Storefront GraphQL product node to a Product."""
    min_price = (node.get("priceRange") or {}).get("minVariantPrice") or {}
    return Product(
        id=str(node.get("id") or ""),
        handle=str(node.get("handle") or ""),
        title=node.get("title") or "",
        vendor=node.get("vendor") or "",
        type=node.get("productType") or "",
        tags=list(node.get("tags") or []),
        description=node.get("description") or "",
        price=_to_price(min_price.get("amount")),
        currency=min_price.get("currencyCode") or default_currency,
        image=_first_image_url(node),
    )


def parse_products(payload: dict[str, Any], default_currency: str = "INR") -> list[Product]:
    edges = ((payload.get("data") or {}).get("products") or {}).get("edges") or []
    return [
        map_product_node(edge["node"], default_currency)
        for edge in edges
        if isinstance(edge, dict) and isinstance(edge.get("node"), dict)
    ]


def fetch_products(config: StorefrontConfig = DEFAULT_STOREFRONT_CONFIG) -> list[Product]:
    """
    Fetch the best-selling products from the Shopify Storefront API.

    Raises CatalogError on transport failures, non-2xx responses,
    unparseable bodies, or GraphQL errors without data.
    """
    body = {
        "query": PRODUCTS_QUERY,
        "variables": {
            "first": config.product_count,
            "sortKey": config.sort_key,
            "truncateAt": config.description_length,
        },
    }
    headers = {
        "Content-Type": "application/json",
        "X-Shopify-Storefront-Access-Token": config.access_token,
    }

    try:
        resp = requests.post(
            config.endpoint, json=body, headers=headers, timeout=config.timeout,
        )
        resp.raise_for_status()
        payload = resp.json()
    except requests.RequestException as exc:
        raise CatalogError(f"Storefront request failed: {exc}") from exc
    except ValueError as exc:
        raise CatalogError("Storefront returned a non-JSON body") from exc

    if not isinstance(payload, dict):
        raise CatalogError("Storefront returned an unexpected payload")
    if payload.get("errors") and not payload.get("data"):
        raise CatalogError(f"Storefront GraphQL errors: {payload['errors']}")

    products = parse_products(payload, config.default_currency)
    logger.info("Fetched %d products from %s", len(products), config.domain)
    return products
