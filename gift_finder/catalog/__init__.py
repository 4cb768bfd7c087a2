"""
Shopify Storefront catalog access.

Responsibilities:
- Hold storefront domain, token and query settings.
- Fetch best-selling products over the Storefront GraphQL API.
- Map GraphQL nodes into the canonical Product model.
"""
