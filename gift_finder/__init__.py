"""
Gift finder service for a Shopify storefront.

Picks up to three gift products for a recipient, occasion, interests
and budget: Groq ranks the catalog when available, and a deterministic
keyword and budget heuristic takes over when it is not.
"""
