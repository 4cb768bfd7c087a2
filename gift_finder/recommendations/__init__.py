"""
Gift recommendation engine.

Responsibilities:
- Define the product, criteria and recommendation models.
- Rank candidates with the deterministic fallback heuristic.
- Orchestrate catalog fetch, AI ranking, fallback and enrichment.
"""
