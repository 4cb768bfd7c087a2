"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build the ranking prompt from gift criteria and catalog products.
- Call Groq LLM to pick the best three gifts with short reasons.
- Report every failure as a RankingOutcome so callers can fall back.
"""
