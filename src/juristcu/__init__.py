"""
JurisTCU classification service.

Ranks TCU rulings (acórdãos) against a user-supplied case description by
evaluating a fixed taxonomy of criteria with LLM providers:
- Quota-aware routing across Gemini (multi-key) -> Claude -> OpenAI
- Strict decoding of yes/no judgments
- Sequential corpus scan with early stop and partial results

Architecture: FastAPI surface + async httpx provider clients + scan pipeline
"""

__version__ = "1.0.0"
