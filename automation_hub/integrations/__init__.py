"""
External service integrations for Automation Hub.
"""

from .openrouter import OpenRouterClient, get_llm_client

__all__ = ["OpenRouterClient", "get_llm_client"]
