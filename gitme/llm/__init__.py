"""Hosted model providers and the failover gateway."""

from .gateway import ProviderGateway, TextProvider
from .providers import GeminiProvider, GroqProvider, Provider

__all__ = ["GeminiProvider", "GroqProvider", "Provider", "ProviderGateway", "TextProvider"]
