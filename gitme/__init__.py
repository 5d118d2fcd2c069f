"""GitMe: AI-generated READMEs for public GitHub repositories."""

__version__ = "1.0.0"
