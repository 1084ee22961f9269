"""Composable catalog of AI model providers, packages and input fields."""

__version__ = "0.1.0"

__all__ = ["__version__"]
