"""
Utility modules for core functionality - functional architecture.

This package contains reusable utility functions for domain-agnostic operations.

Modules:
- decorators: Utility decorators (timer, etc.)
- enum_converter: Enum parsing and conversion
"""

# Decorators
from .decorators import timer

# Enum converter functions
from .enum_converter import parse_enum

__all__ = [
    # Decorators
    "timer",
    # Enum converter
    "parse_enum",
]
