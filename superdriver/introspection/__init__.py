"""
API Introspection Module

Discovers profile operations in a provider's OpenAPI specification.
Supports:
- OpenAPI 3.0 specification fetching and caching
- Local $ref dereferencing
- Operation lookup by x-profile affordance annotation
"""

from .spec_fetcher import SpecificationFetcher
from .spec_analyzer import SpecificationAnalyzer, ProfileOperation

__all__ = [
    "SpecificationFetcher",
    "SpecificationAnalyzer",
    "ProfileOperation",
]
