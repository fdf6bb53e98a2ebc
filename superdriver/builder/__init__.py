"""
Request Builder Module

Builds provider HTTP requests from profile input with:
- Prioritized value resolution (input → credential → literal)
- Query/header/URL parameter placement
- JSON and form request bodies
- Basic and API key security schemes
"""

from .parameter_resolver import ParameterResolver, ABSENT
from .request_builder import RequestBuilder, HttpRequest, SUPPORTED_MEDIA_TYPES

__all__ = [
    "ParameterResolver",
    "ABSENT",
    "RequestBuilder",
    "HttpRequest",
    "SUPPORTED_MEDIA_TYPES",
]
