"""
Annotation Mapping - locates profile annotations in schemas and resolves them in payloads.

Supports:
- Depth-first annotation scanning with typed cursors
- Dotted-path lookup with fan-out across arrays
- Response normalization to requested profile properties
- Qualified profile identifiers
"""

from .scanner import SchemaAnnotationScanner, scan
from .resolver import extract, get_path
from .normalizer import ResponseNormalizer, normalize, map_response
from .qualified import qualify, qualify_inputs, unqualify

__all__ = [
    "SchemaAnnotationScanner",
    "ResponseNormalizer",
    "scan",
    "extract",
    "get_path",
    "normalize",
    "map_response",
    "qualify",
    "qualify_inputs",
    "unqualify",
]
