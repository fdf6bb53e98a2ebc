"""
Inbound Response Normalizer - translates a provider response into profile terms.

Combines the schema scanner and the value resolver, then keeps only the
properties the caller asked for, keyed by their unqualified names.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Union

from superdriver.schema.models import MappingEntry, SchemaNode
from .qualified import unqualify
from .resolver import extract
from .scanner import SchemaAnnotationScanner

logger = logging.getLogger(__name__)

Schema = Union[SchemaNode, Dict[str, Any], None]


class ResponseNormalizer:
    """Maps provider responses to profile properties"""

    def __init__(self, scanner: Optional[SchemaAnnotationScanner] = None):
        self.scanner = scanner or SchemaAnnotationScanner()

    def map_response(self, schema: Schema, response: Any) -> List[MappingEntry]:
        """
        Find all annotated values of a response

        Args:
            schema: Response schema with profile annotations
            response: Provider response data

        Returns:
            Mapping entries with `value` filled from the response
        """
        return [
            replace(entry, value=extract(response, entry.cursor))
            for entry in self.scanner.scan(schema)
        ]

    def normalize(
        self,
        schema: Schema,
        response: Any,
        requested: Optional[List[str]],
        profile_id: str,
    ) -> Dict[str, Any]:
        """
        Normalize a response to the requested profile properties

        Args:
            schema: Response schema with profile annotations
            response: Provider response data
            requested: Unqualified property names (e.g. "RetrieveAlert/title").
                None requests every annotated property of the profile.
            profile_id: Profile identifier used to qualify the names

        Returns:
            {requested_name: value}; names without an annotation are left out
        """
        if schema is None:
            logger.debug("No response mapping")
            return {}

        if requested is None:
            wanted = None
        else:
            wanted = {f"{profile_id}#{name}": name for name in requested}
            logger.debug(f"Qualified response properties: {list(wanted)}")

        result = {}
        for entry in self.map_response(schema, response):
            if wanted is None:
                name = unqualify(profile_id, entry.semantic_id)
            else:
                name = wanted.get(entry.semantic_id)
            if name is not None:
                result[name] = entry.value

        return result


def normalize(
    schema: Schema,
    response: Any,
    requested: Optional[List[str]],
    profile_id: str,
) -> Dict[str, Any]:
    """Normalize a response with a default normalizer"""
    return ResponseNormalizer().normalize(schema, response, requested, profile_id)


def map_response(schema: Schema, response: Any) -> List[MappingEntry]:
    """Map a response with a default normalizer"""
    return ResponseNormalizer().map_response(schema, response)
