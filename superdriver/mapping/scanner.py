"""
Schema Annotation Scanner - finds profile annotations inside a schema tree.

Walks an annotated schema depth-first and emits one MappingEntry per
annotated node, with the cursor locating that node's value in a payload:

    {
        semantic_id: "http://supermodel.io/superface/CRM/profile/Customers#RetrieveCustomers/name",
        cursor: ["companies", "properties.name.value"],
    }

A cursor with several segments means the value lives inside an array;
each segment after the first is resolved relative to one array element.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from superdriver.schema.cursor import ARRAY_BOUNDARY, Cursor, PropertyPath
from superdriver.schema.models import (
    ArrayNode,
    MappingEntry,
    ObjectNode,
    SchemaNode,
    parse_schema,
)

logger = logging.getLogger(__name__)


class SchemaAnnotationScanner:
    """Extracts (semantic id, cursor) pairs from annotated schemas"""

    def scan(
        self,
        schema: Union[SchemaNode, Dict[str, Any], None],
        cursor: Optional[Cursor] = None,
    ) -> List[MappingEntry]:
        """
        Scan a schema for profile annotations

        Args:
            schema: Parsed SchemaNode or raw schema dictionary
            cursor: Cursor of the schema root (empty by default)

        Returns:
            Mapping entries in depth-first, declaration order
        """
        node = parse_schema(schema)
        if node is None:
            return []

        entries = self._traverse(node, cursor or Cursor())
        logger.debug(f"Found {len(entries)} annotated schema nodes")
        return entries

    def _traverse(self, node: SchemaNode, cursor: Cursor) -> List[MappingEntry]:
        results = []

        if node.semantic_id:
            results.append(MappingEntry(semantic_id=node.semantic_id, cursor=cursor))

        # Annotated containers are still traversed for nested annotations
        if isinstance(node, ObjectNode):
            results.extend(self._process_object(node, cursor))
        elif isinstance(node, ArrayNode):
            results.extend(self._process_array(node, cursor))

        return results

    def _process_object(self, node: ObjectNode, cursor: Cursor) -> List[MappingEntry]:
        results = []
        for key, child in node.properties.items():
            results.extend(self._traverse(child, cursor.descend(key)))
        return results

    def _process_array(self, node: ArrayNode, cursor: Cursor) -> List[MappingEntry]:
        if node.items is None:
            return []

        # A root array needs a segment yielding the array itself to fan out from
        if not cursor:
            cursor = cursor.push(PropertyPath(""))

        return self._traverse(node.items, cursor.push(ARRAY_BOUNDARY))


def scan(schema: Union[SchemaNode, Dict[str, Any], None]) -> List[MappingEntry]:
    """Scan a schema with a default scanner"""
    return SchemaAnnotationScanner().scan(schema)
