"""
Annotated schema models.

Parses OpenAPI schema objects carrying profile annotations into a tagged
node tree:
- `x-profile`: fully qualified profile id of the value at this node
- `x-super`: source hint for outbound values
  ({"source": "security-basic-user"} or {"value": <literal>})
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union
import logging

from .cursor import Cursor

logger = logging.getLogger(__name__)

PROFILE_KEY = "x-profile"
SOURCE_HINT_KEY = "x-super"


class NodeKind(str, Enum):
    """Shape of an annotated schema node"""
    OBJECT = "object"
    ARRAY = "array"
    SCALAR = "scalar"


class CredentialSource(str, Enum):
    """Credential fields an outbound value can be taken from"""
    BASIC_USER = "security-basic-user"
    BASIC_PASSWORD = "security-basic-password"
    APIKEY_KEY = "security-apikey-key"
    APIKEY_SECRET = "security-apikey-secret"

    @property
    def scheme(self) -> str:
        """Credential store scheme id (e.g. "basic")"""
        return self.value.split("-")[1]

    @property
    def field(self) -> str:
        """Field within the scheme entry (e.g. "user")"""
        return self.value.split("-")[2]


@dataclass(frozen=True)
class CredentialHint:
    """Value comes from the credential store"""
    source: CredentialSource


@dataclass(frozen=True)
class LiteralHint:
    """Value is fixed in the mapping"""
    value: Any


SourceHint = Union[CredentialHint, LiteralHint]


def parse_source_hint(raw: Any) -> Optional[SourceHint]:
    """Parse an `x-super` annotation, ignoring unknown shapes"""
    if not isinstance(raw, dict):
        return None

    if "source" in raw:
        try:
            return CredentialHint(CredentialSource(raw["source"]))
        except ValueError:
            logger.warning(f"Unknown credential source: {raw['source']}")
            return None

    if "value" in raw:
        return LiteralHint(raw["value"])

    return None


@dataclass
class SchemaNode:
    """Common part of every annotated schema node"""
    semantic_id: Optional[str] = None
    source_hint: Optional[SourceHint] = None

    kind = NodeKind.SCALAR


@dataclass
class ScalarNode(SchemaNode):
    kind = NodeKind.SCALAR


@dataclass
class ObjectNode(SchemaNode):
    """Object with ordered properties"""
    properties: Dict[str, SchemaNode] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)

    kind = NodeKind.OBJECT


@dataclass
class ArrayNode(SchemaNode):
    """Array; tuple-typed arrays keep only their first item schema"""
    items: Optional[SchemaNode] = None

    kind = NodeKind.ARRAY


def _infer_kind(raw: Dict[str, Any]) -> NodeKind:
    schema_type = raw.get("type")
    if schema_type == "object":
        return NodeKind.OBJECT
    if schema_type == "array":
        return NodeKind.ARRAY
    if schema_type is None:
        if "properties" in raw or "allOf" in raw:
            return NodeKind.OBJECT
        if "items" in raw:
            return NodeKind.ARRAY
    return NodeKind.SCALAR


def parse_schema(raw: Optional[Dict[str, Any]]) -> Optional[SchemaNode]:
    """
    Parse a dereferenced OpenAPI schema object into a SchemaNode tree

    Handles:
    - Objects (properties in declaration order, required list)
    - allOf composition (merged into one object)
    - Arrays with single or tuple `items`
    - `x-profile` / `x-super` annotations on any node

    Args:
        raw: Schema dictionary, may be None

    Returns:
        Root SchemaNode, or None when there is no schema
    """
    if raw is None:
        return None
    if isinstance(raw, SchemaNode):
        return raw
    if not isinstance(raw, dict):
        return ScalarNode()

    semantic_id = raw.get(PROFILE_KEY)
    source_hint = parse_source_hint(raw.get(SOURCE_HINT_KEY))
    kind = _infer_kind(raw)

    if kind == NodeKind.OBJECT:
        properties: Dict[str, SchemaNode] = {}
        required: List[str] = list(raw.get("required", []))

        for sub_schema in raw.get("allOf", []):
            sub_node = parse_schema(sub_schema)
            if isinstance(sub_node, ObjectNode):
                properties.update(sub_node.properties)
                required.extend(r for r in sub_node.required if r not in required)
                semantic_id = semantic_id or sub_node.semantic_id

        for prop_name, prop_schema in (raw.get("properties") or {}).items():
            properties[prop_name] = parse_schema(prop_schema)

        return ObjectNode(
            semantic_id=semantic_id,
            source_hint=source_hint,
            properties=properties,
            required=required,
        )

    if kind == NodeKind.ARRAY:
        items = raw.get("items")
        if isinstance(items, list):
            items = items[0] if items else None
        return ArrayNode(
            semantic_id=semantic_id,
            source_hint=source_hint,
            items=parse_schema(items) if items else None,
        )

    return ScalarNode(semantic_id=semantic_id, source_hint=source_hint)


@dataclass
class ParameterDecl:
    """Declared request slot: an OpenAPI parameter or a body property"""
    name: str
    location: str = "query"  # "query", "header", "path", "body"
    required: bool = False
    semantic_id: Optional[str] = None
    source_hint: Optional[SourceHint] = None

    @classmethod
    def from_openapi(cls, parameter: Dict[str, Any]) -> "ParameterDecl":
        """Create from an OpenAPI parameter object"""
        location = parameter.get("in", "query")
        return cls(
            name=parameter["name"],
            location=location,
            # Path parameters are always required in OpenAPI
            required=bool(parameter.get("required", location == "path")),
            semantic_id=parameter.get(PROFILE_KEY),
            source_hint=parse_source_hint(parameter.get(SOURCE_HINT_KEY)),
        )

    @classmethod
    def from_property(cls, name: str, node: SchemaNode, required: bool = False) -> "ParameterDecl":
        """Create from a direct property of a request body schema"""
        return cls(
            name=name,
            location="body",
            required=required,
            semantic_id=node.semantic_id,
            source_hint=node.source_hint,
        )


@dataclass
class MappingEntry:
    """Semantic id found in a schema, with its cursor and resolved value"""
    semantic_id: str
    cursor: Cursor
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "semantic_id": self.semantic_id,
            "cursor": self.cursor.to_strings(),
            "value": self.value,
        }
