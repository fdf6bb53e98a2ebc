"""
Specification Analyzer - finds profile operations in an OpenAPI document.

Supports:
- Local $ref dereferencing (#/components/...)
- Sibling annotations next to $ref (x-profile, x-super)
- Circular reference detection
- Operation lookup by x-profile affordance annotation
- Path-level and operation-level parameters
"""

from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, List, Optional, Set
import logging

from superdriver.mapping.qualified import qualify
from superdriver.schema.models import PROFILE_KEY, ParameterDecl, SchemaNode, parse_schema

logger = logging.getLogger(__name__)

HTTP_METHODS = ["get", "put", "post", "delete", "options", "head", "patch", "trace"]


@dataclass
class ProfileOperation:
    """API operation mapped to a profile affordance"""
    path: str
    method: str
    affordance_id: str = ""
    parameters: List[ParameterDecl] = dataclass_field(default_factory=list)
    request_body: Optional[Dict[str, Any]] = None
    response_schema: Optional[SchemaNode] = None
    security: Optional[List[Dict[str, List[str]]]] = None
    security_schemes: Dict[str, Dict[str, Any]] = dataclass_field(default_factory=dict)
    details: Dict[str, Any] = dataclass_field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "path": self.path,
            "method": self.method,
            "affordance_id": self.affordance_id,
            "parameters": [p.name for p in self.parameters],
            "has_request_body": self.request_body is not None,
            "has_response_mapping": self.response_schema is not None,
            "security": self.security,
        }


class SpecificationAnalyzer:
    """Analyzes a profile-annotated OpenAPI specification"""

    def __init__(self, spec: Dict[str, Any]):
        """
        Initialize analyzer

        Args:
            spec: OpenAPI 3 document (parsed from JSON)
        """
        self.raw_spec = spec
        self._ref_cache: Dict[str, Any] = {}
        self._processing_refs: Set[str] = set()  # Prevent circular refs
        self.spec = self.dereference(spec)

    @property
    def security_schemes(self) -> Dict[str, Dict[str, Any]]:
        return self.spec.get("components", {}).get("securitySchemes", {})

    def dereference(self, obj: Any) -> Any:
        """
        Return a copy of `obj` with local $refs replaced by their targets

        Keys next to a $ref (e.g. x-profile) are kept and override the target.
        Circular references are left as $ref objects.
        """
        if isinstance(obj, list):
            return [self.dereference(item) for item in obj]
        if not isinstance(obj, dict):
            return obj

        if isinstance(obj.get("$ref"), str):
            ref = obj["$ref"]
            target = self._resolve_ref(ref)
            if target is None:
                return {k: self.dereference(v) for k, v in obj.items()}

            siblings = {k: self.dereference(v) for k, v in obj.items() if k != "$ref"}
            if not siblings:
                return target
            merged = dict(target) if isinstance(target, dict) else {}
            merged.update(siblings)
            return merged

        return {k: self.dereference(v) for k, v in obj.items()}

    def _resolve_ref(self, ref: str) -> Optional[Any]:
        """
        Resolve a local $ref (e.g. "#/components/schemas/Product")

        Returns:
            Dereferenced target, or None for external, unknown or circular refs
        """
        if ref in self._ref_cache:
            return self._ref_cache[ref]

        if ref in self._processing_refs:
            logger.warning(f"Circular reference detected: {ref}")
            return None

        if not ref.startswith("#/"):
            logger.warning(f"External reference not supported: {ref}")
            return None

        obj: Any = self.raw_spec
        for token in ref[2:].split("/"):
            token = token.replace("~1", "/").replace("~0", "~")
            if isinstance(obj, dict) and token in obj:
                obj = obj[token]
            else:
                logger.warning(f"Unresolvable reference: {ref}")
                return None

        self._processing_refs.add(ref)
        try:
            resolved = self.dereference(obj)
        finally:
            self._processing_refs.discard(ref)

        self._ref_cache[ref] = resolved
        return resolved

    def iter_operations(self):
        """Yield (path, method, path_item, operation) for every operation"""
        for path, path_item in (self.spec.get("paths") or {}).items():
            if not isinstance(path_item, dict):
                continue
            for method, operation in path_item.items():
                if method.lower() in HTTP_METHODS and isinstance(operation, dict):
                    yield path, method.lower(), path_item, operation

    def list_affordances(self) -> List[Dict[str, str]]:
        """List operations carrying an affordance annotation"""
        return [
            {"affordance": operation[PROFILE_KEY], "method": method.upper(), "path": path}
            for path, method, _, operation in self.iter_operations()
            if operation.get(PROFILE_KEY)
        ]

    def find_operation(self, profile_id: str, affordance_id: str) -> Optional[ProfileOperation]:
        """
        Find the operation annotated with a profile affordance

        Args:
            profile_id: Profile identifier
            affordance_id: Affordance id within the profile

        Returns:
            ProfileOperation, or None if no operation carries the annotation
        """
        full_affordance_id = qualify(profile_id, affordance_id)

        for path, method, path_item, operation in self.iter_operations():
            if operation.get(PROFILE_KEY) != full_affordance_id:
                continue

            logger.debug(f"Found operation mapping: {method.upper()} {path}")
            response_schema = self._response_schema(operation)
            logger.debug(f"  operation response schema: {'yes' if response_schema else 'no'}")

            security = operation.get("security")
            if security is None:
                security = self.spec.get("security")

            return ProfileOperation(
                path=path,
                method=method,
                affordance_id=full_affordance_id,
                parameters=self._parameters(path_item, operation),
                request_body=operation.get("requestBody"),
                response_schema=response_schema,
                security=security,
                security_schemes=self.security_schemes,
                details=operation,
            )

        return None

    @staticmethod
    def _parameters(path_item: Dict[str, Any], operation: Dict[str, Any]) -> List[ParameterDecl]:
        """Path-level parameters overridden by operation-level ones (same name and location)"""
        merged: Dict[tuple, Dict[str, Any]] = {}
        for parameter in (path_item.get("parameters") or []) + (operation.get("parameters") or []):
            if isinstance(parameter, dict) and "name" in parameter:
                merged[(parameter["name"], parameter.get("in"))] = parameter
        return [ParameterDecl.from_openapi(p) for p in merged.values()]

    @staticmethod
    def _response_schema(operation: Dict[str, Any]) -> Optional[SchemaNode]:
        """Schema of the first 2xx JSON response"""
        for status_code, response in (operation.get("responses") or {}).items():
            if not str(status_code).startswith("2") or not isinstance(response, dict):
                continue
            schema = (response.get("content") or {}).get("application/json", {}).get("schema")
            if schema:
                return parse_schema(schema)
        return None
