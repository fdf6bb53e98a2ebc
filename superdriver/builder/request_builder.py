"""
Request Builder - assembles an HTTP request for a profile operation

Integrates:
- ParameterResolver: value of every declared parameter and body property
- Placement: query, header or URL template substitution
- Request body: first supported media type, single-level properties
- Security: first security requirement of the operation
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from superdriver.errors import (
    MissingRequiredParameter,
    UnresolvedSecurityScheme,
    UnsupportedContentType,
)
from superdriver.mapping.qualified import qualify_inputs
from superdriver.schema.models import ObjectNode, ParameterDecl, parse_schema
from superdriver.security.credentials import CredentialStore
from .parameter_resolver import ABSENT, ParameterResolver

logger = logging.getLogger(__name__)

JSON = "application/json"
FORM = "application/x-www-form-urlencoded"
SUPPORTED_MEDIA_TYPES = (JSON, FORM)


@dataclass
class HttpRequest:
    """Request ready for the transport"""
    url: str
    method: str
    query: List[Tuple[str, Any]] = field(default_factory=list)
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[Dict[str, Any]] = None
    content_type: Optional[str] = None
    auth: Optional[Tuple[str, str]] = None

    def query_string(self) -> str:
        """Query rendered as name=value pairs, for logging"""
        return "&".join(f"{name}={value}" for name, value in self.query)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation (credentials masked)"""
        return {
            "url": self.url,
            "method": self.method,
            "query": [list(pair) for pair in self.query],
            "headers": dict(self.headers),
            "body": self.body,
            "content_type": self.content_type,
            "auth": "***" if self.auth else None,
        }


class RequestBuilder:
    """
    Builds HTTP requests from profile operations and caller input

    Usage:
    ```python
    builder = RequestBuilder()
    request = builder.build(
        operation,
        base_url="https://weather.example.com",
        profile_id="http://supermodel.io/weather/profile/WeatherAlerts",
        affordance_id="RetrieveAlert",
        parameters={"addressLocality": "Paris"},
    )
    # request.query == [("city", "Paris")]
    ```
    """

    def __init__(self, resolver: Optional[ParameterResolver] = None):
        self.resolver = resolver or ParameterResolver()

    def build(
        self,
        operation,
        base_url: str,
        profile_id: str,
        affordance_id: str,
        parameters: Optional[Dict[str, Any]] = None,
        credentials: Optional[CredentialStore] = None,
    ) -> HttpRequest:
        """
        Build the request for an operation

        Args:
            operation: ProfileOperation found in the API specification
            base_url: Provider URL (API root)
            profile_id: Profile identifier
            affordance_id: Affordance (operation) id within the profile
            parameters: Caller input keyed by unqualified parameter id
            credentials: Credential store for credential-derived values and security

        Returns:
            HttpRequest

        Raises:
            MissingRequiredParameter: A required slot resolved to nothing
            UnsupportedContentType: Request body declares an unsupported media type
            UnresolvedSecurityScheme: Security requirement cannot be satisfied
        """
        inputs = qualify_inputs(profile_id, affordance_id, parameters)
        logger.debug(f"Fully qualified input parameters: {inputs}")

        request = HttpRequest(
            url=f"{base_url.rstrip('/')}{operation.path}",
            method=operation.method.lower(),
        )

        for decl in operation.parameters:
            value = self._resolve(decl, inputs, credentials)
            if value is ABSENT:
                continue
            self._place(request, decl, value)

        if operation.request_body:
            self._build_body(request, operation.request_body, inputs, credentials)

        self._apply_security(request, operation, credentials)

        # Always accept JSON
        request.headers["accept"] = JSON

        return request

    def _resolve(
        self,
        decl: ParameterDecl,
        inputs: Dict[str, Any],
        credentials: Optional[CredentialStore],
    ) -> Any:
        value = self.resolver.resolve(decl, inputs, credentials)
        if value is ABSENT and decl.required:
            raise MissingRequiredParameter(decl.name, decl.semantic_id)
        return value

    @staticmethod
    def _place(request: HttpRequest, decl: ParameterDecl, value: Any) -> None:
        if decl.location == "query":
            request.query.append((decl.name, value))
        elif decl.location == "header":
            request.headers[decl.name] = str(value)
        else:
            request.url = request.url.replace(
                "{" + decl.name + "}", quote(str(value), safe="")
            )

    def _build_body(
        self,
        request: HttpRequest,
        request_body: Dict[str, Any],
        inputs: Dict[str, Any],
        credentials: Optional[CredentialStore],
    ) -> None:
        content = request_body.get("content") or {}

        # Every declared media type must be supported, the first one is used
        for media_type in content:
            logger.debug(f"Request media type: '{media_type}'")
            if media_type not in SUPPORTED_MEDIA_TYPES:
                raise UnsupportedContentType(media_type)

        if not content:
            return

        media_type = next(iter(content))
        schema = parse_schema((content[media_type] or {}).get("schema"))

        body = {}
        # Single level: direct properties of the body schema only
        if isinstance(schema, ObjectNode):
            for name, node in schema.properties.items():
                decl = ParameterDecl.from_property(name, node, required=name in schema.required)
                value = self._resolve(decl, inputs, credentials)
                if value is not ABSENT:
                    body[name] = value

        request.headers["content-type"] = media_type
        request.content_type = media_type
        request.body = body

    @staticmethod
    def _apply_security(
        request: HttpRequest,
        operation,
        credentials: Optional[CredentialStore],
    ) -> None:
        if not operation.security:
            return

        # First requirement wins; its schemes must all be satisfied
        requirement = operation.security[0]
        credentials = credentials or CredentialStore()

        for scheme_id in requirement:
            scheme = operation.security_schemes.get(scheme_id)
            if scheme is None:
                raise UnresolvedSecurityScheme(scheme_id, "not declared in components.securitySchemes")

            scheme_type = scheme.get("type")

            if scheme_type == "http" and str(scheme.get("scheme", "")).lower() == "basic":
                user = credentials.get(CredentialStore.BASIC, "user")
                if user is None:
                    raise UnresolvedSecurityScheme(scheme_id, "no basic credentials")
                request.auth = (user, credentials.get(CredentialStore.BASIC, "password") or "")

            elif scheme_type == "apiKey":
                key = credentials.get(CredentialStore.APIKEY, "key")
                if key is None:
                    raise UnresolvedSecurityScheme(scheme_id, "no apikey credentials")
                location = scheme.get("in")
                if location == "header":
                    request.headers[scheme["name"]] = str(key)
                elif location == "query":
                    request.query.append((scheme["name"], key))
                else:
                    raise UnresolvedSecurityScheme(scheme_id, f"api key in '{location}' not supported")

            else:
                raise UnresolvedSecurityScheme(scheme_id, f"unsupported scheme type '{scheme_type}'")

            logger.debug(f"Applied security scheme '{scheme_id}'")
