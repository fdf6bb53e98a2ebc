"""Errors raised while consuming a profile-annotated API."""
from typing import Optional


class SuperdriverError(Exception):
    """Base class for all superdriver errors."""


class MissingRequiredParameter(SuperdriverError):
    """A required parameter or body property could not be resolved."""

    def __init__(self, name: str, semantic_id: Optional[str] = None):
        self.name = name
        self.semantic_id = semantic_id
        super().__init__(
            f"Missing required parameter '{name}' (profile id: {semantic_id or 'none'})"
        )


class UnsupportedContentType(SuperdriverError):
    """Request body declares a media type the builder cannot produce."""

    def __init__(self, media_type: str):
        self.media_type = media_type
        super().__init__(f"Request media type '{media_type}' is not supported")


class UnresolvedSecurityScheme(SuperdriverError):
    """Security requirement that cannot be applied to the request."""

    def __init__(self, scheme_id: str, reason: str):
        self.scheme_id = scheme_id
        self.reason = reason
        super().__init__(f"Security scheme '{scheme_id}' unresolved: {reason}")


class SpecificationUnavailable(SuperdriverError):
    """API specification could not be fetched."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        message = f"No API specification found at {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class OperationNotFound(SuperdriverError):
    """No operation in the API specification is annotated with the affordance."""

    def __init__(self, affordance_id: str):
        self.affordance_id = affordance_id
        super().__init__(f"No operation mapped to affordance '{affordance_id}'")


class TransportError(SuperdriverError):
    """HTTP call failed."""

    def __init__(self, method: str, url: str, reason: str = ""):
        self.method = method
        self.url = url
        self.reason = reason
        super().__init__(f"{method.upper()} {url} failed: {reason}")


class NoServicesFound(SuperdriverError):
    """Register has no service conforming to the profile."""

    def __init__(self, profile_id: str):
        self.profile_id = profile_id
        super().__init__(f"No service for profile '{profile_id}' found.")
