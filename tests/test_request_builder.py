"""
Unit tests for the Request Builder Module

Tests:
- ParameterResolver: source priority policy
- RequestBuilder: placement, omission, required parameters
- Request bodies: media type policy, single-level properties
- Security schemes: basic, apiKey, unresolved requirements
"""

import pytest

from superdriver.builder.parameter_resolver import ABSENT, ParameterResolver
from superdriver.builder.request_builder import RequestBuilder
from superdriver.errors import (
    MissingRequiredParameter,
    UnresolvedSecurityScheme,
    UnsupportedContentType,
)
from superdriver.introspection.spec_analyzer import ProfileOperation
from superdriver.schema.models import CredentialHint, CredentialSource, LiteralHint, ParameterDecl
from superdriver.security.credentials import CredentialStore

PROFILE = "http://supermodel.io/weather/profile/WeatherAlerts"
AFFORDANCE = "RetrieveAlert"
BASE_URL = "https://weather.example.com"


def pid(name: str) -> str:
    return f"{PROFILE}#{AFFORDANCE}/{name}"


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def credentials():
    store = CredentialStore()
    store.set_basic("alice", "s3cret")
    store.set_apikey("KEY-123", "SECRET-456")
    return store


@pytest.fixture
def builder():
    return RequestBuilder()


def make_operation(parameters=None, request_body=None, security=None, security_schemes=None,
                   path="/alerts", method="get"):
    return ProfileOperation(
        path=path,
        method=method,
        affordance_id=f"{PROFILE}#{AFFORDANCE}",
        parameters=[ParameterDecl.from_openapi(p) for p in (parameters or [])],
        request_body=request_body,
        security=security,
        security_schemes=security_schemes or {},
    )


def build(builder, operation, parameters=None, credentials=None):
    return builder.build(
        operation,
        base_url=BASE_URL,
        profile_id=PROFILE,
        affordance_id=AFFORDANCE,
        parameters=parameters,
        credentials=credentials,
    )


# ============================================================================
# TEST: ParameterResolver
# ============================================================================


class TestParameterResolver:
    """Tests for the source priority policy"""

    def test_explicit_input(self):
        decl = ParameterDecl("city", semantic_id=pid("addressLocality"))
        assert ParameterResolver().resolve(decl, {pid("addressLocality"): "Paris"}) == "Paris"

    def test_explicit_input_wins_over_credential(self, credentials):
        decl = ParameterDecl(
            "user",
            semantic_id=pid("user"),
            source_hint=CredentialHint(CredentialSource.BASIC_USER),
        )
        assert ParameterResolver().resolve(decl, {pid("user"): "bob"}, credentials) == "bob"

    def test_explicit_none_input_is_used(self):
        decl = ParameterDecl("city", semantic_id=pid("city"), source_hint=LiteralHint("Paris"))
        assert ParameterResolver().resolve(decl, {pid("city"): None}) is None

    @pytest.mark.parametrize("source, expected", [
        (CredentialSource.BASIC_USER, "alice"),
        (CredentialSource.BASIC_PASSWORD, "s3cret"),
        (CredentialSource.APIKEY_KEY, "KEY-123"),
        (CredentialSource.APIKEY_SECRET, "SECRET-456"),
    ])
    def test_credential_derived(self, credentials, source, expected):
        decl = ParameterDecl("x", source_hint=CredentialHint(source))
        assert ParameterResolver().resolve(decl, {}, credentials) == expected

    def test_credential_scheme_missing_is_absent(self):
        decl = ParameterDecl("x", source_hint=CredentialHint(CredentialSource.APIKEY_KEY))
        assert ParameterResolver().resolve(decl, {}, CredentialStore()) is ABSENT
        assert ParameterResolver().resolve(decl, {}, None) is ABSENT

    def test_literal(self):
        decl = ParameterDecl("format", source_hint=LiteralHint("json"))
        assert ParameterResolver().resolve(decl, {}) == "json"

    def test_unresolved(self):
        decl = ParameterDecl("city", semantic_id=pid("addressLocality"))
        assert ParameterResolver().resolve(decl, {pid("other"): 1}) is ABSENT
        assert not ABSENT


# ============================================================================
# TEST: RequestBuilder parameters
# ============================================================================


class TestRequestBuilderParameters:
    """Tests for parameter placement"""

    def test_query_header_and_path_placement(self, builder):
        operation = make_operation(
            path="/regions/{region}/alerts",
            parameters=[
                {"name": "city", "in": "query", "x-profile": pid("addressLocality")},
                {"name": "X-Lang", "in": "header", "x-profile": pid("language")},
                {"name": "region", "in": "path", "x-profile": pid("region")},
            ],
        )

        request = build(builder, operation, {
            "addressLocality": "Paris",
            "language": "fr",
            "region": "idf",
        })

        assert request.url == f"{BASE_URL}/regions/idf/alerts"
        assert request.method == "get"
        assert request.query == [("city", "Paris")]
        assert request.query_string() == "city=Paris"
        assert request.headers["X-Lang"] == "fr"
        assert request.headers["accept"] == "application/json"
        assert request.body is None

    def test_path_values_are_percent_encoded(self, builder):
        operation = make_operation(
            path="/cities/{city}",
            parameters=[{"name": "city", "in": "path", "x-profile": pid("city")}],
        )

        request = build(builder, operation, {"city": "Saint Denis/Nord"})

        assert request.url == f"{BASE_URL}/cities/Saint%20Denis%2FNord"

    def test_optional_unresolved_parameter_omitted(self, builder):
        operation = make_operation(parameters=[
            {"name": "city", "in": "query", "x-profile": pid("addressLocality")},
            {"name": "lang", "in": "query", "x-profile": pid("language")},
            {"name": "X-Trace", "in": "header", "x-profile": pid("trace")},
        ])

        request = build(builder, operation, {"addressLocality": "Paris"})

        assert request.query == [("city", "Paris")]
        assert "X-Trace" not in request.headers

    def test_required_unresolved_parameter_raises(self, builder):
        operation = make_operation(parameters=[
            {"name": "city", "in": "query", "required": True, "x-profile": pid("addressLocality")},
        ])

        with pytest.raises(MissingRequiredParameter) as exc_info:
            build(builder, operation, {})

        assert exc_info.value.name == "city"
        assert exc_info.value.semantic_id == pid("addressLocality")

    def test_credential_and_literal_parameters(self, builder, credentials):
        operation = make_operation(parameters=[
            {"name": "appid", "in": "query", "required": True, "x-super": {"source": "security-apikey-key"}},
            {"name": "units", "in": "query", "x-super": {"value": "metric"}},
        ])

        request = build(builder, operation, {}, credentials)

        assert request.query == [("appid", "KEY-123"), ("units", "metric")]

    def test_unqualified_names_of_other_affordances_ignored(self, builder):
        operation = make_operation(parameters=[
            {"name": "city", "in": "query", "x-profile": f"{PROFILE}#OtherAffordance/addressLocality"},
        ])

        request = build(builder, operation, {"addressLocality": "Paris"})

        assert request.query == []


# ============================================================================
# TEST: RequestBuilder bodies
# ============================================================================


class TestRequestBuilderBody:
    """Tests for request body construction"""

    def body_schema(self):
        return {
            "type": "object",
            "required": ["title"],
            "properties": {
                "title": {"type": "string", "x-profile": pid("title")},
                "note": {"type": "string", "x-profile": pid("note")},
                "source": {"type": "string", "x-super": {"value": "superdriver"}},
                "details": {
                    "type": "object",
                    "properties": {"deep": {"type": "string", "x-profile": pid("deep")}},
                },
            },
        }

    def test_json_body_single_level(self, builder):
        operation = make_operation(method="post", request_body={
            "content": {"application/json": {"schema": self.body_schema()}},
        })

        request = build(builder, operation, {"title": "Storm", "deep": "ignored"})

        assert request.method == "post"
        assert request.content_type == "application/json"
        assert request.headers["content-type"] == "application/json"
        assert request.body == {"title": "Storm", "source": "superdriver"}

    def test_required_body_property_raises(self, builder):
        operation = make_operation(method="post", request_body={
            "content": {"application/json": {"schema": self.body_schema()}},
        })

        with pytest.raises(MissingRequiredParameter) as exc_info:
            build(builder, operation, {"note": "n"})

        assert exc_info.value.name == "title"

    def test_first_supported_media_type_selected(self, builder):
        operation = make_operation(method="post", request_body={
            "content": {
                "application/x-www-form-urlencoded": {"schema": self.body_schema()},
                "application/json": {"schema": self.body_schema()},
            },
        })

        request = build(builder, operation, {"title": "Storm"})

        assert request.content_type == "application/x-www-form-urlencoded"

    def test_unsupported_media_type_rejected(self, builder):
        operation = make_operation(method="post", request_body={
            "content": {"application/xml": {"schema": self.body_schema()}},
        })

        with pytest.raises(UnsupportedContentType) as exc_info:
            build(builder, operation, {"title": "Storm"})

        assert exc_info.value.media_type == "application/xml"

    def test_unsupported_media_type_after_supported_rejected(self, builder):
        """Test every declared media type is checked in order"""
        operation = make_operation(method="post", request_body={
            "content": {
                "application/json": {"schema": self.body_schema()},
                "text/plain": {"schema": {"type": "string"}},
            },
        })

        with pytest.raises(UnsupportedContentType):
            build(builder, operation, {"title": "Storm"})

    def test_body_without_schema(self, builder):
        operation = make_operation(method="post", request_body={"content": {"application/json": {}}})

        request = build(builder, operation, {})

        assert request.body == {}


# ============================================================================
# TEST: Security schemes
# ============================================================================


class TestRequestBuilderSecurity:
    """Tests for security requirements"""

    SCHEMES = {
        "basicAuth": {"type": "http", "scheme": "basic"},
        "headerKey": {"type": "apiKey", "in": "header", "name": "X-API-Key"},
        "queryKey": {"type": "apiKey", "in": "query", "name": "api_key"},
        "cookieKey": {"type": "apiKey", "in": "cookie", "name": "session"},
        "oauth": {"type": "oauth2", "flows": {}},
    }

    def test_basic(self, builder, credentials):
        operation = make_operation(security=[{"basicAuth": []}], security_schemes=self.SCHEMES)

        request = build(builder, operation, {}, credentials)

        assert request.auth == ("alice", "s3cret")
        assert request.to_dict()["auth"] == "***"

    def test_api_key_header_and_query(self, builder, credentials):
        operation = make_operation(
            security=[{"headerKey": [], "queryKey": []}],
            security_schemes=self.SCHEMES,
        )

        request = build(builder, operation, {}, credentials)

        assert request.headers["X-API-Key"] == "KEY-123"
        assert ("api_key", "KEY-123") in request.query

    def test_first_requirement_wins(self, builder, credentials):
        operation = make_operation(
            security=[{"headerKey": []}, {"basicAuth": []}],
            security_schemes=self.SCHEMES,
        )

        request = build(builder, operation, {}, credentials)

        assert request.headers["X-API-Key"] == "KEY-123"
        assert request.auth is None

    def test_undeclared_scheme(self, builder, credentials):
        operation = make_operation(security=[{"missing": []}], security_schemes=self.SCHEMES)

        with pytest.raises(UnresolvedSecurityScheme) as exc_info:
            build(builder, operation, {}, credentials)

        assert exc_info.value.scheme_id == "missing"

    @pytest.mark.parametrize("scheme_id", ["oauth", "cookieKey"])
    def test_unsupported_scheme(self, builder, credentials, scheme_id):
        operation = make_operation(security=[{scheme_id: []}], security_schemes=self.SCHEMES)

        with pytest.raises(UnresolvedSecurityScheme):
            build(builder, operation, {}, credentials)

    def test_missing_credentials(self, builder):
        operation = make_operation(security=[{"basicAuth": []}], security_schemes=self.SCHEMES)

        with pytest.raises(UnresolvedSecurityScheme):
            build(builder, operation, {}, CredentialStore())

    def test_anonymous_requirement(self, builder):
        operation = make_operation(security=[{}], security_schemes=self.SCHEMES)

        request = build(builder, operation, {})

        assert request.auth is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
