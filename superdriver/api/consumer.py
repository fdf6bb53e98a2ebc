"""
Profile consumer - generic client driven by a profile and an annotated API description.

The consumer has no notion of any domain. It relies on the profile
annotations of the provider's OpenAPI specification to figure out which
HTTP call to make and how to read the response.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from superdriver.builder.request_builder import HttpRequest, RequestBuilder
from superdriver.config import ConsumerConfig
from superdriver.errors import OperationNotFound
from superdriver.introspection.spec_analyzer import ProfileOperation
from superdriver.introspection.spec_fetcher import SpecificationFetcher
from superdriver.mapping.normalizer import ResponseNormalizer
from superdriver.security.credentials import CredentialStore
from .transport import HttpTransport

logger = logging.getLogger(__name__)


class Consumer:
    """
    Invokes profile affordances on a provider

    Usage:
    ```python
    consumer = Consumer(ConsumerConfig(
        provider_url="https://weather.example.com",
        profile_id="http://supermodel.io/weather/profile/WeatherAlerts",
    ))
    result = consumer.perform(
        "RetrieveAlert",
        parameters={"addressLocality": "Paris"},
        response=["ActualWeatherAlert/title", "ActualWeatherAlert/description"],
    )
    ```
    """

    def __init__(
        self,
        config: ConsumerConfig,
        credentials: Optional[CredentialStore] = None,
        transport: Optional[HttpTransport] = None,
        fetcher: Optional[SpecificationFetcher] = None,
    ):
        """
        Initialize consumer

        Args:
            config: Provider URL, profile id and fetch options
            credentials: Credential store (optional)
            transport: Transport for the operation call
            fetcher: Specification fetcher (built from config if omitted)
        """
        self.config = config
        self.credentials = credentials or CredentialStore()
        self.transport = transport or HttpTransport(timeout=config.timeout)
        self.fetcher = fetcher or SpecificationFetcher(
            config.provider_url,
            mapping_url=config.mapping_url,
            timeout=config.timeout,
            cache_dir=Path(config.cache_dir) if config.cache_dir else None,
        )
        self.request_builder = RequestBuilder()
        self.normalizer = ResponseNormalizer()

    @property
    def profile_id(self) -> str:
        return self.config.profile_id

    def perform(
        self,
        operation: str,
        parameters: Optional[Dict[str, Any]] = None,
        response: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """
        Invoke a profile affordance

        Args:
            operation: Affordance id as defined in the profile
            parameters: Input parameters keyed by profile parameter id
            response: Desired response properties; None returns all mapped ones

        Returns:
            {property: value} in profile terms

        Raises:
            SpecificationUnavailable, OperationNotFound, MissingRequiredParameter,
            UnsupportedContentType, UnresolvedSecurityScheme, TransportError
        """
        logger.info(f"Performing '{operation}' for {self.config.provider_url} service")
        logger.debug(f"  parameters: {parameters}")
        logger.debug(f"  expected response: {response}")

        profile_operation = self.find_operation(operation)
        http_request = self.build_request(operation, profile_operation, parameters)
        http_response = self.transport.execute(http_request)

        result = self.normalizer.normalize(
            profile_operation.response_schema,
            http_response,
            response,
            self.profile_id,
        )
        logger.debug(f"Result: {result}")
        return result

    def find_operation(self, operation: str) -> ProfileOperation:
        """Find the API operation mapped to an affordance"""
        analyzer = self.fetcher.get_analyzer()
        profile_operation = analyzer.find_operation(self.profile_id, operation)
        if profile_operation is None:
            raise OperationNotFound(f"{self.profile_id}#{operation}")
        return profile_operation

    def build_request(
        self,
        operation: str,
        profile_operation: ProfileOperation,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> HttpRequest:
        """Build the HTTP request without executing it"""
        return self.request_builder.build(
            profile_operation,
            base_url=self.config.provider_url,
            profile_id=self.profile_id,
            affordance_id=operation,
            parameters=parameters,
            credentials=self.credentials,
        )

    def list_affordances(self) -> List[Dict[str, str]]:
        """List annotated operations of the provider"""
        return self.fetcher.get_analyzer().list_affordances()
