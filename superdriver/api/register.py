"""Service register client."""
import logging
from typing import Any, Dict, List, Optional

import requests

from superdriver.config import RegistryConfig
from superdriver.errors import NoServicesFound, TransportError

logger = logging.getLogger(__name__)


class Register:
    """Proxy of a service register."""

    def __init__(self, config: RegistryConfig, session: Optional[requests.Session] = None):
        """Initialize register proxy."""
        self.config = config
        self.session = session or requests.Session()

    def find_services(self, profile_id: str) -> List[Dict[str, Any]]:
        """
        Find services in the register that conform to a profile.

        Args:
            profile_id: Id of the profile the matching service has to support

        Returns:
            Service descriptions (e.g. {"serviceURL": ..., "mappingURL": ...})

        Raises:
            NoServicesFound: The register knows no such service
        """
        url = f"{self.config.url.rstrip('/')}/search/"
        try:
            response = self.session.get(
                url,
                params={"semanticProfile": profile_id},
                headers={"accept": "application/json"},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.RequestException as e:
            raise TransportError("get", url, str(e)) from e
        except ValueError as e:
            raise TransportError("get", url, f"invalid JSON response: {e}") from e

        services = body.get("disco") if isinstance(body, dict) else None
        if not services:
            raise NoServicesFound(profile_id)

        logger.info(f"Found {len(services)} services for profile {profile_id}")
        return services
