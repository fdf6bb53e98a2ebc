"""
Specification Fetcher - retrieves the provider's profile-annotated OpenAPI document.

Features:
- Explicit mapping URL, or discovery over well-known locations
- In-memory cache with TTL
- Optional JSON file cache keyed by URL hash
- Dereferencing through SpecificationAnalyzer
"""

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from superdriver.errors import SpecificationUnavailable
from .spec_analyzer import SpecificationAnalyzer

logger = logging.getLogger(__name__)


class SpecificationFetcher:
    """
    Fetches and caches a provider's API specification

    Usage:
    ```python
    fetcher = SpecificationFetcher("https://weather.example.com")
    analyzer = fetcher.get_analyzer()
    operation = analyzer.find_operation(profile_id, "RetrieveAlert")
    ```
    """

    # Well-known specification locations, tried in order
    SPEC_ENDPOINTS = [
        "/oas",
        "/openapi.json",
        "/swagger.json",
    ]

    # Cache TTL in seconds (1 hour)
    CACHE_TTL = 3600

    def __init__(
        self,
        provider_url: str,
        mapping_url: Optional[str] = None,
        timeout: int = 30,
        cache_dir: Optional[Path] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize fetcher

        Args:
            provider_url: Provider URL (API root)
            mapping_url: Explicit specification URL, overrides discovery
            timeout: HTTP request timeout in seconds
            cache_dir: Directory for the file cache (disabled when None)
            session: requests Session to reuse
        """
        self.provider_url = provider_url.rstrip("/")
        self.mapping_url = mapping_url
        self.timeout = timeout
        self.cache_dir = Path(cache_dir) if cache_dir else None
        self.session = session or requests.Session()

        self._analyzer: Optional[SpecificationAnalyzer] = None
        self._fetched_at: Optional[float] = None

    @property
    def candidate_urls(self) -> List[str]:
        if self.mapping_url:
            return [self.mapping_url]
        return [f"{self.provider_url}{endpoint}" for endpoint in self.SPEC_ENDPOINTS]

    def get_analyzer(self, force_refresh: bool = False) -> SpecificationAnalyzer:
        """
        Get the analyzed specification, using the cache if still valid

        Raises:
            SpecificationUnavailable: If no candidate URL returns a specification
        """
        if not force_refresh and self._analyzer is not None and self._is_cache_valid():
            logger.debug("Using cached API specification")
            return self._analyzer

        spec = self.fetch_spec(force_refresh)
        self._analyzer = SpecificationAnalyzer(spec)
        self._fetched_at = time.time()
        return self._analyzer

    def fetch_spec(self, force_refresh: bool = False) -> Dict[str, Any]:
        """
        Fetch the raw specification document

        Args:
            force_refresh: Bypass the file cache

        Returns:
            OpenAPI document dictionary
        """
        if not force_refresh:
            cached_spec = self._try_load_file_cache()
            if cached_spec is not None:
                logger.info("Loaded API specification from file cache")
                return cached_spec

        errors = []
        for url in self.candidate_urls:
            logger.info(f"Fetching API specification from {url}")
            try:
                response = self.session.get(
                    url,
                    headers={"accept": "application/json"},
                    timeout=self.timeout,
                )
                response.raise_for_status()
                spec = response.json()
            except requests.exceptions.RequestException as e:
                logger.debug(f"Failed to fetch from {url}: {e}")
                errors.append(str(e))
                continue
            except ValueError as e:
                logger.warning(f"Invalid JSON from {url}: {e}")
                errors.append(f"invalid JSON: {e}")
                continue

            if not spec:
                errors.append("empty document")
                continue

            logger.info(f"Retrieved API specification from {url}")
            self._save_file_cache(spec)
            return spec

        raise SpecificationUnavailable(", ".join(self.candidate_urls), "; ".join(errors))

    def _try_load_file_cache(self) -> Optional[Dict[str, Any]]:
        """Load the cached specification if present and fresh"""
        if self.cache_dir is None:
            return None

        cache_file = self._get_cache_file_path()
        if not cache_file.exists():
            return None

        if time.time() - cache_file.stat().st_mtime > self.CACHE_TTL:
            logger.debug(f"Cache file expired: {cache_file}")
            return None

        try:
            with open(cache_file, "r") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Error loading cache file: {e}")
            return None

    def _save_file_cache(self, spec: Dict[str, Any]) -> None:
        if self.cache_dir is None:
            return

        cache_file = self._get_cache_file_path()
        try:
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(cache_file, "w") as f:
                json.dump(spec, f, indent=2)
            logger.debug(f"Saved API specification to cache file: {cache_file}")
        except OSError as e:
            logger.warning(f"Error saving cache file: {e}")

    def _get_cache_file_path(self) -> Path:
        """Cache file path based on the first candidate URL"""
        url_hash = hashlib.md5(self.candidate_urls[0].encode()).hexdigest()[:8]
        return self.cache_dir / f"spec_{url_hash}.json"

    def _is_cache_valid(self) -> bool:
        if self._fetched_at is None:
            return False
        return time.time() - self._fetched_at < self.CACHE_TTL
