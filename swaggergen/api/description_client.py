"""Field description lookup over HTTP."""
import logging
from typing import Optional

import requests

from swaggergen.descriptions.lookup import DescriptionLookup

logger = logging.getLogger(__name__)


class DescriptionClient(DescriptionLookup):
    """Client for a property description service."""

    def __init__(self, base_url: str, locale: str = "en_US", timeout: int = 10):
        """Initialize client."""
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.locale = locale
        self.timeout = timeout
        self.session = requests.Session()

    def _fetch(self, key: str) -> Optional[str]:
        """Get description from API. 404 means no description."""
        url = f"{self.base_url}/v1/properties/{key}/description"
        try:
            response = self.session.get(url, params={"locale": self.locale}, timeout=self.timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json().get("description")
        except requests.exceptions.RequestException as e:
            logger.debug(f"Failed to fetch description {key}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Invalid JSON for description {key}: {e}")
            return None

    def close(self) -> None:
        self.session.close()
