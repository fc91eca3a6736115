"""Best-effort loading of company details and the logo before a render."""

import asyncio
import http.client
import json
import logging
import urllib.parse
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from .company import CompanyDetails, DefaultsProvider

logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT = 10.0
IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".gif", ".bmp"}


@dataclass
class CompanyAssets:
    """Everything the header needs from the outside world."""
    company: CompanyDetails
    logo: Optional[bytes] = None


class CompanySource:
    """
    Fetches company details from the API and logo bytes from a URL or path.

    Failures never propagate: they are logged and the defaults (or no logo)
    are used instead. There are no retries beyond the single attempt.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        defaults: Optional[DefaultsProvider] = None,
        timeout: float = DEFAULT_TIMEOUT,
        opener: Optional[Callable[..., Any]] = None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.defaults = defaults or DefaultsProvider()
        self.timeout = timeout
        self.opener = opener or urllib.request.urlopen

    async def fetch_company(self) -> CompanyDetails:
        """GET <base_url>/company and merge the payload over the defaults."""
        if not self.base_url:
            return self.defaults.company()
        try:
            payload = await asyncio.to_thread(self._get_json, f"{self.base_url}/company")
        except (OSError, ValueError, http.client.HTTPException) as e:
            logger.warning("Could not fetch company details, using defaults: %s", e)
            return self.defaults.company()

        if not isinstance(payload, dict) or not payload.get("success") or not payload.get("data"):
            logger.warning("No company data in response, using defaults")
            return self.defaults.company()
        if not isinstance(payload["data"], Mapping):
            logger.warning("Company data is a %s, not an object; using defaults",
                           type(payload["data"]).__name__)
            return self.defaults.company()
        return self.defaults.merge(payload["data"])

    async def fetch_logo(self, location: Optional[str]) -> Optional[bytes]:
        """Load logo bytes from an http(s) URL, a file: URL or a local path."""
        if not location:
            return None
        try:
            return await asyncio.to_thread(self._read_image, location)
        except (OSError, ValueError, http.client.HTTPException) as e:
            logger.warning("Could not load logo %s: %s", location, e)
            return None

    async def load_assets(self, logo_location: Optional[str] = None) -> CompanyAssets:
        """
        Fetch company details and logo.

        With an explicit logo location both fetches run concurrently;
        otherwise the logo comes from the company record or the fallback.
        """
        if logo_location:
            company, logo = await asyncio.gather(
                self.fetch_company(),
                self.fetch_logo(logo_location),
            )
            return CompanyAssets(company=company, logo=logo)

        company = await self.fetch_company()
        logo = await self.fetch_logo(company.logo or self.defaults.fallback_logo)
        if logo is None and company.logo and self.defaults.fallback_logo:
            logo = await self.fetch_logo(self.defaults.fallback_logo)
        return CompanyAssets(company=company, logo=logo)

    def _get_json(self, url: str) -> Any:
        request = urllib.request.Request(url, headers={"Accept": "application/json"})
        with self.opener(request, timeout=self.timeout) as response:
            return json.loads(response.read().decode("utf-8"))

    def _read_image(self, location: str) -> bytes:
        scheme = urllib.parse.urlparse(location).scheme.lower()
        if scheme in ("http", "https"):
            with self.opener(location, timeout=self.timeout) as response:
                content_type = response.headers.get("Content-Type", "") if response.headers else ""
                if content_type and not content_type.startswith("image/"):
                    raise ValueError(f"not an image (Content-Type: {content_type})")
                return response.read()

        if scheme == "file":
            path = Path(urllib.request.url2pathname(urllib.parse.urlparse(location).path))
        else:
            path = Path(location)
        if path.suffix.lower() not in IMAGE_SUFFIXES:
            raise ValueError(f"unsupported image type: {path.suffix or 'none'}")
        return path.read_bytes()
