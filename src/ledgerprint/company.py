"""Company (issuer) details and the defaults substituted for missing fields."""

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass
class CompanyDetails:
    """Issuer details printed in the document header."""
    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    logo: Optional[str] = None  # URL or path
    country: str = ""
    region: str = ""
    tin: str = ""
    vrn: str = ""

    @property
    def location(self) -> str:
        """Region and country joined with a comma, empty parts dropped."""
        return ", ".join(part for part in (self.region, self.country) if part)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


FIELD_NAMES = tuple(f.name for f in fields(CompanyDetails))


@dataclass
class DefaultsProvider:
    """
    Default strings used when the company provider omits a field or fails.

    Passed to the renderer and the company source at construction, so tests
    and deployments can swap the values without touching module state.
    """
    name: str = "Your Company"
    address: str = "123 Business Street, City, Country"
    phone: str = "+1 (555) 123-4567"
    email: str = "info@example.com"
    website: str = "www.example.com"
    country: str = "Tanzania"
    region: str = "Dar es Salaam"
    tin: str = ""
    vrn: str = ""
    fallback_logo: Optional[str] = None
    generated_by: str = "System Administrator"

    def company(self) -> CompanyDetails:
        """Company details built entirely from defaults."""
        return CompanyDetails(
            name=self.name,
            address=self.address,
            phone=self.phone,
            email=self.email,
            website=self.website,
            logo=self.fallback_logo,
            country=self.country,
            region=self.region,
            tin=self.tin,
            vrn=self.vrn,
        )

    def merge(self, raw: Optional[Mapping[str, Any]]) -> CompanyDetails:
        """Fill absent or empty fields of a provider payload from the defaults."""
        details = self.company()
        if not raw:
            return details

        for name in FIELD_NAMES:
            value = raw.get(name)
            if value is None:
                continue
            if isinstance(value, str):
                value = " ".join(value.split())  # Collapse whitespace
                if not value:
                    continue
            setattr(details, name, str(value))
        return details

    def coerce(self, company: Any) -> CompanyDetails:
        """Accept CompanyDetails, a mapping or None."""
        if isinstance(company, CompanyDetails):
            return self.merge(company.to_dict())
        if company is not None and not isinstance(company, Mapping):
            logger.warning("Ignoring company details of type %s", type(company).__name__)
            company = None
        return self.merge(company)
