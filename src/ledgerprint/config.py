"""Configuration dataclasses and YAML loading for the renderer."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from reportlab.lib.units import mm

from .company import DefaultsProvider
from .formatters import PLACEHOLDER
from .layout_engine import PAGE_SIZES, PageLayout
from .styles import DOCUMENT_STYLES, DocumentStyle, get_style


EMPTY_DATA_MESSAGE = "No data available for the selected criteria"


@dataclass
class RenderConfig:
    """Main configuration for document rendering."""

    page_size: str = "A4"
    margin_mm: float = 15.0
    style: str = "professional"
    placeholder: str = PLACEHOLDER
    empty_message: str = EMPTY_DATA_MESSAGE
    section_spacing: float = 8.0  # Points between consecutive sections
    footer_mark: str = "Generated by ledgerprint"
    currency_minor_unit: str = "Cents"
    company_url: Optional[str] = None  # Base URL of the company API
    fetch_timeout: float = 10.0
    out_dir: Path = field(default_factory=lambda: Path("out"))
    seed: int = 42  # Demo data

    # Substituted for missing company fields, e.g. {"name": "Acme Ltd"}
    company_defaults: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.page_size not in PAGE_SIZES:
            raise ValueError(f"Unknown page size: {self.page_size!r} (expected one of {sorted(PAGE_SIZES)})")
        if self.margin_mm < 0:
            raise ValueError("margin_mm must not be negative")
        if self.style not in DOCUMENT_STYLES:
            raise ValueError(f"Unknown style: {self.style!r} (expected one of {sorted(DOCUMENT_STYLES)})")
        self.out_dir = Path(self.out_dir)

    @property
    def margin(self) -> float:
        """Margin in points."""
        return self.margin_mm * mm

    def page_layout(self, orientation: str = "portrait") -> PageLayout:
        if orientation == "landscape":
            return PageLayout.landscape(self.page_size, self.margin)
        return PageLayout.portrait(self.page_size, self.margin)

    def document_style(self) -> DocumentStyle:
        return get_style(self.style)

    def defaults_provider(self) -> DefaultsProvider:
        return DefaultsProvider(**self.company_defaults)

    @classmethod
    def from_yaml(cls, path: Path) -> "RenderConfig":
        """Load configuration from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        # Convert out_dir to Path
        if "out_dir" in data:
            data["out_dir"] = Path(data["out_dir"])

        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        data = {
            "page_size": self.page_size,
            "margin_mm": self.margin_mm,
            "style": self.style,
            "placeholder": self.placeholder,
            "empty_message": self.empty_message,
            "section_spacing": self.section_spacing,
            "footer_mark": self.footer_mark,
            "currency_minor_unit": self.currency_minor_unit,
            "company_url": self.company_url,
            "fetch_timeout": self.fetch_timeout,
            "out_dir": str(self.out_dir),
            "seed": self.seed,
            "company_defaults": self.company_defaults,
        }
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_config(path: Optional[Path] = None) -> RenderConfig:
    """Load config from path or return default config."""
    if path is None:
        return RenderConfig()
    return RenderConfig.from_yaml(path)
