"""Command-line interface for rendering report and invoice PDFs."""

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .company_source import CompanySource
from .config import RenderConfig, load_config
from .document_renderer import DocumentRenderer
from .pdf_renderer import PDFRenderer
from .reports import REPORT_BUILDERS, get_builder
from .sample_data import SampleDataGenerator

logger = logging.getLogger(__name__)


DEMO_REPORTS = ["stock_balance", "customer_list", "trial_balance", "invoice"]


def render_payload(
    config: RenderConfig,
    report: str,
    payload: Dict[str, Any],
    filename: Optional[str] = None,
) -> Path:
    """Build, render and save one document. Company data is fetched only when a URL is configured."""
    builder = get_builder(report)
    defaults = config.defaults_provider()
    company, logo = None, None
    if config.company_url:
        source = CompanySource(config.company_url, defaults, timeout=config.fetch_timeout)
        assets = asyncio.run(source.load_assets())
        company, logo = assets.company, assets.logo

    spec = builder(payload, company=company, logo=logo)
    document = DocumentRenderer(config, defaults).render(spec)
    return PDFRenderer().save(document, config.out_dir, filename, report_type=spec.metadata.report_type)


def demo_payload(generator: SampleDataGenerator, report: str, rows: int) -> Dict[str, Any]:
    """Seeded sample payload for one demo report."""
    if report == "stock_balance":
        payload = generator.stock_balance_export(rows)
    elif report == "customer_list":
        payload = generator.customer_list_export(rows)
    elif report == "trial_balance":
        payload = generator.trial_balance_export()
    elif report == "invoice":
        payload = generator.invoice_payload(max(1, min(rows, 30)))
    else:
        raise ValueError(f"No demo data for report: {report!r}")
    payload["companyDetails"] = generator.company_details()
    return payload


def run_render(config: RenderConfig, args: argparse.Namespace) -> List[Path]:
    with open(args.input, "r", encoding="utf-8") as f:
        payload = json.load(f)
    return [render_payload(config, args.report, payload, args.output)]


def run_demo(config: RenderConfig, args: argparse.Namespace) -> List[Path]:
    generator = SampleDataGenerator(seed=config.seed)
    reports = DEMO_REPORTS if args.report == "all" else [args.report]
    paths = []
    for report in reports:
        paths.append(render_payload(config, report, demo_payload(generator, report, args.rows)))
    return paths


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Render report and invoice PDFs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        help="Output directory for PDFs (overrides config)",
    )
    parser.add_argument(
        "--company-url",
        help="Base URL of the company API (overrides config)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log layout decisions",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser("render", help="Render a JSON export payload")
    render_parser.add_argument("input", type=Path, help="JSON payload file")
    render_parser.add_argument(
        "--report",
        choices=sorted(REPORT_BUILDERS),
        default="generic",
        help="Report builder for the payload",
    )
    render_parser.add_argument("--output", help="Output file name (default: generated)")

    demo_parser = subparsers.add_parser("demo", help="Render seeded sample documents")
    demo_parser.add_argument(
        "--report",
        choices=DEMO_REPORTS + ["all"],
        default="all",
        help="Which sample document to render",
    )
    demo_parser.add_argument("--rows", type=int, default=40, help="Rows per sample report")
    demo_parser.add_argument("--seed", type=int, help="Random seed (overrides config)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Load config
    config = load_config(args.config)

    # Override with CLI args
    if args.out_dir:
        config.out_dir = args.out_dir
    if args.company_url:
        config.company_url = args.company_url
    if getattr(args, "seed", None) is not None:
        config.seed = args.seed

    if args.command == "render":
        if not args.input.exists():
            parser.error(f"input file not found: {args.input}")
        paths = run_render(config, args)
    else:
        paths = run_demo(config, args)

    for path in paths:
        print(path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
