"""Command-line access to the portfolio analytics.

Examples:

  esg-risk overview 42
  esg-risk 42                 (same as overview)
  esg-risk breakdown 42 --dimension region --output out/region.json
  esg-risk --api-url http://localhost:8080/api/portfolios stress 42
  esg-risk normalize data/sector_exposure.csv --output-csv out/sector.csv
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import argparse
import logging
import sys

from pydantic import BaseModel

from esg_risk.config.settings import BackendSettings, load_settings
from esg_risk.data_models.breakdown import BreakdownDimension
from esg_risk.services.backend_client import BackendError, PortfolioBackendClient
from esg_risk.services.breakdown_service import (
    breakdown_to_frame,
    load_exposures_from_csv,
    normalize_exposures,
)
from esg_risk.services.portfolio_analytics_service import (
    analyze_breakdown,
    analyze_esg,
    build_portfolio_overview,
    run_stress_test,
)

logger = logging.getLogger(__name__)

BACKEND_COMMANDS = ("overview", "breakdown", "esg", "stress")
COMMANDS = BACKEND_COMMANDS + ("normalize",)
DEFAULT_COMMAND = "overview"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="esg-risk", description="Portfolio risk and ESG analytics.")
    parser.add_argument("--api-url", dest="api_url", type=str, default=None,
                        help="Backend base URL (overrides ESG_RISK_API_URL / ESG_RISK_HOST).")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")

    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        (DEFAULT_COMMAND, "Sector/region breakdown, ESG pillars and stress test in one report."),
        ("breakdown", "Normalized exposure breakdown for one dimension."),
        ("esg", "ESG score and pillar decomposition."),
        ("stress", "Stress test scenarios and composite risk score."),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("portfolio_id", type=int)
        p.add_argument("--output", type=str, default=None, help="Write the JSON result to this path.")
        if name == "breakdown":
            p.add_argument("--dimension", choices=[d.value for d in BreakdownDimension],
                           default=BreakdownDimension.SECTOR.value)

    p = sub.add_parser("normalize", help="Normalize an exposure CSV (columns name,value) without a backend.")
    p.add_argument("csv_path", type=str)
    p.add_argument("--name-column", dest="name_column", default="name")
    p.add_argument("--value-column", dest="value_column", default="value")
    p.add_argument("--output-csv", dest="output_csv", type=str, default=None,
                   help="Write the normalized table to this CSV path instead of printing JSON.")

    return parser


def _with_default_command(argv: List[str]) -> List[str]:
    """Insert `overview` when the first positional argument is not a command.

    `esg-risk 42` is shorthand for `esg-risk overview 42`.
    """
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--api-url":
            i += 2
            continue
        if arg.startswith("-"):
            i += 1
            continue
        if arg in COMMANDS:
            return argv
        return argv[:i] + [DEFAULT_COMMAND] + argv[i:]
    return argv


def _emit(model: BaseModel, output: Optional[str]) -> None:
    payload = model.model_dump_json(indent=2)
    if output:
        out = Path(output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload, encoding="utf-8")
        logger.info("Wrote %s", out)
    else:
        print(payload)


def _run_normalize(args: argparse.Namespace) -> None:
    exposures = load_exposures_from_csv(args.csv_path, args.name_column, args.value_column)
    entries = normalize_exposures(exposures)
    if args.output_csv:
        out = Path(args.output_csv)
        out.parent.mkdir(parents=True, exist_ok=True)
        breakdown_to_frame(entries).to_csv(out, index=False)
        logger.info("Wrote %d breakdown rows to %s", len(entries), out)
    else:
        print(breakdown_to_frame(entries).to_json(orient="records", indent=2))


def _run_backend_command(args: argparse.Namespace, settings: BackendSettings) -> None:
    with PortfolioBackendClient(settings) as client:
        if args.command == "overview":
            result = build_portfolio_overview(client, args.portfolio_id)
        elif args.command == "breakdown":
            result = analyze_breakdown(client, args.portfolio_id, args.dimension)
        elif args.command == "esg":
            result = analyze_esg(client, args.portfolio_id)
        else:
            result = run_stress_test(client, args.portfolio_id)
    _emit(result, args.output)


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(_with_default_command(list(argv)))

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"esg-risk: {e}", file=sys.stderr)
        return 1
    if args.api_url:
        settings = settings.model_copy(update={"base_url": args.api_url.rstrip("/")})

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    try:
        if args.command == "normalize":
            _run_normalize(args)
        else:
            _run_backend_command(args, settings)
    except BackendError as e:
        logger.error("Backend request failed: %s. Check the backend and retry.", e)
        return 1
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
