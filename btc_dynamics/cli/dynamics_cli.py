from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from btc_dynamics.app.logging_config import configure_logging
from btc_dynamics.core.analytics.config import AnalysisConfig
from btc_dynamics.core.analytics.models import FilterMode
from btc_dynamics.core.config_loader import DynamicsConfigLoader
from btc_dynamics.core.dynamics import DynamicsReport, DynamicsRequest, DynamicsService
from btc_dynamics.core.sources import BrkClient
from btc_dynamics.settings import get_settings

logger = logging.getLogger(__name__)


def _load_config(args: argparse.Namespace) -> AnalysisConfig:
    if args.config_dir is None and args.config is None:
        settings = get_settings()
        if not settings.default_config_path.exists():
            return AnalysisConfig()
    loader = DynamicsConfigLoader(args.config_dir)
    return loader.load_analysis_config(args.config or get_settings().default_config_name)


def _emit(report: DynamicsReport, output: Optional[str]) -> None:
    payload = report.model_dump_json(indent=2)
    if output:
        Path(output).write_text(payload, encoding="utf-8")
        logger.info("Report written | path=%s anomalies=%d", output, len(report.anomalies))
    else:
        sys.stdout.write(payload + "\n")


def analyze_cmd(args: argparse.Namespace) -> DynamicsReport:
    settings = get_settings()
    client = BrkClient(base_url=args.base_url)
    service = DynamicsService(source=client, config=_load_config(args), max_workers=settings.max_workers)
    report = service.run(args.days or settings.lookback_days, args.filter_mode, args.include_time_series)
    for failure in report.failures:
        logger.warning("Series unavailable | key=%s excluded=%s", failure.series_key, failure.excluded_metrics)
    _emit(report, args.output)
    return report


def analyze_file_cmd(args: argparse.Namespace) -> DynamicsReport:
    data = json.loads(Path(args.input).read_text(encoding="utf-8"))
    request = DynamicsRequest.model_validate(data)
    service = DynamicsService(config=_load_config(args))
    report = service.analyze(request.metrics, args.filter_mode, args.include_time_series)
    _emit(report, args.output)
    return report


def _add_common(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--config", default=None, help="Config name (without .yaml) in the config directory.")
    cmd.add_argument("--config-dir", default=None, help="Directory holding dynamics YAML configs.")
    cmd.add_argument(
        "--filter-mode",
        default=FilterMode.ALL.value,
        choices=[mode.value for mode in FilterMode],
        help="Which anomalies to report.",
    )
    cmd.add_argument("--include-time-series", action="store_true", help="Attach per-window Z-score series.")
    cmd.add_argument("--output", default=None, help="Write the JSON report here instead of stdout.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BTC Dynamics multi-window Z-score CLI")
    subparsers = parser.add_subparsers(dest="command")

    live_cmd = subparsers.add_parser("analyze", help="Fetch metrics from BRK and analyze them.")
    live_cmd.add_argument("--days", type=int, default=None, help="Lookback in days.")
    live_cmd.add_argument("--base-url", default=None, help="BRK base URL.")
    _add_common(live_cmd)

    file_cmd = subparsers.add_parser("analyze-file", help="Analyze metric series from a JSON file.")
    file_cmd.add_argument("--input", required=True, help="JSON file with a 'metrics' list.")
    _add_common(file_cmd)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    configure_logging(get_settings().log_level, stream=sys.stderr)
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return
    if args.command == "analyze":
        analyze_cmd(args)
    elif args.command == "analyze-file":
        analyze_file_cmd(args)


if __name__ == "__main__":
    main()
