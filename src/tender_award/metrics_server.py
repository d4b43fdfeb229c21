"""
Prometheus metrics server for tender-award.

Exposes the pipeline metrics (plan analysis fallbacks, unknown price lookups,
bid rejections by legal basis, stage durations) at /metrics, next to a
long-running process that calls TenderPipeline repeatedly. The stage duration
histogram is exported for every pipeline stage from the start, so dashboards
see all stages at zero before the first run.

Usage:
    python -m tender_award.metrics_server --port 9090
    python -m tender_award.metrics_server --list
"""

import argparse
import time

from prometheus_client import REGISTRY, CollectorRegistry

from tender_award.kernel.logging import configure_logging, get_logger
from tender_award.kernel.metrics import (
    PIPELINE_STAGES,
    initialize_stage_labels,
    start_metrics_server,
)

logger = get_logger(__name__)

METRIC_PREFIX = "tender_award_"


def metric_families(registry: CollectorRegistry = REGISTRY) -> list[tuple[str, str, str]]:
    """
    tender-award metric families as (name, type, help), sorted by name

    Process and platform collectors of prometheus_client are left out.
    """
    families = [
        (family.name, family.type, family.documentation)
        for family in registry.collect()
        if family.name.startswith(METRIC_PREFIX)
    ]
    return sorted(families)


def format_metric_families(families: list[tuple[str, str, str]]) -> str:
    lines = [f"Metrics ({len(families)}):"]
    for name, kind, documentation in families:
        lines.append(f"  {name} [{kind}] {documentation}")
    lines.append(f"Stages: {', '.join(PIPELINE_STAGES)}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="tender-award Metrics Server")
    parser.add_argument(
        "--port",
        type=int,
        default=9090,
        help="Port to listen on (default: 9090)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the exported metric families and exit",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs in JSON format (default: False)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Start the Prometheus metrics server and block until interrupted.

    With --list, print the metric families instead of serving them.
    """
    args = build_parser().parse_args(argv)

    configure_logging(json_output=args.json_logs, log_level=args.log_level)
    initialize_stage_labels()

    families = metric_families()
    if args.list:
        print(format_metric_families(families))
        return

    logger.info(
        "Starting Prometheus metrics server",
        port=args.port,
        endpoint=f"http://0.0.0.0:{args.port}/metrics",
        metric_families=len(families),
        stages=list(PIPELINE_STAGES),
    )
    start_metrics_server(port=args.port)

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down metrics server")


if __name__ == "__main__":
    main()
