"""
tender-award CLI

Command-line interface for the procurement evaluation pipeline.

Usage:
    tender-award run --plans-dir ./plans --seed tender-2024
    tender-award run --prices prices.json --json
    tender-award plans --plans-dir ./plans
    tender-award contractors
    tender-award din277 --plans-dir ./plans
"""

import json
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from tender_award.bidding.contractors import reference_contractors
from tender_award.kernel.errors import TenderAwardError
from tender_award.kernel.logging import configure_logging
from tender_award.kernel.randomness import DEFAULT_SEED, SeededRandomSource
from tender_award.pipeline import TenderPipeline
from tender_award.plans.ingest import load_plans, placeholder_plans
from tender_award.plans.models import Plan
from tender_award.quantities.boq import load_price_table

# Configure logging to stderr (avoids polluting stdout for JSON output)
configure_logging(json_output=False, log_level="INFO")

app = typer.Typer(
    name="tender-award",
    help="tender-award - Procurement evaluation from plans to award recommendation",
    add_completion=False,
)


def get_plans(plans_dir: Optional[Path]) -> list[Plan]:
    """Plans from a directory, or the placeholder set without one"""
    if plans_dir is None:
        return placeholder_plans()

    try:
        plans = load_plans(plans_dir)
    except TenderAwardError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not plans:
        typer.echo(f"Error: No plan files found in {plans_dir}", err=True)
        raise typer.Exit(1)
    return plans


@app.command()
def run(
    plans_dir: Annotated[
        Optional[Path],
        typer.Option("--plans-dir", help="Directory with plan files (placeholder set if omitted)"),
    ] = None,
    seed: Annotated[
        str,
        typer.Option("--seed", help="Seed for the bid simulation"),
    ] = DEFAULT_SEED,
    prices: Annotated[
        Optional[Path],
        typer.Option("--prices", help="Unit price table (JSON object type key → EUR)"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output the full report as JSON"),
    ] = False,
) -> None:
    """Run the full pipeline and show the award recommendation"""
    plans = get_plans(plans_dir)

    try:
        price_table = load_price_table(prices) if prices else None
    except (OSError, ValueError) as e:
        typer.echo(f"Error: Cannot read price table {prices}: {e}", err=True)
        raise typer.Exit(1)

    pipeline = TenderPipeline(
        random_source=SeededRandomSource(seed),
        price_table=price_table,
    )

    try:
        report = pipeline.run(plans)
    except TenderAwardError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(report.model_dump(mode="json"), indent=2, default=str))
        return

    typer.echo(f"✓ Procurement evaluation: {report.project_name}")
    typer.echo(f"  Run: {report.run_id}")
    typer.echo(f"  Plans: {len(report.catalogs)}")
    typer.echo(
        f"  DIN 277: BGF {report.quantities.bgf} m², "
        f"NGF {report.quantities.ngf} m², BRI {report.quantities.bri} m³"
    )
    typer.echo(f"  Reference price: €{report.base_price:,.2f}")
    if report.boq.unknown_price_lookups:
        typer.echo(
            f"  Default-priced positions: {', '.join(report.boq.unknown_price_lookups)}"
        )

    typer.echo(f"\n  Bids: {len(report.bids)} ({len(report.rejections)} rejected)")
    for rejection in report.rejections:
        typer.echo(f"    ✗ {rejection.contractor_name}: {rejection.legal_basis}")

    typer.echo("\n  Evaluation:")
    for entry in report.evaluation:
        typer.echo(
            f"    {entry.rank}. {entry.contractor_name} - €{entry.price:,.0f} "
            f"- {entry.total_score:.2f} ({entry.recommendation.value})"
        )

    mirror = report.price_mirror
    typer.echo(
        f"\n  Price mirror: €{mirror.minimum:,.0f} - €{mirror.maximum:,.0f}, "
        f"median €{mirror.median:,.0f}, {mirror.deviation_percent:+.2f}% vs reference"
    )

    typer.echo(f"\n  Award: {report.award.winner.contractor_name}")
    typer.echo(f"  Value: €{report.award.award_value:,.0f}")
    typer.echo(f"  {report.award.justification}")


@app.command()
def plans(
    plans_dir: Annotated[
        Optional[Path],
        typer.Option("--plans-dir", help="Directory with plan files (placeholder set if omitted)"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List the plans a run would analyse"""
    found = get_plans(plans_dir)

    if json_output:
        typer.echo(json.dumps([p.model_dump(mode="json") for p in found], indent=2, default=str))
        return

    typer.echo(f"Plans ({len(found)}):")
    for plan in found:
        typer.echo(f"  {plan.plan_id}: {plan.plan_type} (floor {plan.floor}, rev {plan.revision})")


@app.command()
def contractors(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List the reference contractor roster"""
    roster = reference_contractors()

    if json_output:
        typer.echo(json.dumps([c.model_dump(mode="json") for c in roster], indent=2, default=str))
        return

    typer.echo(f"Contractors ({len(roster)}):")
    for contractor in roster:
        typer.echo(
            f"  {contractor.contractor_id}: {contractor.name} ({contractor.location}) "
            f"- reputation {contractor.reputation}"
        )


@app.command()
def din277(
    plans_dir: Annotated[
        Optional[Path],
        typer.Option("--plans-dir", help="Directory with plan files (placeholder set if omitted)"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Compute DIN 277 floor areas only"""
    pipeline = TenderPipeline()

    try:
        catalogs = pipeline.build_catalogs(get_plans(plans_dir))
    except TenderAwardError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    quantities = pipeline.compute_quantities(
        [element for catalog in catalogs for element in catalog.elements]
    )

    if json_output:
        typer.echo(json.dumps(quantities.model_dump(mode="json"), indent=2, default=str))
        return

    typer.echo(f"DIN 277 ({quantities.floor_count} floors):")
    typer.echo(f"  BGF: {quantities.bgf} m²")
    typer.echo(f"  NGF: {quantities.ngf} m²")
    typer.echo(f"  BRI: {quantities.bri} m³")
    for floor, bucket in quantities.floor_areas.items():
        typer.echo(
            f"    Floor {floor}: rooms {bucket.rooms} m², "
            f"circulation {bucket.circulation} m², technical {bucket.technical} m²"
        )


def main() -> None:
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
