"""
Application Entry Point
=======================
Wires the pure analysis model to its inputs and prints the result.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Loads the strand pattern library (the repository the model never reaches for itself).
2. Looks up the product geometry in the catalog.
3. Runs the report assembly for one analysis job.
4. Renders a plain-text summary or JSON for downstream exporters.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Optional

import click

from strandanalysis.config import DEFAULT_PATTERNS_PATH
from strandanalysis.logging_config import setup_logging
from strandanalysis.model.comparison import format_comparison
from strandanalysis.model.exceptions import StrandAnalysisError
from strandanalysis.model.io import AnalysisJob, PatternRepository, load_job, report_to_dict
from strandanalysis.model.measurements import to_fixed
from strandanalysis.model.patterns import StrandEnd, StrandLayer
from strandanalysis.model.products import lookup
from strandanalysis.model.report import SlippageReport, assemble_report

logger = logging.getLogger(__name__)


def run_analysis(job: AnalysisJob, repository: PatternRepository) -> SlippageReport:
    """Resolve the job's references and assemble its report."""
    if job.inline_patterns:
        repository = repository.merged(PatternRepository(job.inline_patterns))

    geometry = lookup(job.product_type)

    def optional(pattern_id: Optional[str]):
        return repository.get(pattern_id) if pattern_id else None

    return assemble_report(
        geometry=geometry,
        bottom_pattern=repository.get(job.strand_pattern),
        readings=job.readings,
        cut_spec=job.cut_spec,
        top_pattern=optional(job.top_strand_pattern),
        cast_bottom=optional(job.cast_strand_pattern),
        cast_top=optional(job.cast_top_strand_pattern),
    )


def format_summary(report: SlippageReport) -> str:
    """Plain-text version of the summary cards."""
    geometry = report.geometry
    cut = report.cut_spec
    stats = report.statistics
    lines = [f"Product {geometry.product_type}: {geometry.description}"]

    if cut is None:
        lines.append(f"Full width {geometry.full_width}\"")
    else:
        side = "Left side" if cut.keeper_side.value == "L1" else "Right side"
        lines.append(f"Cut width {cut.cut_width}\" - {cut.keeper_side} ({side})")

    lines.append("Active strands: " + (", ".join(s.label for s in sorted(report.active_strands)) or "none"))
    lines.append("")

    for layer in (StrandLayer.BOTTOM, StrandLayer.TOP):
        strands = stats.strands_in(layer)
        if not strands:
            continue
        lines.append(f"{layer.value.capitalize()} strands")
        for strand in strands:
            ends = []
            for end in (StrandEnd.E1, StrandEnd.E2):
                value = strand.end_value(end)
                if value is None:
                    ends.append(f"{end}: -")
                elif value.exceeds:
                    ends.append(f'{end}: >1"')
                else:
                    ends.append(f"{end}: {to_fixed(value.effective)}")
            lines.append(f"  {strand.strand_id.label:<4} {'  '.join(ends)}  total {strand.stats.display_total()}")

        group = stats.layer(layer)
        lines.append(f"  End 1   total {group.end1.display_total()}  avg {group.end1.display_average()}")
        lines.append(f"  End 2   total {group.end2.display_total()}  avg {group.end2.display_average()}")
        lines.append("")

    lines.append(f"Total slippage   {stats.grand.display_total()}")
    lines.append(f"Average slippage {stats.grand.display_average()}")
    lines.append(f"End 1 total {stats.combined.end1.display_total()}  avg {stats.combined.end1.display_average()}")
    lines.append(f"End 2 total {stats.combined.end2.display_total()}  avg {stats.combined.end2.display_average()}")

    for comparison in report.comparisons:
        lines.append("")
        lines.append(format_comparison(comparison))

    return "\n".join(lines)


@click.command()
@click.argument("job", type=click.Path(dir_okay=False))
@click.option(
    "--patterns", "-p",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Strand pattern library JSON (default: bundled {os.path.basename(DEFAULT_PATTERNS_PATH)}).",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.option("--debug", is_flag=True, help="Verbose logging.")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also write the log to this file.")
def main(job: str, patterns: Optional[str], as_json: bool, debug: bool, log_file: Optional[str]) -> None:
    """Cut-width strand activity and slippage statistics for one hollow-core plank.

    JOB is an analysis job JSON (product type, patterns, cut, slippage rows).
    """
    setup_logging(level=logging.DEBUG if debug else logging.WARNING, log_file=log_file)

    try:
        if patterns is None and not os.path.exists(DEFAULT_PATTERNS_PATH):
            repository = PatternRepository()
        else:
            repository = PatternRepository.from_json_file(patterns or DEFAULT_PATTERNS_PATH)

        report = run_analysis(load_job(job), repository)
    except (StrandAnalysisError, OSError, json.JSONDecodeError) as e:
        logger.error(f"Analysis failed: {e}")
        click.echo(f"Analysis failed: {e}", err=True)
        raise click.Abort()

    if as_json:
        click.echo(json.dumps(report_to_dict(report), indent=2, ensure_ascii=False))
    else:
        click.echo(format_summary(report))


if __name__ == "__main__":
    main()
