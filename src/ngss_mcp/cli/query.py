"""ngss lookup/search/match/suggest/stats commands - query the engine locally.

Each command builds an engine from the configured corpus, runs one
operation, and prints a rich table or, with --json, the raw result.
"""

import json
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from ngss_mcp.config.models import NgssConfig
from ngss_mcp.core.errors import NgssError
from ngss_mcp.core.formatting import pluralize
from ngss_mcp.engine.corpus import load_corpus
from ngss_mcp.engine.models import standard_to_dict
from ngss_mcp.engine.ops import StandardsEngine

_console = Console()


def _engine(ctx: click.Context) -> StandardsEngine:
    config: NgssConfig = ctx.obj["config"]
    try:
        return StandardsEngine(load_corpus(config.data.corpus_path), config.cache)
    except NgssError as e:
        raise click.ClickException(str(e)) from e


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def _standards_table(title: str, extra: str | None = None) -> Table:
    table = Table(title=title, title_justify="left")
    table.add_column("Code", style="cyan", no_wrap=True)
    if extra:
        table.add_column(extra, justify="right", no_wrap=True)
    table.add_column("Topic", style="white")
    table.add_column("Performance expectation", style="dim")
    return table


@click.command()
@click.argument("code")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def lookup_command(ctx: click.Context, code: str, as_json: bool) -> None:
    """Show one standard by CODE (e.g. MS-PS3-1)."""
    engine = _engine(ctx)
    try:
        standard = engine.require_standard(code)
    except NgssError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        _echo_json(standard_to_dict(standard))
        return

    table = Table(show_header=False, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("field", style="cyan", no_wrap=True)
    table.add_column("value")
    table.add_row("Code", standard.code)
    table.add_row("Domain", standard.domain)
    table.add_row("Topic", standard.topic)
    table.add_row("PE", standard.performance_expectation)
    table.add_row("SEP", f"{standard.sep.code} {standard.sep.name}")
    table.add_row("DCI", f"{standard.dci.code} {standard.dci.name}")
    table.add_row("CCC", f"{standard.ccc.code} {standard.ccc.name}")
    table.add_row("Keywords", ", ".join(standard.keywords))
    for question in standard.driving_questions:
        table.add_row("Question", question)
    _console.print(table)


@click.command()
@click.argument("query")
@click.option("--domain", default=None, help="Filter by science domain")
@click.option("--offset", type=int, default=0, show_default=True)
@click.option("--limit", type=int, default=10, show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def search_command(
    ctx: click.Context, query: str, domain: str | None, offset: int, limit: int, as_json: bool
) -> None:
    """Keyword search over topics, performance expectations, and keywords."""
    engine = _engine(ctx)
    try:
        hits = engine.search(query, domain, offset, limit)
        total = engine.search_total(query, domain)
    except NgssError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        _echo_json(
            {
                "query": query,
                "total": total,
                "results": [{"code": h.standard.code, "score": h.score} for h in hits],
            }
        )
        return

    table = _standards_table(f"{pluralize(total, 'match', 'matches')} for {query!r}", "Score")
    for hit in hits:
        s = hit.standard
        table.add_row(s.code, f"{hit.score:.2f}", s.topic, s.performance_expectation)
    _console.print(table)


@click.command()
@click.argument("question")
@click.option("--limit", type=int, default=5, show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def match_command(ctx: click.Context, question: str, limit: int, as_json: bool) -> None:
    """Find standards by driving QUESTION. Tolerates typos."""
    engine = _engine(ctx)
    try:
        matches = engine.fuzzy_match(question, limit)
    except NgssError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        _echo_json(
            [
                {
                    "code": m.standard.code,
                    "confidence": m.confidence,
                    "matched_question": m.matched_question,
                }
                for m in matches
            ]
        )
        return

    if not matches:
        click.echo("No driving question matched.")
        return
    table = Table(title=pluralize(len(matches), "match", "matches"), title_justify="left")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Confidence", justify="right", no_wrap=True)
    table.add_column("Driving question")
    for m in matches:
        table.add_row(m.standard.code, f"{m.confidence:.0%}", m.matched_question)
    _console.print(table)


@click.command()
@click.argument("anchor_code")
@click.option("--size", "unit_size", type=int, default=3, show_default=True, help="Unit size, anchor included")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def suggest_command(ctx: click.Context, anchor_code: str, unit_size: int, as_json: bool) -> None:
    """Suggest standards that fit a unit around ANCHOR_CODE."""
    engine = _engine(ctx)
    try:
        suggestions = engine.suggest_unit(anchor_code, unit_size)
    except NgssError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        _echo_json(
            {
                "anchor": anchor_code.strip(),
                "suggestions": [
                    {
                        "code": s.standard.code,
                        "score": s.score,
                        "breakdown": s.breakdown.to_dict(),
                        "match_reasons": s.match_reasons(),
                    }
                    for s in suggestions
                ],
            }
        )
        return

    table = Table(title=f"Unit around {anchor_code.strip()}", title_justify="left")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Score", justify="right", no_wrap=True)
    table.add_column("Why")
    for s in suggestions:
        table.add_row(s.standard.code, str(s.score), "; ".join(s.match_reasons()))
    _console.print(table)


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats_command(ctx: click.Context, as_json: bool) -> None:
    """Show corpus statistics."""
    engine = _engine(ctx)
    stats = {**engine.get_metadata(), **engine.get_stats()}

    if as_json:
        _echo_json(stats)
        return

    table = Table(show_header=False, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("key", style="cyan", no_wrap=True)
    table.add_column("value", justify="right")
    table.add_row("Standards", str(stats["total_standards"]))
    for label, count in stats["by_domain"].items():
        table.add_row(f"  {label}", str(count))
    for dimension, count in stats["distinct_tags"].items():
        table.add_row(f"Distinct {dimension.upper()}", str(count))
    table.add_row("Driving questions", str(stats["driving_questions"]))
    table.add_row("Indexed keywords", str(stats["indexed_keywords"]))
    _console.print(table)
