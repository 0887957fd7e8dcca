"""
Command-line interface for SEO Section Writer.

Provides commands to list sections, generate a batch of section copy,
rewrite one section of a saved result file, and report keyword density.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import DEFAULT_INTER_CALL_DELAY, DEFAULT_MODEL, GenerationConfig
from .density import analyze_keyword_density, analyze_session
from .docx_writer import write_generation_report
from .keyword_loader import KeywordLoadError
from .keyword_parser import parse_keywords
from .llm_client import LLMClientError, create_llm_client
from .models import DensityReport
from .orchestrator import GenerationError, GenerationOrchestrator, GenerationSession, ResultStore
from .sections import SECTION_CONFIGS, default_section_counts, section_ids

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _parse_counts(values: tuple[str, ...]) -> dict[str, int]:
    """Parse repeated SECTION=N options."""
    counts = {}
    for value in values:
        section_id, sep, number = value.partition("=")
        if not sep:
            raise click.BadParameter(f"Expected SECTION=N, got '{value}'", param_hint="--count")
        try:
            counts[section_id.strip()] = int(number)
        except ValueError:
            raise click.BadParameter(f"Count must be an integer, got '{number}'", param_hint="--count")
    return counts


def _save_results(path: Path, store: ResultStore, config: GenerationConfig) -> None:
    payload = store.to_dict()
    payload["mandatory_keywords"] = config.mandatory_list
    payload["optional_keywords"] = config.optional_pool
    payload["mandatory_target_density"] = config.mandatory_target_density
    payload["optional_target_density"] = config.optional_target_density
    payload["custom_prompt"] = config.custom_prompt
    payload["selected_sections"] = list(config.selected_sections)
    payload["section_counts"] = dict(config.section_counts)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _load_results(path: Path) -> dict:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Failed to read results file {path}: {e}")


def _display_density(report: DensityReport) -> None:
    """Display the keyword density table."""
    if report.is_empty:
        console.print("[yellow]No generated content to analyze.[/yellow]")
        return

    table = Table(title=f"Keyword Density ({report.total_words} words)", show_header=True)
    table.add_column("Keyword", style="green")
    table.add_column("Type", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Density", justify="right", style="yellow")

    for entry in report.entries:
        table.add_row(
            entry.keyword,
            "Mandatory" if entry.is_mandatory else "Optional",
            str(entry.count),
            entry.density,
        )
    console.print(table)

    mandatory_target = f" (target {report.mandatory_target:g}%)" if report.mandatory_target is not None else ""
    optional_target = f" (target {report.optional_target:g}%)" if report.optional_target is not None else ""
    console.print(f"[cyan]Mandatory sum:[/cyan] {report.mandatory_sum}{mandatory_target}")
    console.print(f"[cyan]Optional sum:[/cyan] {report.optional_sum}{optional_target}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """SEO Section Writer - generate landing-page copy and check keyword density."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@main.command("sections")
def list_sections() -> None:
    """List the available page sections."""
    table = Table(title="Sections", show_header=True)
    table.add_column("ID", style="cyan")
    table.add_column("Label", style="green")
    table.add_column("Default count", justify="right")

    for section in SECTION_CONFIGS:
        count = str(section.default_count) if section.has_count else "-"
        table.add_row(section.id, section.label, count)
    console.print(table)


@main.command("generate")
@click.option("--mandatory", "-m", default="", help="Mandatory keywords (comma or newline separated).")
@click.option("--optional", "-p", "optional_", default="", help="Optional keyword pool.")
@click.option(
    "--keywords-file",
    "-k",
    type=click.Path(exists=True, path_type=Path),
    help="CSV/Excel keyword file with keyword and type columns.",
)
@click.option("--mandatory-density", type=float, default=2.0, help="Target mandatory density % (default: 2).")
@click.option("--optional-density", type=float, default=1.0, help="Target optional density % (default: 1).")
@click.option("--custom-prompt", default="", help="Extra instruction appended to every prompt.")
@click.option(
    "--section",
    "-s",
    "sections",
    multiple=True,
    type=click.Choice(section_ids()),
    help="Section to generate (repeatable). Defaults to all sections.",
)
@click.option("--count", "counts", multiple=True, help="Item count override as SECTION=N (repeatable).")
@click.option("--api-key", type=str, envvar="ANTHROPIC_API_KEY", help="Anthropic API key.")
@click.option("--model", default=DEFAULT_MODEL, show_default=True, help="Model identifier.")
@click.option("--delay", type=float, default=DEFAULT_INTER_CALL_DELAY, show_default=True, help="Seconds between calls.")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Write results to .json (reusable by rewrite/density) or .docx.",
)
@click.pass_context
def generate(
    ctx: click.Context,
    mandatory: str,
    optional_: str,
    keywords_file: Optional[Path],
    mandatory_density: float,
    optional_density: float,
    custom_prompt: str,
    sections: tuple[str, ...],
    counts: tuple[str, ...],
    api_key: Optional[str],
    model: str,
    delay: float,
    output: Optional[Path],
) -> None:
    """
    Generate copy for the selected sections and report keyword density.

    Examples:

        seo-sections generate -m "seo tool, ai writing" -p "fast, rank, free" -o page.docx

        seo-sections generate -k keywords.csv -s hero -s feature --count feature=5 -o page.json
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        options = dict(
            mandatory_target_density=mandatory_density,
            optional_target_density=optional_density,
            custom_prompt=custom_prompt,
            api_key=api_key,
            model=model,
            inter_call_delay=delay,
        )
        if sections:
            options["selected_sections"] = list(sections)

        if keywords_file:
            config = GenerationConfig.from_keyword_file(keywords_file, **options)
        else:
            config = GenerationConfig(mandatory_keywords=mandatory, optional_keywords=optional_, **options)
        if counts:
            config = config.with_counts(**_parse_counts(counts))

        console.print(Panel.fit(
            "[bold blue]SEO Section Writer[/bold blue]\n"
            f"Generating {len(config.selected_sections)} section(s)",
            border_style="blue",
        ))

        client = create_llm_client(api_key=api_key, model=model, max_tokens=config.max_tokens)
        session = GenerationSession(config=config)
        orchestrator = GenerationOrchestrator(session, client)

        with console.status("[bold green]Generating sections..."):
            report = orchestrator.generate_all()

        for outcome in report.outcomes:
            if outcome.ok:
                console.print(f"  [green]OK[/green]   {outcome.section_id} ({outcome.content.word_count} words)")
            else:
                console.print(f"  [red]FAIL[/red] {outcome.section_id}: {outcome.error}")

        density_report = analyze_session(session)
        console.print()
        _display_density(density_report)

        if output:
            if output.suffix.lower() == ".json":
                _save_results(output, session.results, config)
            else:
                output = write_generation_report(
                    session.results.values(),
                    output,
                    density_report=density_report,
                    mandatory_keywords=config.mandatory_list,
                    optional_keywords=config.optional_pool,
                )
            console.print(f"\n[bold green]Success![/bold green] Output saved to: {output}")

        if report.failed:
            sys.exit(1)

    except KeywordLoadError as e:
        console.print(f"[red]Keyword loading error:[/red] {e}")
        sys.exit(1)
    except LLMClientError as e:
        console.print(f"[red]LLM error:[/red] {e}")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)
    except click.ClickException:
        raise
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        sys.exit(1)


@main.command("rewrite")
@click.argument("results", type=click.Path(exists=True, path_type=Path))
@click.argument("section_id", type=click.Choice(section_ids()))
@click.option("--instruction", "-i", default="", help="Specific change to request.")
@click.option("--word-count", type=int, help="Target word count for the section.")
@click.option("--custom-prompt", default=None, help="Override the custom instruction saved in the file.")
@click.option("--api-key", type=str, envvar="ANTHROPIC_API_KEY", help="Anthropic API key.")
@click.option("--model", default=DEFAULT_MODEL, show_default=True, help="Model identifier.")
def rewrite(
    results: Path,
    section_id: str,
    instruction: str,
    word_count: Optional[int],
    custom_prompt: Optional[str],
    api_key: Optional[str],
    model: str,
) -> None:
    """Rewrite one section of a saved JSON result file in place."""
    data = _load_results(results)

    try:
        config = GenerationConfig(
            mandatory_keywords="\n".join(data.get("mandatory_keywords", [])),
            optional_keywords="\n".join(data.get("optional_keywords", [])),
            mandatory_target_density=data.get("mandatory_target_density", 2.0),
            optional_target_density=data.get("optional_target_density", 1.0),
            custom_prompt=custom_prompt if custom_prompt is not None else data.get("custom_prompt", ""),
            selected_sections=data.get("selected_sections", section_ids()),
            section_counts=data.get("section_counts", default_section_counts()),
            api_key=api_key,
            model=model,
        )
        session = GenerationSession(config=config, results=ResultStore.from_dict(data))
        orchestrator = GenerationOrchestrator(session, create_llm_client(api_key=api_key, model=model))

        with console.status(f"[bold green]Rewriting {section_id}..."):
            content = orchestrator.rewrite_section(section_id, instruction, word_count)
    except (LLMClientError, GenerationError, ValueError) as e:
        console.print(f"[red]Rewrite failed:[/red] {e}")
        sys.exit(1)

    _save_results(results, session.results, config)
    console.print(f"[bold green]Rewrote {section_id}[/bold green] ({content.word_count} words)")
    console.print(content.english)


@main.command("density")
@click.argument("results", type=click.Path(exists=True, path_type=Path))
@click.option("--mandatory", "-m", help="Mandatory keywords (defaults to those saved in the file).")
@click.option("--optional", "-p", "optional_", help="Optional keywords (defaults to those saved in the file).")
def density(results: Path, mandatory: Optional[str], optional_: Optional[str]) -> None:
    """Report keyword density for a saved JSON result file."""
    data = _load_results(results)
    store = ResultStore.from_dict(data)

    mandatory_list = parse_keywords(mandatory) if mandatory is not None else data.get("mandatory_keywords", [])
    optional_list = parse_keywords(optional_) if optional_ is not None else data.get("optional_keywords", [])

    report = analyze_keyword_density(
        store,
        mandatory_list,
        optional_list,
        mandatory_target=data.get("mandatory_target_density"),
        optional_target=data.get("optional_target_density"),
    )
    _display_density(report)


def run_cli() -> None:
    """Entry point for the CLI."""
    main(obj={})


if __name__ == "__main__":
    run_cli()
