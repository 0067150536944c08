"""
CLI integration for code generation functionality.

Provides the command-line interface for the codegen module.
"""

import argparse
from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from ..logging_config import get_logger
from ..utils import load_model, load_model_from_stream
from .core.config import GeneratorConfig, get_config_manager, load_config
from .core.errors import CodegenError
from .core.generator import GenerationResult, generate_code
from .core.output import write_output_units
from .core.shapes import load_shape_graph
from .registry import (
    get_generator,
    get_language_info,
    get_registry,
    list_all_language_info,
    list_supported_languages,
)

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def add_codegen_args(parser: argparse.ArgumentParser):
    """Add code generation arguments to a parser."""

    input_group = parser.add_mutually_exclusive_group(required=False)
    input_group.add_argument("model", nargs="?", help="Smithy JSON model file")
    input_group.add_argument("--url", help="URL to fetch the model from")
    input_group.add_argument(
        "--stdin", action="store_true", help="Read the model from standard input"
    )

    codegen_group = parser.add_argument_group("code generation")
    codegen_group.add_argument(
        "--language",
        "-l",
        metavar="LANGUAGE",
        help="Target language (use --list-languages to see options)",
    )
    codegen_group.add_argument(
        "--service",
        "-s",
        metavar="SHAPE_ID",
        help="Service shape id, e.g. aws.greengrass#GreengrassCoreIPC",
    )
    codegen_group.add_argument(
        "--output",
        "-o",
        metavar="DIR",
        help="Directory to write generated files to (default: print to stdout)",
    )
    codegen_group.add_argument(
        "--config", metavar="FILE", help="JSON configuration file for code generation"
    )
    codegen_group.add_argument(
        "--client-stubs",
        action="store_true",
        help="Also generate the client",
    )
    codegen_group.add_argument(
        "--server-stubs",
        action="store_true",
        help="Also generate server stubs (not implemented)",
    )
    codegen_group.add_argument(
        "--module-dir",
        metavar="PATH",
        help="Override the namespace-derived module directory",
    )
    codegen_group.add_argument(
        "--allow-missing-io",
        action="store_true",
        help="Emit placeholder types for operations without input or output",
    )
    codegen_group.add_argument(
        "--clobber",
        action="store_true",
        help="Overwrite files that already exist in the output directory",
    )
    codegen_group.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't generate comments in output code",
    )
    codegen_group.add_argument(
        "--show-metadata",
        action="store_true",
        help="Show generation result metadata",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported target languages and exit",
    )
    info_group.add_argument(
        "--language-info",
        metavar="LANGUAGE",
        help="Show detailed information about a specific language and exit",
    )


def handle_codegen_command(args: argparse.Namespace) -> int:
    """
    Handle code generation command from CLI arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        if getattr(args, "list_languages", False):
            return _list_languages()

        if getattr(args, "language_info", None):
            return _show_language_info(args.language_info)

        if not args.language:
            console.print("[red]✗[/red] --language is required for code generation")
            return 1

        if not _validate_language(args.language):
            return 1

        if not (args.model or args.url or args.stdin):
            console.print("[red]✗[/red] Input source required (model file, --url, or --stdin)")
            return 1

        source, document = _get_input_model(args)
        config = _build_config(args)
        return _generate_and_output(source, document, args.language, config, args)

    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _list_languages() -> int:
    """List supported languages with details."""
    language_info = list_all_language_info()

    table = Table(title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for lang_name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {lang_name}", info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    console.print(
        Panel(
            "[bold]Usage:[/bold] eventstream-codegen [dim]model.json[/dim] "
            "--language [cyan]LANGUAGE[/cyan] --service [cyan]ns#Service[/cyan]\n"
            "[bold]Info:[/bold] eventstream-codegen --language-info [cyan]LANGUAGE[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def _show_language_info(language: str) -> int:
    """Show detailed information about a specific language."""
    if not _validate_language(language, silent=True):
        console.print(f"[red]✗ Language '{language}' is not supported[/red]")
        console.print("[dim]Use --list-languages to see available options[/dim]")
        return 1

    info = get_language_info(language)

    info_text = f"""[bold]Language:[/bold] {info['name']}
[bold]File Extension:[/bold] {info['file_extension']}
[bold]Generator Class:[/bold] {info['class']}
[bold]Module:[/bold] {info['module']}"""

    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(Panel(info_text, title=f"🔧 {info['name'].title()} Generator", border_style="green"))

    config = get_generator(language).config
    config_table = Table(
        title="⚙️  Default Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")

    config_table.add_row("Indent Size", str(config.indent_size))
    config_table.add_row("Add Comments", str(config.add_comments))
    config_table.add_row("Require Operation IO", str(config.require_operation_io))
    config_table.add_row("No Clobber", str(config.no_clobber))
    if info["name"] == "cpp":
        config_table.add_row("Include Subdirectory", config.include_subdirectory)
        config_table.add_row("Source Subdirectory", config.source_subdirectory)
    if info["name"] == "java":
        config_table.add_row("Base Package", config.java_base_package)
        config_table.add_row("Model Package", config.model_relative_package)
    for key, value in sorted(config.custom.items()):
        config_table.add_row(key, str(value))

    console.print()
    console.print(config_table)

    examples_text = f"""Print generated model:
[cyan]eventstream-codegen -l {language} -s ns#Service model.json[/cyan]

Generate model and client into a directory:
[cyan]eventstream-codegen -l {language} -s ns#Service --client-stubs -o out/ model.json[/cyan]"""

    console.print()
    console.print(Panel(examples_text, title="💡 Usage Examples", border_style="blue"))
    return 0


def _validate_language(language: str, silent: bool = False) -> bool:
    """Validate that a language name or alias is supported."""
    if get_registry().is_supported(language):
        return True
    if not silent:
        console.print(f"[red]✗ Unsupported language '{language}'[/red]")
        console.print(f"[dim]Supported languages: {', '.join(list_supported_languages())}[/dim]")
    return False


def _get_input_model(args: argparse.Namespace):
    """Load the model document from the selected source."""
    try:
        if args.model:
            return load_model(file_path=args.model)
        if args.url:
            return load_model(url=args.url)
        return load_model_from_stream()
    except Exception as e:
        raise CLIError(f"Failed to load model: {e}") from e


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration: language defaults, then --config file, then CLI flags."""
    language = get_registry().resolve_language(args.language)
    overrides = {}

    if args.service:
        overrides["service_shape_id"] = args.service
    if args.client_stubs:
        overrides["generate_client_stubs"] = True
    if args.server_stubs:
        overrides["generate_server_stubs"] = True
    if args.module_dir is not None:
        overrides["module_override_directory"] = args.module_dir
    if args.allow_missing_io:
        overrides["require_operation_io"] = False
    if args.clobber:
        overrides["no_clobber"] = False
    if args.no_comments:
        overrides["add_comments"] = False

    try:
        config = load_config(language, custom_config=overrides, config_file=args.config)
    except Exception as e:
        raise CLIError(f"Configuration error: {e}") from e

    for warning in get_config_manager().validate_config(config, language):
        logger.warning(warning)
    return config


def _generate_and_output(
    source: str, document: dict, language: str, config: GeneratorConfig, args: argparse.Namespace
) -> int:
    """Generate code and handle output with rich formatting."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        load_task = progress.add_task(f"[cyan]Loading model from {source}...", total=None)
        try:
            graph = load_shape_graph(document)
        except CodegenError as e:
            console.print(f"[red]✗ Invalid model:[/red] {e}")
            return 1
        progress.remove_task(load_task)

        gen_task = progress.add_task(f"[green]Generating {language} code...", total=None)
        generator = get_generator(language, config)
        result = generate_code(generator, graph)
        progress.remove_task(gen_task)

    if not result.success:
        console.print(f"[red]✗ {result.error_message}[/red]")
        return 1

    if args.output:
        written = write_output_units(result.units, args.output, no_clobber=config.no_clobber)
        console.print(
            f"[green]✓[/green] Wrote {len(written)} of {len(result.units)} {language} files "
            f"under [cyan]{Path(args.output)}[/cyan]"
        )
    else:
        _print_units(result, language)

    if args.show_metadata and result.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")
        for key, value in result.metadata.items():
            metadata_table.add_row(key.replace("_", " ").title(), str(value))
        console.print()
        console.print(metadata_table)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")
        console.print()

    return 0


def _print_units(result: GenerationResult, language: str):
    border = "═" * 30
    for unit in result.units:
        console.print(f"[green]{border} 📄 {unit.path} {border}[/green]\n")
        lexer = Syntax.guess_lexer(unit.path, unit.content)
        console.print(Syntax(unit.content, lexer, theme="monokai"))
        console.print()
    logger.debug("Printed %d %s units", len(result.units), language)
