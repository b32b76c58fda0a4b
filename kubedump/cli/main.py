"""Main CLI interface using Typer."""

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..core.dumper import ResourceDumper, prepare_output_dir
from ..core.exclusions import DEFAULT_EXCLUSIONS, ExclusionPolicy
from ..errors import KubeDumpError
from ..k8s import K8sClient
from ..k8s.client import DEFAULT_REQUEST_TIMEOUT
from ..model.export import ExportFormat, ExportOptions, ExportResult
from ..utils.logger import get_logger, set_level

# Create CLI app
app = typer.Typer(
    name="kubedump",
    help="Dump every readable Kubernetes resource into a browsable directory tree",
    add_completion=True,
)

console = Console()
logger = get_logger(__name__)


def _print_failures_table(result: ExportResult) -> None:
    """Print non-fatal failures in a formatted table."""
    if not result.failures:
        return

    table = Table(show_header=True, header_style="bold magenta", title="Skipped")
    table.add_column("Stage", style="cyan")
    table.add_column("Item", style="yellow")
    table.add_column("Error", style="white")

    for failure in result.failures:
        table.add_row(failure.stage, failure.identifier, failure.error)

    console.print(table)


@app.command()
def dump(
    out_dir: Path = typer.Option(
        Path("out"), "--out-dir", "-o", help="Output directory (must not exist)"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet, suppress output"),
    dump_secrets: bool = typer.Option(
        False, "--dump-secrets", "-s", help="Dump secret payloads (disabled by default)"
    ),
    dump_managed_fields: bool = typer.Option(
        False, "--dump-managed-fields", "-m", help="Dump managed fields (disabled by default)"
    ),
    remove_out_dir: bool = typer.Option(
        False, "--remove-out-dir", "-r", help="Remove out-dir before dumping (disabled by default)"
    ),
    file_name: Optional[Path] = typer.Option(
        None, "--file-name", "-f", help="Read --- separated manifests from file instead of a cluster"
    ),
    context: Optional[str] = typer.Option(
        None, "--context", "-c", help="Kubernetes context to use"
    ),
    kubeconfig: Optional[str] = typer.Option(None, "--kubeconfig", help="Path to kubeconfig file"),
    workers: int = typer.Option(
        8, "--workers", "-w", min=1, help="Resource kinds listed in parallel"
    ),
    logs: bool = typer.Option(True, "--logs/--no-logs", help="Capture container logs of pods"),
    format: ExportFormat = typer.Option(
        ExportFormat.YAML, "--format", help="Output format for resource files"
    ),
    exclusions_file: Optional[Path] = typer.Option(
        None,
        "--exclusions",
        help="YAML file mapping groupVersion to resource names to skip, added to the defaults",
    ),
    request_timeout: int = typer.Option(
        DEFAULT_REQUEST_TIMEOUT, "--request-timeout", min=1, help="Seconds per API request"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Dump all resources of the current cluster to files."""
    if verbose:
        set_level(logging.DEBUG)
    elif quiet:
        set_level(logging.ERROR)

    try:
        options = ExportOptions(
            output_dir=out_dir,
            quiet=quiet,
            include_secrets=dump_secrets,
            include_managed_fields=dump_managed_fields,
            remove_output_dir=remove_out_dir,
            capture_logs=logs,
            workers=workers,
            export_format=format,
        )

        exclusions = DEFAULT_EXCLUSIONS
        if exclusions_file:
            exclusions = exclusions.merged(ExclusionPolicy.from_yaml(exclusions_file))

        if file_name:
            result = ResourceDumper(None, options).run_from_manifest(file_name)
        else:
            # Fail on the output directory before touching the cluster.
            prepare_output_dir(options)
            options = options.model_copy(update={"remove_output_dir": False})
            client = K8sClient(
                context=context, kubeconfig=kubeconfig, request_timeout=request_timeout
            )
            dumper = ResourceDumper(client, options, exclusions=exclusions)
            result = dumper.run()

    except (KubeDumpError, RuntimeError, ValidationError) as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(1)

    if not quiet:
        _print_failures_table(result)
    if result.cancelled:
        console.print("[yellow]Export was interrupted, results are partial[/yellow]")
    console.print(f"Total files written: {result.files_written}")


@app.command()
def version():
    """Show version information."""
    console.print(f"kubedump version {__version__}")


if __name__ == "__main__":
    app()
