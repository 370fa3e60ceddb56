"""Command-line interface for compat-lint."""
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from compat_lint.__version__ import __version__
from compat_lint.config import CONFIG_FILENAME, load_config
from compat_lint.errors import CompatLintError
from compat_lint.file_utils import atomic_write_text
from compat_lint.logging_config import get_logger, setup_logging
from compat_lint.orchestrator import run_linter_from_module_list, run_linter_on_tree
from compat_lint.reporter import format_detailed_report, format_json_report, get_exit_code


@click.command()
@click.version_option(version=__version__, prog_name="compat-lint")
@click.argument("modules_list", required=False, type=click.Path(dir_okay=False))
@click.option("--scan", type=click.Path(file_okay=False), help="Scan a node_modules tree")
@click.option("--allow", "allow", multiple=True, help="Package allowed to keep violations")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("--output", type=click.Path(dir_okay=False), help="Also write JSON report to file")
@click.option("--fail-fast", is_flag=True, help="Stop at the first file that cannot be checked")
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
@click.option("--quiet", is_flag=True, help="Suppress warnings (errors only)")
@click.option("--config", type=click.Path(exists=True), help="Path to config file")
def main(
    modules_list: str | None,
    scan: str | None,
    allow: tuple[str, ...],
    output_json: bool,
    output: str | None,
    fail_fast: bool,
    verbose: bool,
    quiet: bool,
    config: str | None,
) -> None:
    """compat-lint: find restricted imports in your dependency tree.

    MODULES_LIST is the JSON array of module paths written by the bundler
    plugin. Use --scan to walk a node_modules directory instead.
    """
    setup_logging(verbose=verbose, quiet=quiet)

    if bool(modules_list) == bool(scan):
        click.echo("Error: Provide either a modules list file or --scan DIR", err=True)
        click.echo("Usage: compat-lint <modules-list.json> | --scan <dir>", err=True)
        sys.exit(2)

    project_root = Path.cwd()
    config_path = Path(config) if config else project_root / CONFIG_FILENAME

    try:
        cfg = load_config(config_path)
    except (ValueError, ValidationError) as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(2)

    if fail_fast:
        cfg.fail_fast = True
    if output_json:
        cfg.show_progress = False

    try:
        if modules_list:
            result, metrics = run_linter_from_module_list(Path(modules_list), cfg, allow)
        else:
            result, metrics = run_linter_on_tree(Path(scan), cfg, allow)

        json_report = format_json_report(result, metrics)
        if output_json:
            click.echo(json_report)
        else:
            click.echo(format_detailed_report(result, metrics))

        if output:
            atomic_write_text(json_report, Path(output))

        sys.exit(get_exit_code(result))

    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user", err=True)
        sys.exit(130)
    except (ValueError, FileNotFoundError, CompatLintError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)
    except Exception as e:
        logger = get_logger(__name__)
        logger.exception("Unexpected error during execution")
        click.echo(
            f"An unexpected error occurred: {e}\n" "Run with --verbose for details.", err=True
        )
        sys.exit(2)


if __name__ == "__main__":
    main()
