"""
Sift CLI
=========

Click-based command-line interface for the Sift file entropy analyzer.

Usage::

    sift malware.exe
    sift -b 512 -t 7.5 suspicious.bin
    sift --blocks packed.exe
    sift --json *.bin > triage.jsonl

Exit status: 0 when at least one input was analysed, 1 when every input
failed to read, 2 for usage or configuration errors.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import click

from shared.config import ConfigError, ToolkitConfig
from shared.console import ToolkitConsole
from shared.logger import setup_logging

from sift import __version__
from sift.core.engine import SiftEngine
from sift.output.console import SiftConsoleOutput
from sift.output.report import SiftReportGenerator, render_json


_EPILOG = """\b
CLASSIFICATIONS:
    plaintext    Low entropy (< 4.0) - likely ASCII text
    native       Medium entropy (4.0-6.5) - compiled code
    compressed   High entropy (6.5-7.5) - compressed/packed
    encrypted    Very high entropy (>= 7.5) - encrypted

\b
EXAMPLES:
    sift malware.exe
    sift -b 512 -t 7.5 suspicious.bin
    sift --blocks packed.exe
"""


def _run_async(coro):
    """Run an async coroutine from a synchronous Click handler."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        import concurrent.futures
        with concurrent.futures.ThreadPoolExecutor() as pool:
            return pool.submit(asyncio.run, coro).result()
    return asyncio.run(coro)


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=_EPILOG,
)
@click.argument("files", nargs=-1, type=click.Path())
@click.option(
    "-b", "--block-size",
    type=click.IntRange(min=1),
    default=None,
    metavar="SIZE",
    help="Block size in bytes (default: 256).",
)
@click.option(
    "-t", "--threshold",
    type=click.FloatRange(0.0, 8.0),
    default=None,
    metavar="THRESHOLD",
    help="Highlight blocks at or above this entropy (default: 7.0).",
)
@click.option(
    "--blocks", "show_blocks",
    is_flag=True,
    default=False,
    help="Show per-block entropy.",
)
@click.option(
    "-j", "--json", "json_output",
    is_flag=True,
    default=False,
    help="JSON output, one object per file.",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    default=False,
    help="Verbose output.",
)
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to a TOML configuration file.",
)
@click.option(
    "-o", "--output-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write JSON lines to this file.",
)
@click.version_option(__version__, "--version", prog_name="sift")
@click.pass_context
def cli(
    ctx: click.Context,
    files: tuple[str, ...],
    block_size: Optional[int],
    threshold: Optional[float],
    show_blocks: bool,
    json_output: bool,
    verbose: bool,
    config_path: Optional[Path],
    output_file: Optional[Path],
) -> None:
    """Sift -- File Entropy Analyzer.

    Computes the Shannon entropy of each FILE and classifies it as
    plaintext, native code, compressed or encrypted data.
    """
    if not files:
        click.echo(ctx.get_help())
        ctx.exit(2)

    try:
        toolkit_config = ToolkitConfig.load(config_path)
        config = toolkit_config.sift.merged(
            block_size=block_size,
            threshold=threshold,
            show_blocks=show_blocks or None,
            json_output=json_output or None,
            verbose=verbose or None,
        )
    except ConfigError as exc:
        raise click.UsageError(str(exc), ctx=ctx) from exc

    global_settings = toolkit_config.global_settings
    setup_logging(
        "sift",
        log_level="DEBUG" if config.verbose or global_settings.debug else global_settings.log_level,
        log_file=global_settings.log_file,
        json_logs=global_settings.log_json,
    )

    engine = SiftEngine(config)
    console = ToolkitConsole(quiet=config.json_output)
    display = SiftConsoleOutput(console, threshold=config.threshold)

    if not config.json_output:
        console.banner(version=__version__)

    results = _run_async(engine.analyze_files(files))

    for result in results:
        if config.json_output:
            click.echo(render_json(result))
        else:
            display.display_result(result, show_blocks=config.show_blocks)

    if output_file is not None:
        path = SiftReportGenerator().write_json_lines(results, output_file)
        console.success(f"JSON report saved to: {path}")

    if not config.json_output:
        display.display_summary(results)

    if all(r.is_error for r in results):
        ctx.exit(1)


def main() -> None:
    """Main entry point for the Sift CLI."""
    cli()


if __name__ == "__main__":
    main()
