"""
Toolkit Console Interface
==========================

Rich-powered console abstraction providing a unified presentation layer
for the toolkit's human-readable output.

The class wraps :class:`rich.console.Console` and adds convenience methods
for banners and severity-coloured messages, all with consistent styling.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

# ---------------------------------------------------------------------------
# Theme -- consistent palette across all toolkit output
# ---------------------------------------------------------------------------
_TOOLKIT_THEME = Theme(
    {
        "toolkit.banner": "bold bright_cyan",
        "toolkit.success": "bold green",
        "toolkit.warning": "bold yellow",
        "toolkit.error": "bold red",
        "toolkit.info": "bold bright_blue",
        "toolkit.dim": "dim white",
        "toolkit.highlight": "bold bright_white",
    }
)

_BANNER_ART = r"""[bright_cyan]
  ███████╗██╗███████╗████████╗
  ██╔════╝██║██╔════╝╚══██╔══╝
  ███████╗██║█████╗     ██║
  ╚════██║██║██╔══╝     ██║
  ███████║██║██║        ██║
  ╚══════╝╚═╝╚═╝        ╚═╝
[/bright_cyan]"""

_TAGLINE = "File Entropy Analyzer"


class ToolkitConsole:
    """Unified console interface for toolkit output.

    Usage::

        con = ToolkitConsole()
        con.banner()
        con.success("JSON report saved")
        con.error("Cannot read sample.bin")
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        console: Console | None = None,
    ) -> None:
        """Initialise the console.

        Args:
            quiet:   Suppress all output (useful in library / test mode).
            record:  Enable Rich recording for text export.
            console: Pre-built Rich console to wrap instead of creating one.
        """
        self._console = console or Console(
            theme=_TOOLKIT_THEME,
            quiet=quiet,
            record=record,
            highlight=False,
            soft_wrap=True,
        )
        if console is not None:
            self._console.push_theme(_TOOLKIT_THEME)

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Banner
    # ------------------------------------------------------------------ #

    def banner(self, version: str = "1.0.0") -> None:
        """Display the ASCII-art banner.

        Args:
            version: Version string shown beneath the logo.
        """
        subtitle = (
            f"[toolkit.highlight]{_TAGLINE}[/toolkit.highlight]\n"
            f"[toolkit.dim]Version: {version}[/toolkit.dim]"
        )
        panel = Panel(
            Align.center(Text.from_markup(_BANNER_ART + "\n" + subtitle)),
            border_style="bright_cyan",
            padding=(0, 2),
        )
        self._console.print(panel)

    # ------------------------------------------------------------------ #
    #  Message helpers
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(
            f"[toolkit.success][✔] SUCCESS:[/toolkit.success] {message}"
        )

    def warning(self, message: str) -> None:
        self._console.print(
            f"[toolkit.warning][⚠] WARNING:[/toolkit.warning] {message}"
        )

    def error(self, message: str) -> None:
        self._console.print(
            f"[toolkit.error][✘] ERROR:[/toolkit.error] {message}"
        )

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def divider(self, style: str = "dim") -> None:
        """Print a thin horizontal rule."""
        self._console.rule(style=style)

    def export_text(self) -> str:
        """Export recorded console output as plain text (requires ``record=True``)."""
        return self._console.export_text()
