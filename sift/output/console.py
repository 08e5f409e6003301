"""
Sift Console Output
====================

Rich-based human-readable rendering of entropy analysis results: one
block per file, an optional indexed per-block listing, and a run summary.

Uses the shared toolkit console for consistent styling.
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich.markup import escape
from rich.text import Text

from shared.console import ToolkitConsole
from sift.analyzers.entropy import NATIVE_CEILING
from sift.core.models import AnalysisResult, Classification


_CLASS_COLOURS: dict[Classification, str] = {
    Classification.PLAINTEXT: "green",
    Classification.NATIVE: "cyan",
    Classification.COMPRESSED: "yellow",
    Classification.ENCRYPTED: "red",
    Classification.ERROR: "bright_black",
}

_LABEL_WIDTH = 16


class SiftConsoleOutput:
    """Console formatter for Sift results.

    Usage::

        output = SiftConsoleOutput(ToolkitConsole(), threshold=7.0)
        output.display_result(result, show_blocks=True)
        output.display_summary(results)

    Attributes:
        console: Shared toolkit console.
        threshold: Block entropy at or above which a listed block is
            highlighted in red.
    """

    def __init__(
        self,
        console: Optional[ToolkitConsole] = None,
        *,
        threshold: float = 7.0,
    ) -> None:
        self.console = console or ToolkitConsole()
        self.threshold = threshold
        self._rich = self.console.rich

    # ------------------------------------------------------------------ #
    #  Per-file display
    # ------------------------------------------------------------------ #

    def display_result(self, result: AnalysisResult, show_blocks: bool = False) -> None:
        """Display one result.

        Args:
            result: Result to render.
            show_blocks: Append the per-block entropy listing.
        """
        if result.is_error:
            self.console.error(escape(f"Cannot read {result.source}: {result.error}"))
            return

        colour = _CLASS_COLOURS[result.classification]

        self._rich.print(Text.assemble(("File: ", "bold cyan"), (result.source, "cyan")))
        self._field("Size:", Text(f"{result.file_size} bytes"))
        self._field("Total Entropy:", Text(f"{result.total_entropy:.4f}", style=colour))
        self._field("Classification:", Text(result.classification.value, style=colour))
        self._field("High Entropy:", Text(f"{result.high_entropy_block_count} blocks"))

        if show_blocks:
            self._rich.print()
            self._rich.print(Text("  Block Entropies:", style="bold"))
            self.display_blocks(result.block_entropies)
        self._rich.print()

    def display_blocks(self, block_entropies: Sequence[float]) -> None:
        """List per-block entropy values with their block index."""
        for index, entropy in enumerate(block_entropies):
            line = Text(f"    [{index:>4}] ")
            line.append(f"{entropy:.4f}", style=self._block_style(entropy))
            self._rich.print(line)

    # ------------------------------------------------------------------ #
    #  Run summary
    # ------------------------------------------------------------------ #

    def display_summary(self, results: Sequence[AnalysisResult]) -> None:
        """Display run-level counts.

        Only successfully read inputs count as analysed; failed inputs are
        reported on their own line when there are any.
        """
        valid = [r for r in results if not r.is_error]
        failed = len(results) - len(valid)
        encrypted = sum(1 for r in valid if r.classification is Classification.ENCRYPTED)
        compressed = sum(1 for r in valid if r.classification is Classification.COMPRESSED)

        self.console.divider(style="bright_black")
        self._rich.print(Text("Summary:", style="bold"))
        self._count_line("Files Analyzed:", len(valid), "")
        self._count_line("Encrypted:", encrypted, _CLASS_COLOURS[Classification.ENCRYPTED])
        self._count_line("Compressed:", compressed, _CLASS_COLOURS[Classification.COMPRESSED])
        if failed:
            self._count_line("Failed:", failed, "bold red")
        self._rich.print()

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    def _field(self, label: str, value: Text) -> None:
        self._rich.print(Text.assemble("  ", label.ljust(_LABEL_WIDTH), value))

    def _count_line(self, label: str, count: int, style: str) -> None:
        self._rich.print(
            Text.assemble("  ", (label.ljust(_LABEL_WIDTH + 1), style), str(count))
        )

    def _block_style(self, entropy: float) -> str:
        if entropy >= self.threshold:
            return "red"
        if entropy >= NATIVE_CEILING:
            return "yellow"
        return "bright_black"
