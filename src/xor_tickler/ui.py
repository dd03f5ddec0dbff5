from typing import List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from xor_tickler.models.candidates import LineResult, ScoredDecryption


COLORS = {
    "best": "bold spring_green2",
    "key": "bright_red",
    "score": "turquoise2",
    "error": "red",
}


def printable(text: str) -> str:
    """Escape control characters and markup so a decryption renders on one line."""
    return escape(text.encode("unicode_escape").decode("ascii"))


def render_decryption(decryption: ScoredDecryption, title: str = "Best decryption") -> Panel:
    """Render a single decryption with its key and score."""
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="cyan", no_wrap=True)
    grid.add_column()
    grid.add_row("Key", f"[{COLORS['key']}]0x{decryption.key:02x}[/{COLORS['key']}]  ({decryption.key})")
    grid.add_row("Score", f"[{COLORS['score']}]{decryption.score}[/{COLORS['score']}]")
    grid.add_row("Plaintext", printable(decryption.text))
    return Panel(grid, title=title, border_style="green", padding=(1, 1))


def render_candidates(decryptions: Sequence[ScoredDecryption], best: Optional[ScoredDecryption] = None) -> Table:
    """Render every scored candidate in generation order, highlighting the winner."""
    table = Table(title=f"Candidates ({len(decryptions)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Key", justify="center")
    table.add_column("Score", justify="right")
    table.add_column("Plaintext", overflow="fold")

    best_idx = next((idx for idx, decryption in enumerate(decryptions) if decryption == best), None)
    for idx, decryption in enumerate(decryptions):
        style = COLORS["best"] if idx == best_idx else ""
        table.add_row(
            str(idx),
            f"0x{decryption.key:02x}",
            str(decryption.score),
            printable(decryption.text),
            style=style,
        )
    return table


def render_lines(results: List[LineResult], top: int, best: Optional[LineResult] = None) -> Table:
    """Render the top scoring lines of a batch, followed by any failed lines."""
    succeeded = [r for r in results if r.ok]
    failed = [r for r in results if not r.ok]
    # Stable sort keeps input order among equal scores.
    ranked = sorted(succeeded, key=lambda r: r.result.score, reverse=True)[:top]

    table = Table(title=f"Lines ({len(succeeded)} cracked, {len(failed)} failed)")
    table.add_column("Line", justify="right", style="dim")
    table.add_column("Key", justify="center")
    table.add_column("Score", justify="right")
    table.add_column("Plaintext / error", overflow="fold")

    for r in ranked:
        style = COLORS["best"] if r is best else ""
        table.add_row(str(r.line_number), f"0x{r.result.key:02x}", str(r.result.score), printable(r.result.text), style=style)
    for r in failed:
        table.add_row(str(r.line_number), "", "", f"[{COLORS['error']}]{escape(r.error)}[/{COLORS['error']}]")
    return table


def render_histogram(entries: List[Tuple[int, int]], limit: int) -> Table:
    table = Table(title=f"Histogram ({len(entries)} distinct bytes)")
    table.add_column("Rank", justify="right", style="dim")
    table.add_column("Byte", justify="center")
    table.add_column("Count", justify="right")
    for rank, (byte, count) in enumerate(entries[:limit]):
        table.add_row(str(rank), f"0x{byte:02x}", str(count))
    return table


def get_console(stderr: bool = False) -> Console:
    return Console(stderr=stderr, highlight=False)
