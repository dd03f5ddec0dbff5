import functools
import logging
from typing import Optional

import click

from xor_tickler.algorithm.candidates import rank_histogram
from xor_tickler.algorithm.histogram import build_histogram
from xor_tickler.algorithm.xor import xor_bytes
from xor_tickler.config import DEFAULT_RANK_DEPTH, ENV_PREFIX
from xor_tickler.errors import XorTicklerError
from xor_tickler.logs import configure_logging
from xor_tickler.solver import best_line, crack_lines, crack_one, score_candidates
from xor_tickler.ui import (
    get_console,
    render_candidates,
    render_decryption,
    render_histogram,
    render_lines,
)
from xor_tickler.utils import (
    b64_encode,
    decode_hex,
    fetch_lines,
    hex_to_base64,
    load_ciphertext,
    read_lines,
    str_to_bytes,
    CiphertextFormat,
)


def reports_errors(fn):
    """Turn library errors into a clean CLI failure instead of a traceback."""
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except XorTicklerError as e:
            raise click.ClickException(str(e)) from e
    return wrapper


@click.group()
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug).")
@click.option("--json-logs", is_flag=True, help="Emit structured logs as JSON.")
def cli(verbose: int, json_logs: bool):
    """Recover single-byte XOR encrypted plaintext by letter frequency."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    configure_logging(level, json_logs)


@cli.command()
@click.argument("hex_ciphertext", required=False)
@click.option("--ciphertext-path", "-c", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--ciphertext-format",
    "-f",
    type=click.Choice(["b64", "hex", "raw"]),
    default="hex",
)
@click.option("--rank-depth", "-n", type=click.IntRange(min=0), default=DEFAULT_RANK_DEPTH, show_default=True)
@click.option("--show-candidates", is_flag=True, help="List every scored candidate key.")
@reports_errors
def crack(
    hex_ciphertext: Optional[str],
    ciphertext_path: Optional[str],
    ciphertext_format: CiphertextFormat,
    rank_depth: int,
    show_candidates: bool,
):
    """Crack a single ciphertext given as hex or read from a file."""
    if bool(hex_ciphertext) == bool(ciphertext_path):
        raise click.UsageError("Give either HEX_CIPHERTEXT or --ciphertext-path.")

    if ciphertext_path:
        ciphertext = load_ciphertext(ciphertext_path, ciphertext_format)
    else:
        ciphertext = decode_hex(hex_ciphertext)

    best = crack_one(ciphertext, rank_depth=rank_depth)

    console = get_console()
    if show_candidates:
        console.print(render_candidates(score_candidates(ciphertext, rank_depth=rank_depth), best))
    console.print(render_decryption(best))


@cli.command()
@click.option("--ciphertext-path", "-c", type=click.Path(exists=True, dir_okay=False), help="File of hex lines.")
@click.option("--url", "-u", help="URL of a text resource of hex lines.")
@click.option("--rank-depth", "-n", type=click.IntRange(min=0), default=DEFAULT_RANK_DEPTH, show_default=True)
@click.option("--skip-errors/--strict", default=True, show_default=True, help="Skip malformed lines or stop at the first one.")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None, help="Crack lines on a thread pool.")
@click.option("--top", "-t", type=click.IntRange(min=0), default=0, help="Also list the N best lines.")
@reports_errors
def detect(
    ciphertext_path: Optional[str],
    url: Optional[str],
    rank_depth: int,
    skip_errors: bool,
    workers: Optional[int],
    top: int,
):
    """Find the line that was encrypted with single-byte XOR."""
    if bool(ciphertext_path) == bool(url):
        raise click.UsageError("Give either --ciphertext-path or --url.")

    lines = read_lines(ciphertext_path) if ciphertext_path else fetch_lines(url)
    results = crack_lines(lines, rank_depth=rank_depth, skip_errors=skip_errors, max_workers=workers)
    best = best_line(results)
    if best is None:
        raise click.ClickException("No line could be cracked.")

    console = get_console()
    if top:
        console.print(render_lines(results, top, best))
    console.print(render_decryption(best.result, title=f"Best decryption (line {best.line_number})"))


@cli.command()
@click.argument("plaintext")
@click.option("--key", "-k", required=True, help="Repeating XOR key (text).")
@click.option("--output-format", "-o", type=click.Choice(["hex", "b64"]), default="hex", show_default=True)
@reports_errors
def encrypt(plaintext: str, key: str, output_format: str):
    """Encrypt text with a repeating-key XOR."""
    ciphertext = xor_bytes(str_to_bytes(plaintext), str_to_bytes(key))
    if output_format == "b64":
        click.echo(b64_encode(ciphertext))
    else:
        click.echo(ciphertext.hex())


@cli.command()
@click.argument("hex_text")
@click.option("--zero-pad", is_flag=True, help="Fill the final group with zero bits instead of '='.")
@reports_errors
def hex2b64(hex_text: str, zero_pad: bool):
    """Convert hex to base64."""
    click.echo(hex_to_base64(hex_text, zero_pad=zero_pad))


@cli.command()
@click.argument("hex_ciphertext")
@click.option("--limit", "-l", type=click.IntRange(min=1), default=10, show_default=True)
@reports_errors
def histogram(hex_ciphertext: str, limit: int):
    """Show the ranked byte histogram of a hex ciphertext."""
    entries = rank_histogram(build_histogram(decode_hex(hex_ciphertext)))
    get_console().print(render_histogram(entries, limit))


def main():
    """Main entry point function."""
    cli(auto_envvar_prefix=ENV_PREFIX)


if __name__ == "__main__":
    main()
