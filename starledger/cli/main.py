# starledger/cli/main.py
"""
CLI for creating identities, signing ownership challenges and checking exported chains.
"""

import json
import logging
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from starledger.chain.ledger import Ledger, format_challenge
from starledger.core.config import LedgerConfig
from starledger.core.errors import LedgerError
from starledger.crypto.keys import AgentKeyPair
from starledger.verify.verifier import ChainReport, verify_file

app = typer.Typer(
    name="starledger",
    help="Create identities, sign ownership challenges and verify tamper-evident star ledgers",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log ledger activity to stderr"),
):
    """Tamper-evident star registry."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] [%(name)s]: %(message)s")


@app.command()
def keygen():
    """Generate a new Ed25519 identity."""
    keys = AgentKeyPair.generate()
    console.print(f"[bold]Identity:[/]    {keys.public_key_b64url()}")
    console.print(f"[bold]Private key:[/] {keys.private_key_b64url()}")
    console.print("[yellow]Keep the private key secret; it signs your ownership challenges.[/]")


@app.command()
def challenge(
    identity: str = typer.Argument(..., help="Identity (base64url public key) requesting the challenge"),
):
    """Print a fresh ownership challenge to be signed."""
    config = LedgerConfig.load()
    console.print(format_challenge(identity, int(time.time()), config.challenge_suffix), soft_wrap=True)


@app.command()
def sign(
    private_key: str = typer.Argument(..., help="base64url private key from `keygen`"),
    message: str = typer.Argument(..., help="Challenge text to sign"),
):
    """Sign a challenge and print the base64url signature."""
    try:
        keys = AgentKeyPair.from_private_b64url(private_key)
    except ValueError as e:
        console.print(f"[red]Invalid private key: {e}[/]")
        raise typer.Exit(1)
    console.print(keys.sign_text(message), soft_wrap=True)


@app.command()
def demo(
    records: int = typer.Option(3, "--records", "-n", min=0, help="Number of stars to register"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Export the chain as JSONL"),
):
    """Register signed stars in an in-memory ledger and show the resulting chain."""
    ledger = Ledger()
    owners = [AgentKeyPair.generate() for _ in range(2)]

    for i in range(records):
        keys = owners[i % 2]
        identity = keys.public_key_b64url()
        text = ledger.request_ownership_challenge(identity)
        star = {"dec": f"68° 52' {i:02d}.0", "ra": f"16h 29m {i:02d}.0s", "story": f"Demo star #{i}"}
        try:
            ledger.submit_record(identity, text, keys.sign_text(text), star)
        except LedgerError as e:
            console.print(f"[red]Submission {i} rejected ({e.kind}): {e}[/]")
            raise typer.Exit(1)

    table = Table(title="Star Ledger")
    table.add_column("Height")
    table.add_column("Hash")
    table.add_column("Owner")
    table.add_column("Star")

    for block in ledger.blocks():
        payload = block.decode_payload(ledger.codec)
        if payload is None:
            table.add_row(str(block.height), block.hash[:16], "—", "(genesis)")
        else:
            table.add_row(str(block.height), block.hash[:16], payload["owner"][:12] + "…", payload["star"]["story"])

    console.print(table)

    report = ChainReport(ledger.validate_chain(), ledger.length)
    console.print(f"[green]{report}[/]" if report else f"[red]{report}[/]")

    if output:
        with open(output, "w", encoding="utf-8") as f:
            for d in ledger.to_dicts():
                json.dump(d, f, separators=(",", ":"))
                f.write("\n")
        console.print(f"[green]Exported {ledger.length} blocks to {output}[/]")


@app.command()
def verify(
    path: Path = typer.Argument(..., help="JSONL chain export (one block per line)"),
):
    """Verify the hash chain of an exported ledger."""
    if not path.is_file():
        console.print(f"[red]File not found: {path}[/]")
        raise typer.Exit(1)

    try:
        report = verify_file(path)
    except (ValueError, OSError) as e:
        # DecodeError, a file that is not UTF-8 text, or an unreadable file
        console.print(f"[red]Could not read chain export: {e}[/]")
        raise typer.Exit(1)

    if report.length == 0:
        console.print(f"[yellow]No blocks found in {path}[/]")
        raise typer.Exit(1)

    if report.is_valid:
        console.print(f"[green]✓ {report}[/]")
    else:
        console.print(f"[red]✗ {report}[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
