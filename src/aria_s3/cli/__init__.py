"""aria-s3 CLI: copy Aria tables to and from S3."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from aria_s3.cli import copy_cmd, delete_cmd, info

app = typer.Typer(
    name="aria-s3",
    help="aria-s3 — copy Aria tables to and from S3 block storage.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    bucket: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    region: str | None = None
    endpoint_url: str | None = None
    json_output: bool = False
    verbose: bool = False


state = _State()


def _version_callback(value: bool) -> None:
    if value:
        try:
            from importlib.metadata import version

            v = version("aria-s3")
        except Exception:
            v = "unknown"
        print(f"aria-s3 {v}")
        raise typer.Exit()


@app.callback()
def main_callback(
    bucket: Optional[str] = typer.Option(
        None, "--bucket", envvar="ARIA_S3_BUCKET", help="S3 bucket (default: MariaDB)"
    ),
    access_key: Optional[str] = typer.Option(
        None, "--access-key", envvar="ARIA_S3_ACCESS_KEY", help="AWS access key"
    ),
    secret_key: Optional[str] = typer.Option(
        None, "--secret-key", envvar="ARIA_S3_SECRET_KEY", help="AWS secret key"
    ),
    region: Optional[str] = typer.Option(
        None, "--region", envvar="ARIA_S3_REGION", help="AWS region"
    ),
    endpoint_url: Optional[str] = typer.Option(
        None,
        "--endpoint-url",
        envvar="ARIA_S3_ENDPOINT_URL",
        help="S3-compatible endpoint (e.g. http://127.0.0.1:9000 for MinIO)",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output when supported"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log each step and show copy progress"
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all aria-s3 commands."""
    state.bucket = bucket
    state.access_key = access_key
    state.secret_key = secret_key
    state.region = region
    state.endpoint_url = endpoint_url
    state.json_output = json_output
    state.verbose = verbose
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")


app.command(name="copy-to")(copy_cmd.copy_to_cmd)
app.command(name="copy-from")(copy_cmd.copy_from_cmd)
app.command(name="delete")(delete_cmd.delete_cmd)
app.command(name="info")(info.info_cmd)


def main() -> None:
    """Entry point for the aria-s3 CLI."""
    app()
