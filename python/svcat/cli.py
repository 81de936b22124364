"""Typer entrypoint for the ``svcat`` command line."""

from __future__ import annotations

import csv
from typing import List, Optional, Sequence, Tuple

import typer
from rich.console import Console

from .client import ServiceCatalogClient
from .command import ProvisionCommand
from .config import DEFAULT_INTERVAL, DEFAULT_TIMEOUT, WaitConfig, default_namespace
from .errors import PollCancelledError, SvcatError
from .logger import configure_root_logger, get_logger
from .request import ProvisionInputs
from .version import get_version

logger = get_logger(__name__)

EXIT_FAILURE = 1
EXIT_CANCELLED = 130

PROVISION_EXAMPLES = """
  svcat provision wordpress-mysql-instance --class mysqldb --plan free -p location=eastus -p sslEnforcement=disabled
  svcat provision wordpress-mysql-instance --external-id a7c00676-4398-11e8-842f-0ed5f89f718b --class mysqldb --plan free
  svcat provision wordpress-mysql-instance --class mysqldb --plan free -s mysecret[dbparams]
  svcat provision secure-instance --class mysqldb --plan secureDB --params-json '{"encrypt": true}'
"""

app = typer.Typer(
    name="svcat",
    add_completion=False,
    no_args_is_help=True,
    help="Manage service catalog instances.",
    rich_markup_mode=None,
)


def _print_error(message: str) -> None:
    Console(stderr=True).print(
        f"Error: {message}", style="bold red", markup=False, highlight=False, soft_wrap=True
    )


def _split_values(values: Optional[Sequence[str]]) -> Tuple[str, ...]:
    """Flatten repeated flag values, each read as one CSV record.

    ``-p a=b,c=d`` is the same as ``-p a=b -p c=d``; a double-quoted field
    keeps its commas (``-p '"a=x,y"'``).
    """

    tokens: List[str] = []
    for value in values or ():
        for record in csv.reader([value]):
            tokens.extend(record)
    return tuple(tokens)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"svcat {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Manage service catalog instances."""
    if verbose:
        configure_root_logger("DEBUG", force=True)


@app.command(
    "provision",
    help="Create a new instance of a service",
    epilog=f"Examples:\n{PROVISION_EXAMPLES}",
)
def provision(
    args: Optional[List[str]] = typer.Argument(None, metavar="NAME", show_default=False),
    plan: str = typer.Option(..., "--plan", help="The plan name (Required)"),
    class_name: str = typer.Option(..., "--class", help="The class name (Required)"),
    external_id: str = typer.Option(
        "",
        "--external-id",
        help="The ID of the instance for use with the OSB SB API (Optional)",
    ),
    params: Optional[List[str]] = typer.Option(
        None,
        "--param",
        "-p",
        help=(
            "Additional parameter to use when provisioning the service, format: NAME=VALUE. "
            "Cannot be combined with --params-json, Sensitive information should be placed "
            "in a secret and specified with --secret"
        ),
    ),
    secrets: Optional[List[str]] = typer.Option(
        None,
        "--secret",
        "-s",
        help=(
            "Additional parameter, whose value is stored in a secret, to use when "
            "provisioning the service, format: SECRET[KEY]"
        ),
    ),
    params_json: str = typer.Option(
        "",
        "--params-json",
        help=(
            "Additional parameters to use when provisioning the service, provided as a "
            "JSON object. Cannot be combined with --param"
        ),
    ),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="The namespace in which to create the instance"
    ),
    wait: bool = typer.Option(
        False, "--wait", help="Wait until the operation completes."
    ),
    timeout: str = typer.Option(
        DEFAULT_TIMEOUT,
        "--timeout",
        help="Timeout for --wait, specified in human readable format: 30s, 1m, 1h. Specify -1 or never to wait forever.",
    ),
    interval: str = typer.Option(
        DEFAULT_INTERVAL,
        "--interval",
        help="Poll interval for --wait, specified in human readable format: 30s, 1m, 1h",
    ),
) -> None:
    inputs = ProvisionInputs(
        class_name=class_name,
        plan_name=plan,
        external_id=external_id,
        namespace=namespace or default_namespace(),
        raw_params=_split_values(params),
        json_params=params_json,
        raw_secrets=_split_values(secrets),
    )

    try:
        wait_config = WaitConfig.from_flags(interval, timeout) if wait else None
        command = ProvisionCommand(inputs, wait=wait_config)
        command.validate(args or [])
        command.run(ServiceCatalogClient())
    except PollCancelledError as exc:
        _print_error(str(exc))
        raise typer.Exit(code=EXIT_CANCELLED) from exc
    except SvcatError as exc:
        logger.debug("provision failed", exc_info=True)
        _print_error(str(exc))
        raise typer.Exit(code=EXIT_FAILURE) from exc


def main() -> None:
    configure_root_logger()
    app()


if __name__ == "__main__":
    main()
