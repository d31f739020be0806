"""SAML identity provider CLI (samlidp).

Usage:
    samlidp plan idp.yaml --id 0oa1b2c3    # Show what apply would change
    samlidp apply idp.yaml                 # Create, or update with --id
    samlidp show 0oa1b2c3                  # Print the live spec
    samlidp import 0oa1b2c3                # Adopt an existing IdP
    samlidp exists 0oa1b2c3                # Exit 0 if present, 1 if not
    samlidp delete 0oa1b2c3                # Delete the IdP

Connection settings come from the environment (see ``Config.from_env``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
import yaml
from pydantic import ValidationError

from . import __version__
from .client import RemoteClientError
from .config import Config, ConfigurationError
from .lifecycle import IncompleteCreateError, ResourceState, SamlIdpResource
from .main import setup_logging
from .okta_client import OktaIdpClient
from .reconciler import ReconcileAction, Reconciler, ReconcileResult
from .schema import SamlIdpSpec
from .spec_loader import SpecLoadError, dump_spec, load_spec
from .status import StatusReconciliationError


class PartialApplyFailure(click.ClickException):
    """The object was written but its status or read-back failed."""

    exit_code = 2


def _runtime(ctx: click.Context) -> tuple[SamlIdpResource, bool]:
    """Return the lifecycle controller and dry-run flag, building them on first use.

    Callers embedding the CLI may pre-populate ``ctx.obj`` with ``resource``
    and ``dry_run`` to skip environment loading.
    """
    obj: dict[str, Any] = ctx.ensure_object(dict)
    if "resource" not in obj:
        try:
            config = Config.from_env()
        except ConfigurationError as e:
            raise click.ClickException(str(e)) from e
        setup_logging(config.log_level)
        obj["resource"] = SamlIdpResource(OktaIdpClient.from_config(config))
        obj["dry_run"] = config.dry_run
    return obj["resource"], bool(obj.get("dry_run", False))


def _load(spec_file: Path) -> SamlIdpSpec:
    try:
        return load_spec(spec_file)
    except SpecLoadError as e:
        raise click.ClickException(str(e)) from e


def _echo_state(state: ResourceState) -> None:
    click.echo(f"id: {state.id}")
    click.echo(dump_spec(state.spec), nl=False)


def _echo_plan(result: ReconcileResult) -> None:
    click.echo(f"{result.idp_name}: {result.action.value}")
    for drift in result.drift:
        click.echo(f"  ~ {drift.describe()}")


def _raise_for_error(error: Exception) -> None:
    if isinstance(error, (StatusReconciliationError, IncompleteCreateError)):
        raise PartialApplyFailure(f"{error} (id: {error.resource_id})")
    raise click.ClickException(str(error))


@click.group()
@click.version_option(version=__version__, prog_name="samlidp")
def cli() -> None:
    """Declarative management of SAML identity providers."""
    pass


@cli.command()
@click.argument("spec_file", type=click.Path(path_type=Path))
@click.option("--id", "resource_id", default=None, help="Identifier of the existing IdP.")
@click.pass_context
def plan(ctx: click.Context, spec_file: Path, resource_id: str | None) -> None:
    """Show which operation apply would run and which fields drifted."""
    spec = _load(spec_file)
    resource, _ = _runtime(ctx)
    result = Reconciler(resource, dry_run=True).plan(spec, resource_id)
    if result.error is not None:
        _raise_for_error(result.error)
    _echo_plan(result)


@cli.command()
@click.argument("spec_file", type=click.Path(path_type=Path))
@click.option("--id", "resource_id", default=None, help="Identifier of the existing IdP.")
@click.pass_context
def apply(ctx: click.Context, spec_file: Path, resource_id: str | None) -> None:
    """Create or update the IdP so it matches SPEC_FILE."""
    spec = _load(spec_file)
    resource, dry_run = _runtime(ctx)
    result = Reconciler(resource, dry_run=dry_run).reconcile(spec, resource_id)

    _echo_plan(result)
    if result.resource_id:
        click.echo(f"id: {result.resource_id}")
    if result.error is not None:
        _raise_for_error(result.error)
    if dry_run and result.action != ReconcileAction.NONE:
        click.echo("dry run: no changes applied")


@cli.command()
@click.argument("resource_id")
@click.pass_context
def show(ctx: click.Context, resource_id: str) -> None:
    """Print the live spec of an IdP."""
    resource, _ = _runtime(ctx)
    try:
        state = resource.read(resource_id)
    except (RemoteClientError, ValidationError) as e:
        raise click.ClickException(str(e)) from e
    _echo_state(state)


@cli.command("import")
@click.argument("resource_id")
@click.pass_context
def import_(ctx: click.Context, resource_id: str) -> None:
    """Adopt an existing IdP and print its spec as YAML."""
    resource, _ = _runtime(ctx)
    try:
        state = resource.import_resource(resource_id)
    except (RemoteClientError, ValidationError) as e:
        raise click.ClickException(str(e)) from e
    _echo_state(state)


@cli.command()
@click.argument("resource_id")
@click.pass_context
def exists(ctx: click.Context, resource_id: str) -> None:
    """Exit 0 if the IdP exists, 1 if it does not."""
    resource, _ = _runtime(ctx)
    try:
        found = resource.exists(resource_id)
    except RemoteClientError as e:
        raise click.ClickException(str(e)) from e
    click.echo(yaml.safe_dump({"id": resource_id, "exists": found}, sort_keys=False), nl=False)
    ctx.exit(0 if found else 1)


@cli.command()
@click.argument("resource_id")
@click.pass_context
def delete(ctx: click.Context, resource_id: str) -> None:
    """Delete an IdP."""
    resource, _ = _runtime(ctx)
    try:
        resource.delete(resource_id)
    except RemoteClientError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"deleted: {resource_id}")
