"""
xtenant CLI

Lists or summarizes cross-tenant sign-ins for the connected tenant.
"""
from __future__ import annotations
import json
import sys
import warnings

import click

from xtenant.activity.service import CONFIG_DEADLINE, get_cross_tenant_activity
from xtenant.app import event_bus
from xtenant.core.auth import connect
from xtenant.core.errors import EmptyResultWarning, XTenantError
from xtenant.core.session import SessionContext
from xtenant.cli.render import render_result
from xtenant.http.errors import HttpError


class _Dbg:
    def debug(self, msg):
        click.echo(f"[HTTP] {msg}" if msg.startswith("HTTP") else msg, err=True)


def _progress(topic: str):
    def _h(payload):
        click.echo(f"[{topic}] {json.dumps(payload, default=str)}", err=True)
    return _h


def _deadline_arg(deadline, no_deadline):
    if no_deadline:
        return None
    return deadline if deadline is not None else CONFIG_DEADLINE


@click.command()
@click.option("--tenant-id", envvar="XTENANT_TENANT_ID", required=True, help="Local (connected) tenant ID")
@click.option("--client-id", envvar="XTENANT_CLIENT_ID", required=True, help="App registration client ID")
@click.option("--client-secret", envvar="XTENANT_CLIENT_SECRET", required=True, help="App registration secret")
@click.option(
    "--direction",
    type=click.Choice(["inbound", "outbound"], case_sensitive=False),
    help="Only inbound or only outbound sign-ins (default: both)",
)
@click.option("--external-tenant-id", help="Limit to one external tenant")
@click.option("--summary", "summary_stats", is_flag=True, help="One summary row per external tenant")
@click.option("--deadline", type=float, help="Give up querying after this many seconds")
@click.option("--no-deadline", is_flag=True, help="Ignore any deadline set in appsettings.json")
@click.option("--parallel", is_flag=True, help="Run the inbound and outbound queries concurrently")
@click.option("--api-version", help="Graph API version (default from config: beta)")
@click.option("--json", "as_json", is_flag=True, help="Print rows as JSON")
@click.option("--verbose", is_flag=True, help="Print HTTP calls and query progress to stderr")
def main(
    tenant_id: str,
    client_id: str,
    client_secret: str,
    direction: str | None,
    external_tenant_id: str | None,
    summary_stats: bool,
    deadline: float | None,
    no_deadline: bool,
    parallel: bool,
    api_version: str | None,
    as_json: bool,
    verbose: bool,
) -> None:
    """Cross-tenant sign-in activity from the Entra ID sign-in log."""
    logger = _Dbg() if verbose else None
    handlers = []
    if verbose:
        for topic in ("activity.query.started", "activity.query.done"):
            handlers.append((topic, _progress(topic)))
            event_bus.subscribe(*handlers[-1])

    creds = {"tenant_id": tenant_id, "client_id": client_id, "client_secret": client_secret}
    try:
        session = connect(creds, api_version=api_version, logger=logger)
        context = SessionContext.from_session(session, logger=logger)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", EmptyResultWarning)
            result = get_cross_tenant_activity(
                context,
                direction=direction,
                external_tenant_id=external_tenant_id,
                summary_stats=summary_stats,
                deadline_seconds=_deadline_arg(deadline, no_deadline),
                parallel=parallel,
                logger=logger,
            )
    except XTenantError as e:
        click.echo(f"Error [{e.code}]: {e}", err=True)
        click.echo(f"Hint: {e.hint}", err=True)
        sys.exit(1)
    except HttpError as e:
        click.echo(f"Error [http_{e.status}]: {e} ({e.url})", err=True)
        if e.body_snippet:
            click.echo(e.body_snippet, err=True)
        sys.exit(1)
    finally:
        for topic, h in handlers:
            event_bus.unsubscribe(topic, h)

    if result.empty:
        click.echo("No cross-tenant sign-ins matched the query.", err=True)
        if as_json:
            click.echo("[]")
        return

    if as_json:
        click.echo(json.dumps(result.as_dicts(), indent=2))
    else:
        for line in render_result(result):
            click.echo(line)


if __name__ == "__main__":
    main()
