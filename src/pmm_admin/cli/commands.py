# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pmm-admin CLI Commands.

Thin glue over ServiceMonitoringCoordinator: parse arguments, build the
monitoring target, call one coordinator operation, render the result with
rich. Every PmmAdminError is printed and turned into exit status 1.
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from pydantic import SecretStr, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pmm_admin import __version__
from pmm_admin.config.config_loader import load_config, write_config
from pmm_admin.enums import EnumMonitoringAction, EnumServiceType
from pmm_admin.errors import NoServiceError, PmmAdminError
from pmm_admin.handlers.handler_systemd_supervisor import (
    SERVICE_MANAGER,
    SystemdSupervisorHandler,
)
from pmm_admin.models.model_paths_config import DEFAULT_PMM_BASE_DIR, ModelPathsConfig
from pmm_admin.models.model_pmm_config import ModelPmmConfig
from pmm_admin.models.model_target_info import ModelTargetInfo
from pmm_admin.plugins import (
    METRICS_TARGETS,
    MongoDBQueriesTarget,
    MySQLMetricsTarget,
    MySQLQueriesTarget,
    PluginMetricsTarget,
    PluginQueriesTarget,
)
from pmm_admin.plugins.plugin_metrics_targets import MYSQL_DISABLE_ARGS
from pmm_admin.runtime.wiring import build_coordinator
from pmm_admin.services.service_monitoring_coordinator import (
    ServiceMonitoringCoordinator,
    parse_service_type,
    uninstall_local_services,
)

if TYPE_CHECKING:
    from pmm_admin.protocols import ProtocolServiceSupervisor

logger = logging.getLogger(__name__)

console = Console()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

COMPLETE_PRODUCTS: tuple[str, ...] = ("mysql", "mongodb")

_STATE = {
    EnumMonitoringAction.START: "running",
    EnumMonitoringAction.STOP: "stopped",
    EnumMonitoringAction.RESTART: "restarted",
}


def _fail(error: object) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise SystemExit(1)


def _paths(ctx: click.Context) -> ModelPathsConfig:
    return ctx.obj["paths"]


def _config_file(ctx: click.Context) -> Path:
    return ctx.obj.get("config_file") or _paths(ctx).config_file


def _load(ctx: click.Context) -> ModelPmmConfig:
    if "config" not in ctx.obj:
        ctx.obj["config"] = load_config(_config_file(ctx))
    return ctx.obj["config"]


def _coordinator(ctx: click.Context) -> ServiceMonitoringCoordinator:
    if "coordinator" not in ctx.obj:
        ctx.obj["coordinator"] = build_coordinator(
            _load(ctx),
            _paths(ctx),
            retry_config=ctx.obj.get("retry_config"),
            timeout_seconds=ctx.obj["timeout"],
            verbose=ctx.obj["verbose"],
        )
    return ctx.obj["coordinator"]


def _supervisor(ctx: click.Context) -> ProtocolServiceSupervisor:
    if "supervisor" not in ctx.obj:
        ctx.obj["supervisor"] = SystemdSupervisorHandler(_paths(ctx).unit_dir)
    return ctx.obj["supervisor"]


@click.group()
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="PMM config file (default: <base-dir>/pmm.yml)",
)
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_PMM_BASE_DIR,
    show_default=True,
    help="PMM client base directory",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=1.0, max=300.0),
    default=10.0,
    show_default=True,
    help="API timeout in seconds",
)
@click.option("--verbose", is_flag=True, help="Log API requests and responses")
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Path | None,
    base_dir: Path,
    timeout: float,
    verbose: bool,
) -> None:
    """PMM client administration tool."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT
    )
    ctx.ensure_object(dict)
    ctx.obj.setdefault("paths", ModelPathsConfig(pmm_base_dir=base_dir))
    ctx.obj.setdefault("config_file", config_file)
    ctx.obj["timeout"] = timeout
    ctx.obj["verbose"] = verbose


@cli.command("config")
@click.option("--server", "server_address", default=None, help="PMM server address")
@click.option("--client-address", default=None, help="Client address")
@click.option("--bind-address", default=None, help="Bind address for exporters")
@click.option("--client-name", default=None, help="Client name (node identifier)")
@click.option("--server-user", default=None, help="PMM server HTTP basic auth user")
@click.option(
    "--server-password", default=None, help="PMM server HTTP basic auth password"
)
@click.option("--server-ssl", is_flag=True, help="Enable SSL to the PMM server")
@click.option(
    "--server-insecure-ssl",
    is_flag=True,
    help="Enable insecure SSL (self-signed certificate) to the PMM server",
)
@click.pass_context
def config_cmd(
    ctx: click.Context,
    server_address: str | None,
    client_address: str | None,
    bind_address: str | None,
    client_name: str | None,
    server_user: str | None,
    server_password: str | None,
    server_ssl: bool,
    server_insecure_ssl: bool,
) -> None:
    """Configure PMM client."""
    try:
        current = _load(ctx)
        updates: dict[str, object] = {
            key: value
            for key, value in {
                "server_address": server_address,
                "client_address": client_address,
                "bind_address": bind_address,
                "client_name": client_name,
                "server_user": server_user,
            }.items()
            if value is not None
        }
        if server_password is not None:
            updates["server_password"] = SecretStr(server_password)
        if server_ssl or server_insecure_ssl:
            updates["server_ssl"] = server_ssl
            updates["server_insecure_ssl"] = server_insecure_ssl
        data = current.model_dump()
        data.update(updates)
        if "client_address" in updates and "bind_address" not in updates:
            data["bind_address"] = ""
        config = ModelPmmConfig.model_validate(data)
        write_config(config, _config_file(ctx))
    except ValidationError as e:
        _fail(e.errors()[0]["msg"])
    except PmmAdminError as e:
        _fail(e)
    console.print("[green]OK, PMM client is configured.[/green]")


def _metrics_target(
    parsed: EnumServiceType,
    info: ModelTargetInfo,
    cluster: str,
    disable: tuple[str, ...],
) -> PluginMetricsTarget:
    if parsed is EnumServiceType.MYSQL_METRICS:
        return MySQLMetricsTarget(info, cluster, disabled_options=disable)
    return METRICS_TARGETS[parsed.product](info, cluster)


def _queries_target(
    coordinator: ServiceMonitoringCoordinator,
    parsed: EnumServiceType,
    info: ModelTargetInfo,
    disable_queryexamples: bool,
    retain_slow_logs: int,
    slow_log_rotation: bool,
) -> PluginQueriesTarget:
    if parsed is EnumServiceType.MYSQL_QUERIES:
        return MySQLQueriesTarget(
            info,
            local_hostname=coordinator.local_hostname,
            disable_query_examples=disable_queryexamples,
            slow_log_rotation=slow_log_rotation,
            retain_slow_logs=retain_slow_logs,
        )
    return MongoDBQueriesTarget(info, disable_query_examples=disable_queryexamples)


@cli.command("add")
@click.argument("service_type")
@click.argument("alias")
@click.argument("extra_args", nargs=-1, type=click.UNPROCESSED)
@click.option("--dsn", default="", help="Data source name of the monitored instance")
@click.option("--host", default="", help="Hostname the monitored instance runs on")
@click.option(
    "--service-port",
    type=click.IntRange(min=0, max=65535),
    default=0,
    help="Service port (default: first free port from the product default)",
)
@click.option("--force", is_flag=True, help="Add the service even if one exists")
@click.option("--disable-ssl", is_flag=True, help="Disable SSL for the exporter")
@click.option("--cluster", default="", help="Cluster name")
@click.option(
    "--disable",
    "disable",
    multiple=True,
    type=click.Choice(sorted(MYSQL_DISABLE_ARGS)),
    help="Disable a mysqld_exporter collector group (repeatable)",
)
@click.option(
    "--query-source",
    type=click.Choice(["auto", "slowlog", "perfschema"]),
    default="auto",
    show_default=True,
    help="MySQL query source",
)
@click.option("--disable-queryexamples", is_flag=True, help="Disable query examples")
@click.option(
    "--retain-slow-logs",
    type=click.IntRange(min=0),
    default=1,
    show_default=True,
    help="Number of rotated slow logs to keep",
)
@click.option(
    "--slow-log-rotation/--no-slow-log-rotation",
    default=True,
    show_default=True,
    help="Let the agent rotate the slow log",
)
@click.pass_context
def add_cmd(
    ctx: click.Context,
    service_type: str,
    alias: str,
    extra_args: tuple[str, ...],
    dsn: str,
    host: str,
    service_port: int,
    force: bool,
    disable_ssl: bool,
    cluster: str,
    disable: tuple[str, ...],
    query_source: str,
    disable_queryexamples: bool,
    retain_slow_logs: int,
    slow_log_rotation: bool,
) -> None:
    """Add SERVICE_TYPE monitoring under the name ALIAS.

    ``mysql`` and ``mongodb`` add linux metrics, metrics and queries at once.
    Arguments after ``--`` are passed to the exporter or agent.
    """
    info = ModelTargetInfo(dsn=dsn, hostname=host, query_source=query_source)
    if service_type in COMPLETE_PRODUCTS:
        if extra_args:
            _fail(
                "cannot determine which exporter should receive additional "
                f"flags: {' '.join(extra_args)}. Add linux:metrics or "
                f"{service_type}:metrics separately to pass them."
            )
        try:
            coordinator = _coordinator(ctx)
            steps = coordinator.add_complete(
                _metrics_target(
                    EnumServiceType(f"{service_type}:metrics"), info, cluster, disable
                ),
                _queries_target(
                    coordinator,
                    EnumServiceType(f"{service_type}:queries"),
                    info,
                    disable_queryexamples,
                    retain_slow_logs,
                    slow_log_rotation,
                ),
                alias,
                force=force,
                disable_ssl=disable_ssl,
            )
            for step_type, step_record in steps:
                label = escape(f"[{step_type}]")
                if step_record is None:
                    console.print(f"{label} OK, already monitoring '{escape(alias)}'.")
                else:
                    console.print(
                        f"[green]{label} OK, now monitoring '{escape(alias)}' "
                        f"({step_record.service_id}).[/green]"
                    )
        except PmmAdminError as e:
            _fail(e)
        return

    try:
        parsed = parse_service_type(service_type)
        coordinator = _coordinator(ctx)
        if parsed.is_queries:
            target = _queries_target(
                coordinator,
                parsed,
                info,
                disable_queryexamples,
                retain_slow_logs,
                slow_log_rotation,
            )
            record = coordinator.add_queries(target, alias, extra_args=extra_args)
        else:
            metrics_target = _metrics_target(parsed, info, cluster, disable)
            record = coordinator.add_metrics(
                metrics_target,
                alias,
                port=service_port,
                force=force,
                disable_ssl=disable_ssl,
                extra_args=extra_args,
            )
    except PmmAdminError as e:
        _fail(e)
    console.print(
        f"[green]OK, now monitoring {parsed.value} '{alias}' "
        f"({record.service_id}).[/green]"
    )


@cli.command("remove")
@click.argument("service_type")
@click.argument("alias")
@click.pass_context
def remove_cmd(ctx: click.Context, service_type: str, alias: str) -> None:
    """Remove SERVICE_TYPE monitoring of ALIAS.

    ``mysql`` and ``mongodb`` remove linux metrics, metrics and queries.
    """
    if service_type in COMPLETE_PRODUCTS:
        try:
            steps = list(_coordinator(ctx).remove_complete(service_type, alias))
        except PmmAdminError as e:
            _fail(e)
        failed = False
        for step_type, error in steps:
            label = escape(f"[{step_type}]")
            if error is None:
                console.print(f"[green]{label} OK, removed '{escape(alias)}'.[/green]")
            elif isinstance(error, NoServiceError):
                console.print(f"{label} OK, no '{escape(alias)}' under monitoring.")
            else:
                failed = True
                console.print(f"[red]{label} Error: {escape(str(error))}[/red]")
        if failed:
            raise SystemExit(1)
        return

    try:
        _coordinator(ctx).remove(service_type, alias)
    except PmmAdminError as e:
        _fail(e)
    console.print(f"[green]OK, removed {service_type} '{alias}'.[/green]")


def _clear_generated_password(ctx: click.Context) -> None:
    path = _config_file(ctx)
    config = _load(ctx)
    if path.exists() and config.mysql_password is not None:
        write_config(config.model_copy(update={"mysql_password": None}), path)


@cli.command("remove-all")
@click.option("--ignore-errors", is_flag=True, help="Keep going on errors")
@click.pass_context
def remove_all_cmd(ctx: click.Context, ignore_errors: bool) -> None:
    """Remove all monitoring services of this client."""
    try:
        count = _coordinator(ctx).remove_all(ignore_errors=ignore_errors)
        _clear_generated_password(ctx)
    except PmmAdminError as e:
        _fail(e)
    console.print(f"[green]OK, {count} services were removed.[/green]")


@cli.command("list")
@click.pass_context
def list_cmd(ctx: click.Context) -> None:
    """List monitoring services of this client."""
    try:
        coordinator = _coordinator(ctx)
        rows = coordinator.list_services()
    except PmmAdminError as e:
        _fail(e)

    if not rows:
        console.print("No services under monitoring.")
        return

    table = Table(title=f"Client {coordinator.node_name}")
    table.add_column("SERVICE TYPE", style="cyan")
    table.add_column("NAME", style="bold")
    table.add_column("LOCAL PORT")
    table.add_column("RUNNING")
    table.add_column("DATA SOURCE", style="dim")
    table.add_column("OPTIONS", style="dim")
    for row in rows:
        table.add_row(
            row.service_type,
            row.name,
            str(row.port) if row.port else "-",
            "[green]YES[/green]" if row.running else "[red]NO[/red]",
            row.dsn or "-",
            ", ".join(filter(None, [row.options, "ssl" if row.ssl else ""])),
        )
    console.print(table)


def _register_action(action: EnumMonitoringAction) -> None:
    @cli.command(action.value)
    @click.argument("service_type", required=False)
    @click.argument("alias", required=False)
    @click.option("--all", "all_services", is_flag=True, help="Apply to all services")
    @click.pass_context
    def action_cmd(
        ctx: click.Context,
        service_type: str | None,
        alias: str | None,
        all_services: bool,
    ) -> None:
        if all_services:
            try:
                affected, total = _coordinator(ctx).start_stop_all(action)
            except PmmAdminError as e:
                _fail(e)
            console.print(
                f"[green]OK, {action.value} {affected} of {total} services.[/green]"
            )
            return
        if not service_type or not alias:
            raise click.UsageError("SERVICE_TYPE and ALIAS are required without --all")
        try:
            changed = _coordinator(ctx).start_stop(action, service_type, alias)
        except PmmAdminError as e:
            _fail(e)
        if changed:
            console.print(f"[green]OK, {action.value} {service_type} '{alias}'.[/green]")
        else:
            console.print(f"{service_type} '{alias}' is already {_STATE[action]}.")

    action_cmd.__doc__ = f"{action.value.capitalize()} monitoring services."


for _action in EnumMonitoringAction:
    _register_action(_action)


@cli.command("repair")
@click.option("--dry-run", is_flag=True, help="Only show what would be repaired")
@click.option("--ignore-errors", is_flag=True, help="Keep going on errors")
@click.pass_context
def repair_cmd(ctx: click.Context, dry_run: bool, ignore_errors: bool) -> None:
    """Remove orphaned local services and catalog records."""
    try:
        engine = _coordinator(ctx).reconciliation
        if dry_run:
            diff = engine.diff()
            for name in diff.orphaned_local:
                console.print(f"orphaned local service: {name}")
            for service_id in diff.missing_remote:
                console.print(f"catalog record without local service: {service_id}")
            if diff.is_empty:
                console.print("[green]No orphaned services found.[/green]")
            return
        report = engine.repair(ignore_errors=ignore_errors)
    except PmmAdminError as e:
        _fail(e)
    for failure in report.failures:
        console.print(f"[yellow]* {failure}[/yellow]")
    console.print(f"[green]OK, {report.removed_count} orphaned services removed.[/green]")


@cli.command("check")
@click.pass_context
def check_cmd(ctx: click.Context) -> None:
    """Check connectivity to the PMM server."""
    try:
        ping = _coordinator(ctx).check_server()
    except PmmAdminError as e:
        _fail(e)
    version = f" (QAN API {ping.api_version})" if ping.api_version else ""
    console.print(f"[green]OK, PMM server is alive{version}.[/green]")


def _status(ok: bool, bad: str = "DOWN") -> str:
    return "[green]OK[/green]" if ok else f"[red]{bad}[/red]"


@cli.command("check-network")
@click.pass_context
def check_network_cmd(ctx: click.Context) -> None:
    """Check connectivity between this client and the PMM server."""
    try:
        coordinator = _coordinator(ctx)
        report = coordinator.check_network()
        server_url = _load(ctx).server_url
    except PmmAdminError as e:
        _fail(e)

    bind = f" ({report.bind_address})" if report.behind_nat else ""
    console.print("[bold]PMM Network Status[/bold]\n")
    console.print(f"Server Address | {escape(report.server_address)}")
    console.print(f"Client Address | {escape(report.client_address + bind)}\n")

    console.print("[bold]* Connection: Client --> Server[/bold]")
    apis = Table("SERVER SERVICE", "STATUS")
    apis.add_row("Consul API", _status(report.consul_ok))
    apis.add_row("Prometheus API", _status(report.prometheus_ok))
    apis.add_row("Query Analytics API", _status(report.qan_ok))
    console.print(apis)

    if not report.node_registered:
        console.print(
            "No monitoring registered for this node under identifier "
            f"'{escape(coordinator.node_name)}'."
        )
        return
    if not report.prometheus_ok:
        console.print(
            "Prometheus is down. Please check if PMM server container runs properly."
        )
        return

    console.print("\n[bold]* Connection: Client <-- Server[/bold]")
    if not report.endpoints:
        console.print("No metric endpoints registered.")
        return
    table = Table("SERVICE TYPE", "NAME", "REMOTE ENDPOINT", "STATUS")
    for endpoint in report.endpoints:
        table.add_row(
            endpoint.service_type,
            escape(endpoint.name),
            escape(endpoint.remote_endpoint),
            _status(endpoint.up),
        )
    console.print(table)
    if report.endpoints_down:
        console.print(
            "When an endpoint is down it may indicate that the corresponding "
            "service is stopped (run 'pmm-admin list' to verify).\n"
            "If it's running, check the firewall settings whether this system "
            "allows incoming connections from server to address:port in question.\n"
            f"Also you can check the endpoint status by the URL: "
            f"{escape(server_url)}/prometheus/targets"
        )
        if report.behind_nat:
            console.print(
                "IMPORTANT: client and bind addresses are not the same which means "
                "you need to configure NAT/port forwarding to map them."
            )


@cli.command("info")
@click.pass_context
def info_cmd(ctx: click.Context) -> None:
    """Show PMM client configuration and runtime information."""
    try:
        config = _load(ctx)
    except PmmAdminError as e:
        _fail(e)
    bind = (
        f" ({config.bind_address})"
        if config.bind_address != config.client_address
        else ""
    )
    table = Table(title=f"pmm-admin {__version__}", show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row(
        "PMM Server",
        escape(f"{config.server_address} {config.server_security}".strip()),
    )
    table.add_row("Client Name", escape(config.client_name))
    table.add_row("Client Address", escape(config.client_address + bind))
    table.add_row("Service Manager", SERVICE_MANAGER)
    table.add_row("Python Version", platform.python_version())
    table.add_row("Runtime Info", f"{sys.platform}/{platform.machine()}")
    console.print(table)


def _reveal(secret: SecretStr | None) -> str:
    return secret.get_secret_value() if secret is not None else ""


@cli.command("show-passwords")
@click.pass_context
def show_passwords_cmd(ctx: click.Context) -> None:
    """Show the passwords stored in the config file."""
    try:
        config = _load(ctx)
    except PmmAdminError as e:
        _fail(e)
    auth = Table(title="HTTP basic authentication", show_header=False, box=None)
    auth.add_row("User", escape(config.server_user))
    auth.add_row("Password", escape(_reveal(config.server_password)))
    console.print(auth)
    mysql = Table(title="MySQL new user creation", show_header=False, box=None)
    mysql.add_row("Password", escape(_reveal(config.mysql_password)))
    console.print(mysql)


@cli.command("uninstall")
@click.pass_context
def uninstall_cmd(ctx: click.Context) -> None:
    """Remove all monitoring services, ignoring errors.

    Without a usable client configuration only local services are removed.
    """
    try:
        coordinator = _coordinator(ctx)
    except PmmAdminError as e:
        logger.warning("Skipping catalog cleanup", extra={"error": str(e)})
        count = uninstall_local_services(_supervisor(ctx))
    else:
        count = coordinator.uninstall()
    console.print(f"[green]OK, {count} services were removed.[/green]")


@cli.command("purge")
@click.argument("service_type")
@click.argument("alias")
@click.pass_context
def purge_cmd(ctx: click.Context, service_type: str, alias: str) -> None:
    """Purge metrics data of ALIAS on the PMM server."""
    try:
        _coordinator(ctx).purge_metrics(service_type, alias)
    except PmmAdminError as e:
        _fail(e)
    console.print(f"[green]OK, data purged for {service_type} '{alias}'.[/green]")


__all__: list[str] = ["cli"]


if __name__ == "__main__":
    cli()
