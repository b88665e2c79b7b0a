"""Click entry point for rolloutcheck."""

from __future__ import annotations

import asyncio

import click

from rolloutcheck import __version__
from rolloutcheck.app import Target, parse_target, run_status_check
from rolloutcheck.config import load_config, parse_duration
from rolloutcheck.errors import ConfigError
from rolloutcheck.models.status import StatusCode


def _parse_targets(_ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]) -> list[Target]:
    try:
        return [parse_target(v) for v in values]
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.group()
@click.version_option(__version__, prog_name="rolloutcheck")
def cli() -> None:
    """Report rollout status of Kubernetes workloads."""


@cli.command()
@click.argument("targets", nargs=-1, required=True, callback=_parse_targets)
@click.option("-n", "--namespace", default=None, help="Namespace of the workloads.")
@click.option("--context", "kube_context", default=None, help="kubectl context to use.")
@click.option("--deadline", default=None, help="Overall deadline, e.g. 90s, 5m.")
@click.option("--mute-logs/--no-mute-logs", default=None, help="Write full pod logs to files.")
@click.option(
    "--observe-pods/--no-observe-pods",
    default=None,
    help="Read pod state and logs through the Kubernetes API.",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default=None,
)
@click.option("--log-format", type=click.Choice(["console", "json"]), default=None)
def check(
    targets: list[Target],
    namespace: str | None,
    kube_context: str | None,
    deadline: str | None,
    mute_logs: bool | None,
    observe_pods: bool | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """Wait for TARGETS (deployment/<name>, pod/<name>) to finish rolling out."""
    try:
        config = load_config()
        if deadline is not None:
            config.status_check.deadline = parse_duration(deadline)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    if namespace is not None:
        config.kubectl.namespace = namespace
    if kube_context is not None:
        config.kubectl.kube_context = kube_context
    if mute_logs is not None:
        config.status_check.mute_logs = mute_logs
    if observe_pods is not None:
        config.status_check.observe_pods = observe_pods
    if log_level is not None:
        config.log.level = log_level
    if log_format is not None:
        config.log.format = log_format

    code = asyncio.run(run_status_check(config, targets))
    click.echo(f"status check finished: {code.value}")
    if code != StatusCode.SUCCESS:
        raise SystemExit(1)
