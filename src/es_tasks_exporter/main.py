"""
es-tasks-exporter entry point.

Usage:
    es-tasks-exporter --es-uri http://localhost:9200          Serve /metrics on :9114
    es-tasks-exporter --es-uri http://localhost:9200 probe    One pull, printed as a table
"""

from __future__ import annotations

import logging

import click

from es_tasks_exporter import __version__
from es_tasks_exporter.collector.base import DEFAULT_NAMESPACE
from es_tasks_exporter.config import DEFAULT_ES_URI, DEFAULT_PORT, ExporterConfig
from es_tasks_exporter.exporter import (
    build_collectors,
    build_http_client,
    probe as run_probe,
    serve,
    up_by_collector,
)


log = logging.getLogger("es_tasks_exporter")

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="es-tasks-exporter")
@click.option("--es-uri", default=DEFAULT_ES_URI, envvar="ES_EXPORTER_ES_URI",
              help="Elasticsearch base URL")
@click.option("--es-timeout", default=5.0, envvar="ES_EXPORTER_ES_TIMEOUT",
              help="Timeout in seconds for each Elasticsearch request")
@click.option("--es-insecure", is_flag=True, default=False, envvar="ES_EXPORTER_ES_INSECURE",
              help="Skip TLS certificate verification")
@click.option("--listen-address", default="0.0.0.0", envvar="ES_EXPORTER_LISTEN_ADDRESS",
              help="Address to expose metrics on")
@click.option("--port", default=DEFAULT_PORT, envvar="ES_EXPORTER_PORT",
              help="Port to expose metrics on")
@click.option("--namespace", default=DEFAULT_NAMESPACE, envvar="ES_EXPORTER_NAMESPACE",
              help="Metric name prefix")
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default="INFO",
              envvar="ES_EXPORTER_LOG_LEVEL", help="Logging level")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx, es_uri: str, es_timeout: float, es_insecure: bool, listen_address: str,
        port: int, namespace: str, log_level: str, verbose: bool):
    """Export Elasticsearch task and discovery-error metrics to Prometheus."""
    level = "DEBUG" if verbose else log_level.upper()
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = ExporterConfig(
            es_uri=es_uri,
            es_timeout=es_timeout,
            es_insecure=es_insecure,
            listen_address=listen_address,
            port=port,
            namespace=namespace,
            log_level=level,
        ).validate()
    except ValueError as e:
        raise click.BadParameter(str(e))

    log.debug("Starting with %s", config)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    # No subcommand means serve
    if ctx.invoked_subcommand is None:
        serve(config)


@cli.command(name="serve")
@click.pass_context
def serve_command(ctx):
    """Serve /metrics until interrupted."""
    serve(ctx.obj["config"])


@cli.command()
@click.pass_context
def probe(ctx):
    """Scrape the cluster once and print every metric the collectors emit."""
    from rich.console import Console
    from rich.table import Table

    config: ExporterConfig = ctx.obj["config"]
    client = build_http_client(config)
    try:
        samples = run_probe(build_collectors(client, config))
    finally:
        client.close()

    console = Console()
    table = Table(show_header=True, header_style="bold", title=f"Probe of {config.es_uri}")
    table.add_column("Collector")
    table.add_column("Metric")
    table.add_column("Type", width=8)
    table.add_column("Value", justify="right")

    for sample in samples:
        table.add_row(sample.collector, f"[cyan]{sample.name}[/cyan]", sample.kind, f"{sample.value:g}")
    console.print(table)

    down = [name for name, up in up_by_collector(samples).items() if up != 1]
    if down:
        console.print(f"[red]Scrape failed for: {', '.join(down)}[/red]")
        raise SystemExit(1)
    console.print("[bold green]All collectors up.[/bold green]")


if __name__ == "__main__":
    cli()
