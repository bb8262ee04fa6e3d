"""CLI entry point for apifox-yapi."""

import asyncio
import json
import logging
from pathlib import Path

import click
import httpx
import structlog
import yaml

from apifox_yapi.config import get_settings
from apifox_yapi.errors import ApifoxYapiError
from apifox_yapi.gateway import ApifoxGateway
from apifox_yapi.generator.models import CategoryConfig, Interface, SyntheticalConfig
from apifox_yapi.parser.tree import find_folder
from apifox_yapi.session import list_interfaces, load_project_info, select_categories


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.getLevelName(get_settings().log_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    # stdout may carry the converted interfaces, so logs go to stderr through logging
    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def _dump(interfaces: list[Interface], fmt: str) -> str:
    data = [i.model_dump(by_alias=True, mode="json") for i in interfaces]
    if fmt == "yaml":
        return yaml.safe_dump(data, allow_unicode=True, sort_keys=False)
    return json.dumps(data, ensure_ascii=False, indent=2)


async def _categories(gateway: ApifoxGateway, token: str, ids: tuple[int, ...]) -> list[tuple[int, str]]:
    async with gateway:
        info = await load_project_info(gateway, token)
    selected = select_categories(info.context, CategoryConfig(ids=list(ids)))
    return [(cat_id, find_folder(cat_id, info.context.tree).name) for cat_id in selected]


async def _interfaces(gateway: ApifoxGateway, token: str, cat_id: int) -> list[Interface]:
    async with gateway:
        info = await load_project_info(gateway, token)
        return await list_interfaces(gateway, info.context, SyntheticalConfig(id=cat_id))


@click.group()
@click.option("--base-url", default=None, help="Apifox shared-docs API root.")
@click.option("--timeout", default=None, type=float, help="HTTP timeout in seconds.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, base_url: str | None, timeout: float | None, verbose: bool):
    """apifox-yapi: convert Apifox shared docs into YApi interface records."""
    _configure_logging(verbose)
    ctx.obj = ApifoxGateway(base_url=base_url, timeout=timeout)


@main.command()
@click.argument("token")
@click.option("--cat", "cat_ids", multiple=True, type=int, help="Category id to keep (repeatable). Default: all.")
@click.pass_obj
def categories(gateway: ApifoxGateway, token: str, cat_ids: tuple[int, ...]):
    """List the category ids selected from the shared docs TOKEN."""
    try:
        selected = asyncio.run(_categories(gateway, token, cat_ids))
    except (ApifoxYapiError, httpx.HTTPError) as e:
        raise click.ClickException(str(e)) from e

    for cat_id, name in selected:
        click.echo(f"{cat_id}\t{name}" if name else str(cat_id))
    click.echo(f"Selected {len(selected)} categories.")


@main.command()
@click.argument("token")
@click.option("--cat", "cat_id", required=True, type=int, help="Category id to convert.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file. Default: stdout.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.pass_obj
def interfaces(gateway: ApifoxGateway, token: str, cat_id: int, output: Path | None, fmt: str):
    """Convert every endpoint of category CAT_ID into YApi interfaces."""
    try:
        result = asyncio.run(_interfaces(gateway, token, cat_id))
    except (ApifoxYapiError, httpx.HTTPError) as e:
        raise click.ClickException(str(e)) from e

    text = _dump(result, fmt)
    if output is None:
        click.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Saved {len(result)} interfaces to {output}")
