"""CLI main entry point."""

import json
import logging
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from .config import Config
from .db import close_db
from .dependencies import detect_circular_dependencies
from .errors import ConfigException, FormEngineException, StructuralError
from .log import setup as setup_log
from .migration import load_schema
from .storages import get_storage
from .validation import validate_form
from .visibility import visible_fields

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Cannot read JSON from {path}: {e}")


def _load_schema_file(path: Path):
    document = _read_json(path)
    try:
        return load_schema(document)
    except StructuralError as e:
        logger.error(f"Invalid form structure in {path}: {e}")
        raise click.ClickException(f"Invalid form structure: {e}")
    except ValidationError as e:
        logger.error(f"Invalid form schema in {path}: {e}")
        raise click.ClickException(f"Invalid form schema: {e}")


@click.group()
@click.option("--config", "-c", default="config.toml", help="Configuration file path")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output")
@click.pass_context
def cli(ctx, config: str, verbose: bool):
    """formengine - form schema rule engine tools."""
    ctx.ensure_object(dict)
    try:
        cfg = Config.load_from_file(config, missing_ok=True)
    except ConfigException as e:
        raise click.ClickException(str(e))

    setup_log(cfg.log.file, verbose=verbose or cfg.log.verbose)
    ctx.obj["config"] = cfg


@cli.command(name="check")
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(schema_file: Path):
    """Check a form schema document and report dependency cycles."""
    schema = _load_schema_file(schema_file)
    cycles = detect_circular_dependencies(schema.fields)

    click.echo(f"{schema.id}\tversion={schema.version}\tfields={len(schema.fields)}")
    for field_id in cycles:
        logger.warning(f"Conditional dependency cycle entered at field {field_id}")
        click.echo(f"cycle\t{field_id}")


@cli.command(name="validate")
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("data_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def validate(ctx, schema_file: Path, data_file: Path):
    """Validate an answers document against a form schema."""
    schema = _load_schema_file(schema_file)
    form_data = _read_json(data_file)
    if not isinstance(form_data, dict):
        raise click.ClickException("Answers document must be a JSON object")

    shown = visible_fields(schema.fields, form_data)
    logger.debug(f"Visible fields: {', '.join(f.id for f in shown)}")

    result = validate_form(schema.fields, form_data)
    if result.valid:
        click.echo("valid")
        return

    for field_id, message in result.errors.items():
        click.echo(f"{field_id}\t{message}")
    ctx.exit(1)


@cli.command(name="import")
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_form(ctx, schema_file: Path):
    """Store a form schema document in the configured storage."""
    cfg = ctx.obj["config"]
    schema = _load_schema_file(schema_file)
    try:
        storage = get_storage(config=cfg)
        saved = storage.save(schema)
        click.echo(saved.id)
    except FormEngineException as e:
        logger.error(f"Import failed: {e}", exc_info=True)
        raise click.ClickException(str(e))
    finally:
        close_db()


@cli.command(name="export")
@click.argument("form_id")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_context
def export_form(ctx, form_id: str, output: Path | None):
    """Print (or write) a stored form schema document."""
    cfg = ctx.obj["config"]
    try:
        storage = get_storage(config=cfg)
        schema = storage.load(form_id)
    except FormEngineException as e:
        logger.error(f"Export failed: {e}", exc_info=True)
        raise click.ClickException(str(e))
    finally:
        close_db()

    if schema is None:
        raise click.ClickException(f"Form not found: {form_id}")

    content = json.dumps(schema.to_document(), indent=2, ensure_ascii=False)
    if output is None:
        click.echo(content)
    else:
        output.write_text(content, encoding="utf-8")
        logger.info(f"Form {form_id} written to {output}")


@cli.command(name="list")
@click.pass_context
def list_forms(ctx):
    """List stored forms."""
    cfg = ctx.obj["config"]
    try:
        storage = get_storage(config=cfg)
        forms = storage.list()
    except FormEngineException as e:
        logger.error(f"Listing forms failed: {e}", exc_info=True)
        raise click.ClickException(str(e))
    finally:
        close_db()

    click.echo("id\tsaved_at\tfields\ttitle")
    for saved in forms:
        click.echo(
            f"{saved.id}\t{saved.saved_at.isoformat()}\t"
            f"{len(saved.form.fields)}\t{saved.form.metadata.title}"
        )


@cli.command(name="delete")
@click.argument("form_id")
@click.pass_context
def delete_form(ctx, form_id: str):
    """Delete a stored form."""
    cfg = ctx.obj["config"]
    try:
        storage = get_storage(config=cfg)
        storage.delete(form_id)
    except FormEngineException as e:
        logger.error(f"Delete failed: {e}", exc_info=True)
        raise click.ClickException(str(e))
    finally:
        close_db()
    click.echo(f"deleted\t{form_id}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
