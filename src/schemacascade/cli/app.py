"""Typer CLI application."""

import json
from pathlib import Path
from typing import Optional

import typer

from schemacascade.cascade import create_entity
from schemacascade.config.logging import setup_logging
from schemacascade.errors import SchemaCascadeError
from schemacascade.generation.config import GenerationConfig
from schemacascade.store.memory import MemoryStore
from schemacascade.utils.schema_io import load_schema_from_json
from schemacascade.verbs import derive_reverse_verb

app = typer.Typer(help="schemacascade: generate entity graphs from a schema")


@app.command()
def generate(
    schema_json: Path,
    type_name: str,
    out: Optional[Path] = typer.Option(None, "--out", help="Write the store dump here"),
    no_ai: bool = typer.Option(False, "--no-ai", help="Disable the content backend"),
    data: Optional[str] = typer.Option(None, "--data", help="Initial field values as JSON"),
):
    """
    Create one entity of TYPE_NAME and everything it cascades into.

    Args:
        schema_json: Path to the schema JSON file
        type_name: Entity type to create
        out: Optional output path for the generated records
        no_ai: Use placeholder synthesis only
        data: Initial field values as a JSON object
    """
    setup_logging()

    try:
        initial = json.loads(data) if data else {}
    except json.JSONDecodeError as e:
        typer.echo(f"Error: --data is not valid JSON: {e}", err=True)
        raise typer.Exit(1)
    if not isinstance(initial, dict):
        typer.echo("Error: --data must be a JSON object", err=True)
        raise typer.Exit(1)

    typer.echo(f"Loading schema from {schema_json}")
    try:
        schema = load_schema_from_json(schema_json)
    except (FileNotFoundError, SchemaCascadeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    config = GenerationConfig.from_settings(enabled=False) if no_ai else GenerationConfig.from_settings()
    store = MemoryStore()

    typer.echo(f"Generating {type_name}...")
    try:
        created = create_entity(type_name, initial, schema, store, config)
    except SchemaCascadeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    dump = {
        "root": created,
        "records": store.records,
        "relations": [r.model_dump() for r in store.relations],
    }
    text = json.dumps(dump, indent=2, ensure_ascii=False)

    if out is None:
        typer.echo(text)
    else:
        out = Path(out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
        typer.echo(f"Records written to {out}")

    total = sum(len(t) for t in store.records.values())
    typer.echo(f"✓ Complete! {total} record(s), {len(store.relations)} relation(s)")


@app.command("reverse-verb")
def reverse_verb(verb: str):
    """Print the reverse form of a relationship verb."""
    typer.echo(derive_reverse_verb(verb))


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
