"""Utilities for loading and saving schemas from/to JSON files."""

from pathlib import Path
from pydantic import TypeAdapter, ValidationError
from schemacascade.errors import SchemaLoadError
from schemacascade.schema.models import Schema


def load_schema_from_json(schema_path: Path) -> Schema:
    """
    Load a Schema from a JSON file.

    The file holds an ``entities`` object keyed by type name; each entity
    has ordered ``fields`` and an optional ``metadata`` bag.

    Args:
        schema_path: Path to the JSON file

    Returns:
        Loaded Schema instance

    Raises:
        FileNotFoundError: If the file doesn't exist
        SchemaLoadError: If the file is empty or does not validate
    """
    schema_path = Path(schema_path)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")

    file_content = schema_path.read_text(encoding="utf-8").strip()
    if not file_content:
        raise SchemaLoadError(f"Schema file is empty: {schema_path}")

    try:
        return TypeAdapter(Schema).validate_json(file_content)
    except ValidationError as e:
        raise SchemaLoadError(f"Failed to load schema from {schema_path}: {e}") from e


def save_schema_to_json(schema: Schema, schema_path: Path) -> None:
    """
    Save a Schema to a JSON file.

    Args:
        schema: Schema instance to save
        schema_path: Path where to save the JSON file

    Note:
        Creates parent directories if they don't exist.
    """
    schema_path = Path(schema_path)
    schema_path.parent.mkdir(parents=True, exist_ok=True)
    schema_path.write_text(schema.model_dump_json(indent=2, exclude_none=True), encoding="utf-8")
