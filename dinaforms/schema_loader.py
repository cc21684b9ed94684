"""
Schema loader for DinaForms.
Handles reading and decoding JSON form schemas from the assets directory.
"""

from collections import Counter
from pathlib import Path
from typing import Dict, Any, Optional, List, Union
import logging

from pydantic import ValidationError

from .config_loader import get_default_config
from .exceptions import LoadError, ParseError, handle_form_error
from .schema_models import FormSchema

logger = logging.getLogger(__name__)

SCHEMA_SUFFIX = ".json"


def read_schema_text(path: Union[str, Path]) -> str:
    """
    Read a schema asset as UTF-8 text.

    Args:
        path: Path to the schema file

    Returns:
        Raw schema text

    Raises:
        LoadError: If the file cannot be read or decoded as UTF-8
    """
    schema_path = Path(path)
    try:
        with open(schema_path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(schema_path, e) from e


def load(raw_text: Optional[str]) -> Optional[FormSchema]:
    """
    Decode raw schema text into a FormSchema.

    Args:
        raw_text: JSON text, or None

    Returns:
        Parsed schema, or None when there is nothing to decode

    Raises:
        ParseError: If the text is not a well-formed, well-typed schema
    """
    if raw_text is None or not raw_text.strip():
        logger.info("Empty schema text, nothing to render")
        return None

    try:
        schema = FormSchema.model_validate_json(raw_text)
    except ValidationError as e:
        raise ParseError(e, raw_text) from e

    logger.info(f"Parsed schema '{schema.title}' with {len(schema.fields)} fields "
                f"and {len(schema.sections)} sections")
    return schema


def load_form_schema(path: Union[str, Path]) -> Optional[FormSchema]:
    """
    Read and decode a schema file, absorbing load and parse failures.

    Args:
        path: Path to the schema file

    Returns:
        Parsed schema, or None if the file is unreadable or malformed
    """
    try:
        return load(read_schema_text(path))
    except (LoadError, ParseError) as e:
        handle_form_error(e, f"loading schema {path}")
        return None


def list_available_schemas(assets_dir: Union[str, Path]) -> List[str]:
    """
    List all schema files in the assets directory.

    Returns:
        Sorted list of schema filenames
    """
    directory = Path(assets_dir)
    if not directory.is_dir():
        logger.warning(f"Schema assets directory not found: {directory}")
        return []

    return sorted(f.name for f in directory.glob(f"*{SCHEMA_SUFFIX}") if f.is_file())


def load_configured_schema(config: Optional[Dict[str, Any]] = None) -> Optional[FormSchema]:
    """
    Load the schema named in the configuration.

    Falls back to the configured fallback schema when the primary asset
    does not exist.

    Args:
        config: Configuration dictionary (defaults when omitted)

    Returns:
        Parsed schema or None
    """
    if config is None:
        config = get_default_config()

    schema_config = config.get('schema', {})
    assets_dir = Path(schema_config.get('assets_dir', 'assets'))
    primary_schema = schema_config.get('primary_schema', 'all-fields.json')
    fallback_schema = schema_config.get('fallback_schema')

    primary_path = assets_dir / primary_schema
    if primary_path.exists() or not fallback_schema:
        logger.info(f"Using primary schema: {primary_path}")
        return load_form_schema(primary_path)

    logger.warning(f"Primary schema {primary_path} not found, trying fallback: {fallback_schema}")
    return load_form_schema(assets_dir / fallback_schema)


def load_selected_schema(schema_name: str,
                         config: Optional[Dict[str, Any]] = None) -> Optional[FormSchema]:
    """
    Load the schema picked in the UI.

    The configured primary schema goes through load_configured_schema so
    its fallback applies; any other asset is loaded directly.

    Args:
        schema_name: Asset file name inside the assets directory
        config: Configuration dictionary (defaults when omitted)

    Returns:
        Parsed schema or None
    """
    if config is None:
        config = get_default_config()

    schema_config = config.get('schema', {})
    if schema_name == schema_config.get('primary_schema', 'all-fields.json'):
        return load_configured_schema(config)

    assets_dir = Path(schema_config.get('assets_dir', 'assets'))
    return load_form_schema(assets_dir / schema_name)


def find_unsectioned_fields(schema: FormSchema) -> List[int]:
    """Positions of fields that no section range covers."""
    return [
        position for position in range(len(schema.fields))
        if not any(section.contains(position) for section in schema.sections)
    ]


def get_schema_info(schema: FormSchema) -> Dict[str, Any]:
    """
    Get metadata information about a schema.

    Args:
        schema: Parsed schema

    Returns:
        Dictionary with schema metadata
    """
    return {
        "title": schema.title or "Untitled Form",
        "field_count": len(schema.fields),
        "section_count": len(schema.sections),
        "required_fields": [field.name for field in schema.fields if field.required],
        "field_types": dict(Counter(field.field_type.value for field in schema.fields)),
        "unsectioned_fields": find_unsectioned_fields(schema)
    }
