"""Loading of OpenAPI documents from YAML or JSON."""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema
import yaml

logger = logging.getLogger(__name__)

DOCUMENT_SCHEMA_PATH = Path(__file__).parent.parent / "schemas" / "openapi-document-schema.json"


def load_document(content: str, format: str = "yaml") -> dict[str, Any]:
    """Load a document from string content.

    Args:
        content: Document content as string
        format: Format of the content ('yaml' or 'json')

    Returns:
        Document dictionary

    Raises:
        ValueError: If format is not supported or parsing fails
    """
    if format == "yaml":
        try:
            document = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML: {e}") from e
    elif format == "json":
        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON: {e}") from e
    else:
        raise ValueError(f"Unsupported format: {format}. Use 'yaml' or 'json'")

    if not isinstance(document, dict):
        raise ValueError("Document must be a mapping")
    return document


def load_document_from_file(path: str | Path) -> dict[str, Any]:
    """Load a document from a YAML or JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file format is not supported or parsing fails
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")

    if path.suffix.lower() in [".yaml", ".yml"]:
        format = "yaml"
    elif path.suffix.lower() == ".json":
        format = "json"
    else:
        raise ValueError(f"Unsupported file extension: {path.suffix}. Use .yaml, .yml, or .json")

    logger.debug(f"Loading document from: {path}")
    return load_document(path.read_text(encoding="utf-8"), format=format)


def validate_document_structure(document: dict[str, Any]) -> None:
    """Check the structural shape of a document with JSON Schema.

    Only the containers the converter walks are checked; schema contents are
    validated when they are parsed.

    Raises:
        ValueError: If the document structure is invalid
    """
    with open(DOCUMENT_SCHEMA_PATH) as f:
        validation_schema = json.load(f)

    try:
        jsonschema.validate(instance=document, schema=validation_schema)
    except jsonschema.ValidationError as e:
        if e.absolute_path:
            path = ".".join(str(p) for p in e.absolute_path)
            raise ValueError(f"Document validation error at '{path}': {e.message}") from e
        raise ValueError(f"Document validation error: {e.message}") from e
