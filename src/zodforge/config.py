"""Configuration file loading for conversion options.

Options can be kept in a ``zodforge.yml`` file next to the document:

```yaml
strict_objects: true
with_description: true
complexity_threshold: 6
```
"""

import json
import logging
import os
from pathlib import Path

import yaml
from jsonschema import ValidationError, validate
from pydantic import ValidationError as PydanticValidationError

from zodforge.conversion.options import ConversionOptions

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ZODFORGE_CONFIG"
CONFIG_FILE_NAME = "zodforge.yml"
CONFIG_SCHEMA_PATH = Path(__file__).parent / "schemas" / "config-schema.json"


def find_config_file() -> Path | None:
    """Locate the configuration file.

    Looks for:
        1. ZODFORGE_CONFIG environment variable
        2. ./zodforge.yml

    Returns:
        Path to the config file, or None if there is none
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    candidate = Path.cwd() / CONFIG_FILE_NAME
    if candidate.exists():
        return candidate
    return None


def load_conversion_options(config_path: Path | None = None) -> ConversionOptions:
    """Load conversion options from a YAML file.

    Args:
        config_path: Optional explicit path to the config file. If not
            provided, the file is looked up with `find_config_file`.

    Returns:
        ConversionOptions; all defaults when no config file exists

    Raises:
        FileNotFoundError: If an explicitly named config file doesn't exist
        ValueError: If the config is invalid
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            logger.debug("No config file found, using default options")
            return ConversionOptions()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found at {config_path}")

    logger.debug(f"Loading config from: {config_path}")

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML config file {config_path}: {e}") from e

    if not raw_config:
        logger.info("Empty config file, using default options")
        return ConversionOptions()

    with open(CONFIG_SCHEMA_PATH) as f:
        schema = json.load(f)

    try:
        validate(instance=raw_config, schema=schema)
    except ValidationError as e:
        raise ValueError(f"Invalid config file {config_path}: {e.message}") from e

    try:
        return ConversionOptions(**raw_config)
    except PydanticValidationError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e
