"""Runtime configuration for a migration run.

Reads settings from CLI args, environment variables, .env files, and YAML
config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    SPANDEX_SOURCE: Source expander name (required)
    SPANDEX_DEST: Destination expander name (required)
    SPANDEX_IMPORT_NAME: Group name for imported snippets (optional)
    AUTOKEY_DIR: AutoKey settings directory (optional, default: ~/.config/autokey)
    TEXTEXPANDER_FILE: TextExpander settings file
        (optional, default: ~/Dropbox/TextExpander/Settings.textexpander)
    SPANDEX_DEBUG: Enable debug logging (optional, default: false)
"""

import logging
import os
from dataclasses import dataclass

from .config_schema import DEFAULT_AUTOKEY_DIR, DEFAULT_TEXTEXPANDER_FILE

logger = logging.getLogger(__name__)


@dataclass
class Config:
    source: str
    dest: str
    import_name: str = ""
    autokey_dir: str = DEFAULT_AUTOKEY_DIR
    textexpander_file: str = DEFAULT_TEXTEXPANDER_FILE
    debug: bool = False

    @property
    def effective_import_name(self) -> str:
        """Import group name, defaulting to ``Imported from <source>``."""
        return self.import_name or f"Imported from {self.source}"


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If source or destination is empty, they are equal, or
            the import name is whitespace-only.
    """
    config.source = config.source.strip()
    config.dest = config.dest.strip()

    if not config.source or not config.dest:
        raise ValueError("-source and -dest must be set")

    if config.source == config.dest:
        raise ValueError(
            f"Source and destination must differ (both are '{config.source}')"
        )

    if config.import_name and not config.import_name.strip():
        raise ValueError("Import name cannot be whitespace-only")


def load_config(
    source: str | None = None,
    dest: str | None = None,
    import_name: str | None = None,
    autokey_dir: str | None = None,
    textexpander_file: str | None = None,
    debug: bool = False,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        source: Source expander name.
        dest: Destination expander name.
        import_name: Group name for imported snippets.
        autokey_dir: AutoKey settings directory.
        textexpander_file: TextExpander settings file.
        debug: Enable debug logging (CLI flag).
        yaml_fallbacks: Flattened values from the YAML config file.
            Used as fallback when CLI arg and env var are both unset.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If source or destination is missing after checking all
            sources, or the configuration is otherwise invalid.
    """
    fb = yaml_fallbacks or {}

    # --- String fields: CLI > env > YAML > default ---

    final_source = source or os.getenv("SPANDEX_SOURCE") or fb.get("source")
    final_dest = dest or os.getenv("SPANDEX_DEST") or fb.get("dest")
    if not final_source or not final_dest:
        raise ValueError(
            "-source and -dest must be set. Pass --source/--dest, set "
            "SPANDEX_SOURCE/SPANDEX_DEST, or add them to config.yml."
        )

    final_import_name = (
        import_name
        or os.getenv("SPANDEX_IMPORT_NAME")
        or fb.get("import_name")
        or ""
    )
    final_autokey_dir = (
        autokey_dir
        or os.getenv("AUTOKEY_DIR")
        or fb.get("autokey_dir")
        or DEFAULT_AUTOKEY_DIR
    )
    final_te_file = (
        textexpander_file
        or os.getenv("TEXTEXPANDER_FILE")
        or fb.get("textexpander_file")
        or DEFAULT_TEXTEXPANDER_FILE
    )

    # --- Boolean fields: CLI > env > YAML > default ---

    def get_bool_env(key: str) -> bool | None:
        """Return True/False from env var, or None if unset."""
        val = os.getenv(key)
        if val is None:
            return None
        return val.lower() in ("true", "1", "yes", "on")

    if debug:
        final_debug = True
    else:
        env_debug = get_bool_env("SPANDEX_DEBUG")
        if env_debug is not None:
            final_debug = env_debug
        else:
            final_debug = bool(fb.get("debug", False))

    config = Config(
        source=final_source,
        dest=final_dest,
        import_name=final_import_name,
        autokey_dir=final_autokey_dir,
        textexpander_file=final_te_file,
        debug=final_debug,
    )

    validate_config(config)

    return config
