"""
Settings for the Invoice Text Reconstruction System.

Everything the parser, capture readers and exporters can be tuned with
lives in ``config/settings.yaml``: the marker vocabulary, currency
prefixes, the GraphQL capture filter, output filename patterns and
logging. Components read single values through ``get_config`` and fall
back to an in-code default, so a partial settings file is valid.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

CONFIG_DIR = Path(__file__).parent
PROJECT_ROOT = CONFIG_DIR.parent
DEFAULT_SETTINGS = CONFIG_DIR / "settings.yaml"

_MISSING = object()


def load_settings(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a settings file.

    An empty file yields an empty mapping.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document root is not a mapping.
        yaml.YAMLError: If the file is not valid YAML.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open('r', encoding='utf-8') as handle:
        settings = yaml.safe_load(handle)

    if settings is None:
        return {}
    if not isinstance(settings, dict):
        raise ValueError(
            f"Configuration root must be a mapping, got {type(settings).__name__}: {path}"
        )
    return settings


def resolve_paths(settings: Dict[str, Any], root: Path = PROJECT_ROOT) -> Dict[str, Any]:
    """
    Anchor the relative entries of the ``paths`` section at ``root``.

    Example:
        >>> resolve_paths({"paths": {"output_dir": "outputs"}}, Path("/srv/app"))
        {'paths': {'output_dir': '/srv/app/outputs'}}
    """
    paths = settings.get('paths')
    if not isinstance(paths, dict):
        return settings

    settings['paths'] = {
        name: str(root / value) if value and not Path(value).is_absolute() else value
        for name, value in paths.items()
    }
    return settings


class ConfigurationManager:
    """
    Process-wide view of the loaded settings.

    The first construction loads the file; later constructions return the
    same instance and ignore their argument until ``reset()`` is called.

    Attributes:
        config_path (Path): Settings file in use.

    Example:
        >>> config = ConfigurationManager()
        >>> config.get("parser.markers.account_number")
        'Account Number'
        >>> config.get("parser.currency_prefixes")
        ['C$', '$']
    """

    _instance: Optional['ConfigurationManager'] = None

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        if cls._instance is None:
            instance = super().__new__(cls)
            instance.config_path = Path(config_path) if config_path else DEFAULT_SETTINGS
            instance._settings = {}
            instance.reload()
            # Only a successfully loaded instance becomes the shared one
            cls._instance = instance
        return cls._instance

    def reload(self) -> None:
        """Re-read the settings file."""
        self._settings = resolve_paths(load_settings(self.config_path))

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a value by dotted key.

        Args:
            key: Dotted path such as "output.html.filename_pattern".
            default: Returned when any part of the path is missing.

        Example:
            >>> config.get("capture.operation_name")
            'getDigitalInvoiceDetails'
            >>> config.get("nonexistent.key", "default_value")
            'default_value'
        """
        node: Any = self._settings
        for part in key.split('.'):
            node = node.get(part, _MISSING) if isinstance(node, Mapping) else _MISSING
            if node is _MISSING:
                return default
        return node

    def get_all(self) -> Dict[str, Any]:
        """Shallow copy of the whole settings mapping."""
        return dict(self._settings)

    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance so the next construction reloads."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """Shortcut for ``ConfigurationManager().get(key, default)``."""
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config', 'load_settings', 'resolve_paths']
