"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables (PRESTO_*)
  2. Project config (.presto/config.yaml)
  3. User config (~/.presto/config.yaml)
  4. Defaults

Malformed files are logged and skipped; rendering never fails because
of a bad config file.
"""

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field, fields
from typing import Optional, Dict, Any, List

from .presentation.symbols import VALID_SYMBOLS

logger = logging.getLogger(__name__)


# Output formats understood by presto.output.get_renderer()
FORMATS = ("pretty", "markdown", "html", "csv")

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Environment variable -> (section, setting)
ENV_OVERRIDES = {
    "PRESTO_SYMBOLS": ("display", "symbols"),
    "PRESTO_FORMAT": ("display", "format"),
    "PRESTO_COLOR": ("display", "color"),
    "PRESTO_MAX_DEPTH": ("tree", "max_depth"),
}

TRUE_VALUES = ("true", "1", "yes", "on")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "unicode"  # "unicode" | "ascii"
    format: str = "pretty"    # "pretty" | "markdown" | "html" | "csv"
    color: bool = False       # ANSI colors in pretty output

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.symbols not in VALID_SYMBOLS:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(VALID_SYMBOLS)}"
        if self.format not in FORMATS:
            return f"Unknown format '{self.format}'. Valid: {', '.join(FORMATS)}"
        return None


@dataclass
class TableConfig:
    """Table layout limits."""
    min_width: int = 8
    max_width: int = 50
    padding: int = 2

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.min_width < 0 or self.padding < 0:
            return "Table widths and padding must not be negative"
        if self.min_width > self.max_width:
            return f"min_width ({self.min_width}) exceeds max_width ({self.max_width})"
        return None


@dataclass
class TreeConfig:
    """Tree layout preferences."""
    max_depth: int = -1  # -1 = unlimited
    compact: bool = True
    show_icons: bool = True
    promote_trees: bool = False  # Sequences with `children` render as trees
    collapsed: List[str] = field(default_factory=list)

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.max_depth < -1:
            return f"Invalid max_depth {self.max_depth}. Use -1 for unlimited"
        return None


@dataclass
class ValueConfig:
    """Value formatting defaults."""
    date_format: str = DEFAULT_DATE_FORMAT
    float_digits: int = 2

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.float_digits < 0:
            return f"Invalid float_digits {self.float_digits}"
        if not self.date_format:
            return "date_format must not be empty"
        return None


@dataclass
class Config:
    """Application configuration."""
    display: DisplayConfig = field(default_factory=DisplayConfig)
    table: TableConfig = field(default_factory=TableConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    values: ValueConfig = field(default_factory=ValueConfig)

    SECTIONS = ("display", "table", "tree", "values")

    def validate(self) -> Optional[str]:
        """First validation error across sections, or None."""
        for name in self.SECTIONS:
            error = getattr(self, name).validate()
            if error:
                return f"{name}: {error}"
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "display": {
                "symbols": self.display.symbols,
                "format": self.display.format,
                "color": self.display.color,
            },
            "table": {
                "min_width": self.table.min_width,
                "max_width": self.table.max_width,
                "padding": self.table.padding,
            },
            "tree": {
                "max_depth": self.tree.max_depth,
                "compact": self.tree.compact,
                "show_icons": self.tree.show_icons,
                "promote_trees": self.tree.promote_trees,
                "collapsed": list(self.tree.collapsed),
            },
            "values": {
                "date_format": self.values.date_format,
                "float_digits": self.values.float_digits,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        display_data = data.get("display") or {}
        table_data = data.get("table") or {}
        tree_data = data.get("tree") or {}
        values_data = data.get("values") or {}

        return cls(
            display=DisplayConfig(
                symbols=str(display_data.get("symbols", "unicode")).lower(),
                format=str(display_data.get("format", "pretty")).lower(),
                color=_parse_bool(display_data.get("color", False)),
            ),
            table=TableConfig(
                min_width=int(table_data.get("min_width", 8)),
                max_width=int(table_data.get("max_width", 50)),
                padding=int(table_data.get("padding", 2)),
            ),
            tree=TreeConfig(
                max_depth=int(tree_data.get("max_depth", -1)),
                compact=_parse_bool(tree_data.get("compact", True)),
                show_icons=_parse_bool(tree_data.get("show_icons", True)),
                promote_trees=_parse_bool(tree_data.get("promote_trees", False)),
                collapsed=list(tree_data.get("collapsed") or []),
            ),
            values=ValueConfig(
                date_format=values_data.get("date_format", DEFAULT_DATE_FORMAT),
                float_digits=int(values_data.get("float_digits", 2)),
            ),
        )


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment (PRESTO_*)
      2. Project config (.presto/config.yaml)
      3. User config (~/.presto/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".presto"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".presto"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read(self.project_config_path))

        # Layer 3: Environment overrides
        for env_key, (section, setting) in ENV_OVERRIDES.items():
            if os.environ.get(env_key):
                config_data.setdefault(section, {})[setting] = os.environ[env_key]

        try:
            config = Config.from_dict(config_data)
        except (TypeError, ValueError) as e:
            logger.warning("Invalid configuration values, using defaults: %s", e)
            config = Config()

        error = config.validate()
        if error:
            logger.warning("Invalid configuration, using defaults: %s", error)
            config = Config()

        self._config = config
        return self._config

    def _read(self, path: Path) -> Dict[str, Any]:
        """Read one YAML layer; malformed or unreadable files are skipped."""
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring malformed config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level is not a mapping", path)
            return {}
        return data

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "display.symbols")
            value: Value to set (coerced to the setting's type)
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'display.symbols')"

        section_name, setting = parts
        if section_name not in Config.SECTIONS:
            return f"Unknown section: {section_name}. Valid: {', '.join(Config.SECTIONS)}"

        section = getattr(config, section_name)
        settings = {f.name: f for f in fields(section)}
        if setting not in settings:
            return f"Unknown {section_name} setting: {setting}. Valid: {', '.join(settings)}"

        previous = getattr(section, setting)
        try:
            coerced = self._coerce(previous, value)
        except ValueError:
            return f"Invalid value for {key}: {value!r}"

        setattr(section, setting, coerced)
        error = section.validate()
        if error:
            setattr(section, setting, previous)
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    @staticmethod
    def _coerce(current: Any, value: str) -> Any:
        """Convert a string to the type of the current setting."""
        if isinstance(current, bool):
            return _parse_bool(value)
        if isinstance(current, int):
            return int(value)
        if isinstance(current, list):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section_name, setting = parts
        if section_name not in Config.SECTIONS:
            return None

        section = getattr(config, section_name)
        if not hasattr(section, setting):
            return None

        value = getattr(section, setting)
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, list):
            return ", ".join(value)
        return str(value)

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        lines = ["Configuration:"]
        for section_name, settings in config.to_dict().items():
            lines.extend(["", f"{section_name.capitalize()}:"])
            for setting, value in settings.items():
                lines.append(f"  {setting}: {value}")
        lines.extend([
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ])
        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
