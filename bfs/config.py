"""
Configuration management for bfs.

Handles loading and saving user configuration from:
- XDG config directory: ~/.config/bfs/config.json
- Fallback: ~/.bfs/config.json
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class ResolverConfig:
    """File naming conventions used when resolving modules."""
    source_suffix: str = ".py"
    data_suffixes: Tuple[str, ...] = (".json",)
    index_file: str = "__init__.py"
    manifest_file: str = "manifest.json"
    main_field: str = "main"
    dependency_dir: str = "site-packages"

    @property
    def exact_suffixes(self) -> Tuple[str, ...]:
        """Suffixes that name an exact file, so no fallback is attempted."""
        return (self.source_suffix,) + tuple(self.data_suffixes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ResolverConfig':
        data = dict(data)
        if "data_suffixes" in data:
            data["data_suffixes"] = tuple(data["data_suffixes"])
        return cls(**data)


@dataclass
class CLIConfig:
    """CLI default options."""
    verbose: bool = False
    color: bool = True


@dataclass
class BFSConfig:
    """Main bfs configuration."""
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    cli: CLIConfig = field(default_factory=CLIConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        resolver = asdict(self.resolver)
        resolver["data_suffixes"] = list(self.resolver.data_suffixes)
        return {
            "resolver": resolver,
            "cli": asdict(self.cli),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BFSConfig':
        """Create from dictionary."""
        return cls(
            resolver=ResolverConfig.from_dict(data.get("resolver", {})),
            cli=CLIConfig(**data.get("cli", {})),
        )


def get_config_path() -> Path:
    """
    Get configuration file path.

    Follows XDG Base Directory specification:
    1. ~/.config/bfs/config.json
    2. Fallback: ~/.bfs/config.json

    Returns:
        Path to config file
    """
    xdg_config_home = Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "bfs"
    else:
        config_dir = Path.home() / ".bfs"

    return config_dir / "config.json"


def load_config() -> BFSConfig:
    """
    Load configuration from file.

    Returns:
        BFSConfig instance with loaded values or defaults
    """
    config_path = get_config_path()

    if not config_path.exists():
        return BFSConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return BFSConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Using default configuration")
        return BFSConfig()


def save_config(config: BFSConfig) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save

    Returns:
        Path the configuration was written to
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def ensure_config_exists() -> Path:
    """
    Ensure configuration file exists, creating with defaults if not.

    Returns:
        Path to config file
    """
    config_path = get_config_path()

    if not config_path.exists():
        save_config(BFSConfig())

    return config_path


def update_config(
    # Resolver settings
    source_suffix: Optional[str] = None,
    index_file: Optional[str] = None,
    manifest_file: Optional[str] = None,
    main_field: Optional[str] = None,
    dependency_dir: Optional[str] = None,
    # CLI settings
    cli_verbose: Optional[bool] = None,
    cli_color: Optional[bool] = None,
) -> BFSConfig:
    """
    Update configuration.

    Only updates provided values, leaving others unchanged.

    Returns:
        The saved configuration
    """
    config = load_config()

    if source_suffix is not None:
        config.resolver.source_suffix = source_suffix
    if index_file is not None:
        config.resolver.index_file = index_file
    if manifest_file is not None:
        config.resolver.manifest_file = manifest_file
    if main_field is not None:
        config.resolver.main_field = main_field
    if dependency_dir is not None:
        config.resolver.dependency_dir = dependency_dir

    if cli_verbose is not None:
        config.cli.verbose = cli_verbose
    if cli_color is not None:
        config.cli.color = cli_color

    save_config(config)
    return config
