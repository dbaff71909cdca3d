"""
Configuration management for unfurl.

Provides a hierarchical configuration with sensible defaults. Supports both
a user file (~/.config/unfurl/config.toml) and local files (unfurl.toml).
A loaded UnfurlConfig is passed explicitly to the fetcher, extractors and
formatter; nothing reads configuration from module state.
"""
import os
import tomli
import tomli_w
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field, asdict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
DEFAULT_OEMBED_USER_AGENT = "Mozilla/5.0 (compatible; unfurl)"
DEFAULT_OEMBED_ENDPOINT = "https://publish.twitter.com/oembed"


@dataclass
class UnfurlConfig:
    """
    unfurl configuration with sensible defaults.

    Configuration hierarchy (highest to lowest priority):
    1. Command-line arguments
    2. Environment variables (UNFURL_*)
    3. Explicit config file (--config)
    4. Local config file (./unfurl.toml or ./.unfurlrc)
    5. User config file (~/.config/unfurl/config.toml)
    6. System defaults
    """

    # Network settings
    timeout: int = field(default=10)  # Request timeout in seconds
    user_agent: str = field(default=DEFAULT_USER_AGENT)
    oembed_user_agent: str = field(default=DEFAULT_OEMBED_USER_AGENT)
    verify_ssl: bool = field(default=True)

    # Social embeds
    oembed_endpoint: str = field(default=DEFAULT_OEMBED_ENDPOINT)
    social_hosts: List[str] = field(default_factory=lambda: ["twitter.com", "x.com"])
    render_social: bool = field(default=True)

    # Headless browser
    render_pages: bool = field(default=False)  # Render ordinary pages before reading og:* tags
    headless: bool = field(default=True)
    browser_executable: Optional[str] = field(default=None)
    render_timeout: int = field(default=30)
    render_ready_selector: Optional[str] = field(default=None)

    # Rendering
    fallback_link: bool = field(default=False)  # Emit "> [url](url)" when nothing else renders
    output_format: str = field(default="lines")  # lines, json

    # Preview images
    download_images: bool = field(default=False)
    image_dir: str = field(default="images")
    use_absolute_path: bool = field(default=False)
    image_template: str = field(default="![]($FILE_PATH)")

    # Advanced
    log_level: str = field(default="INFO")

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "UnfurlConfig":
        """
        Load configuration from files and environment.

        Args:
            config_file: Specific config file to load (merged after the others)

        Returns:
            Merged configuration object
        """
        config = cls()

        user_config_path = Path.home() / ".config" / "unfurl" / "config.toml"
        if user_config_path.exists():
            config._merge(cls._load_toml(user_config_path))

        local_paths = [
            Path.cwd() / "unfurl.toml",
            Path.cwd() / ".unfurlrc",
        ]

        for path in local_paths:
            if path.exists():
                config._merge(cls._load_toml(path))
                break

        if config_file and config_file.exists():
            config._merge(cls._load_toml(config_file))

        config._apply_env_vars()
        config._expand_paths()

        return config

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        """Load TOML configuration file."""
        with open(path, "rb") as f:
            return tomli.load(f)

    def _merge(self, data: Dict[str, Any]):
        """Merge configuration data into this instance."""
        for key, value in data.items():
            if not hasattr(self, key):
                continue
            # A bare string for a list field is read as comma-separated items
            if isinstance(getattr(self, key), list) and isinstance(value, str):
                self.set_value(key, value)
            else:
                setattr(self, key, value)

    def _apply_env_vars(self):
        """Apply environment variables with UNFURL_ prefix."""
        prefix = "UNFURL_"
        for key, value in os.environ.items():
            if key.startswith(prefix):
                config_key = key[len(prefix):].lower()
                if hasattr(self, config_key):
                    self.set_value(config_key, value)

    def set_value(self, key: str, value: str):
        """
        Set a field from its string form, converting to the field's type.

        Raises:
            KeyError: If the key is not a configuration field
        """
        if not hasattr(self, key):
            raise KeyError(key)
        current_value = getattr(self, key)
        if isinstance(current_value, bool):
            setattr(self, key, value.lower() in ("true", "1", "yes"))
        elif isinstance(current_value, int):
            setattr(self, key, int(value))
        elif isinstance(current_value, list):
            setattr(self, key, [item.strip() for item in value.split(",") if item.strip()])
        else:
            setattr(self, key, value)

    def _expand_paths(self):
        """Expand ~ and environment variables in paths."""
        path_fields = ["image_dir", "browser_executable"]
        for field_name in path_fields:
            value = getattr(self, field_name)
            if isinstance(value, str):
                expanded = os.path.expanduser(os.path.expandvars(value))
                setattr(self, field_name, expanded)

    def save(self, path: Optional[Path] = None):
        """
        Save current configuration to TOML file.

        Args:
            path: Path to save to (defaults to user config)
        """
        if path is None:
            path = Path.home() / ".config" / "unfurl" / "config.toml"

        path.parent.mkdir(parents=True, exist_ok=True)

        # TOML has no null; unset optional fields are left out
        data = {key: value for key, value in asdict(self).items() if value is not None}
        with open(path, "wb") as f:
            tomli_w.dump(data, f)


def init_config(config_file: Optional[Path] = None, **kwargs) -> UnfurlConfig:
    """
    Load configuration and apply command-line overrides.

    Args:
        config_file: Specific config file to load
        **kwargs: Configuration overrides; None values are ignored

    Returns:
        Configured instance
    """
    config = UnfurlConfig.load(config_file)

    for key, value in kwargs.items():
        if hasattr(config, key) and value is not None:
            setattr(config, key, value)

    return config
