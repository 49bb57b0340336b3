"""
Manages loading, validation, and saving of the INI configuration file.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from spotify_cli.exceptions import ConfigurationError
from spotify_cli.models.config import ClientConfig

log = logging.getLogger(__name__)

TOKEN_ENV_VAR = "SPOTIFY_TOKEN"


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "spotify-cli"


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> ClientConfig:
        """
        Loads configuration from the INI file, applies overrides, and validates it.

        A missing file is not an error: defaults apply, and the token may come
        from the environment or the command line. Precedence, lowest first:
        file, ``SPOTIFY_TOKEN``, CLI options.

        Args:
            cli_options: A dictionary of options provided via the command line.
                Entries whose value is None are ignored.

        Returns:
            A validated ClientConfig object.

        Raises:
            ConfigurationError: If the file cannot be parsed or validation fails.
        """
        config_data: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(f"Error parsing configuration file: {e}") from e
            config_data = self.get_config_as_dict()
        else:
            log.debug(f"No configuration file at '{self.config_file_path}'.")

        if env_token := os.getenv(TOKEN_ENV_VAR):
            config_data["token"] = env_token

        if cli_options:
            config_data.update({k: v for k, v in cli_options.items() if v is not None})

        try:
            return ClientConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save.

        Raises:
            ConfigurationError: If the settings are invalid or the file cannot
                be written.
        """
        try:
            validated = ClientConfig(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

        config = configparser.ConfigParser(interpolation=None)
        config["DEFAULT"] = {}
        for key in sorted(ClientConfig.get_ini_keys()):
            value = getattr(validated, key)
            config["DEFAULT"][key] = "" if value is None else str(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        data: dict[str, Any] = {}
        for key in ("base_url", "token", "user_agent"):
            if section.get(key):
                data[key] = section.get(key)
        if section.get("request_timeout"):
            try:
                data["request_timeout"] = section.getfloat("request_timeout")
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid request_timeout in configuration file: {e}"
                ) from e
        return data
