"""
Configuration provider for pathstore.

This module reads and writes the single JSON record holding process
settings (ports, directories, feature flags). The storage layer only
consumes ``root_data_dir`` from it.
"""

import json
from pathlib import Path

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

logger = structlog.get_logger(__name__)


class ConfigError(Exception):
    """Configuration file could not be read or validated."""

    def __init__(self, message: str, config_file: str | None = None):
        super().__init__(message)
        self.message = message
        self.config_file = config_file


class ServerConfig(BaseModel):
    """Process settings persisted as a JSON record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    installed: bool = Field(default=False, description="Installation finished")
    maintenance: bool = Field(default=False, description="Maintenance mode")
    port: int = Field(default=8080, ge=0, le=65535, description="Listening port")
    read_only: bool = Field(default=False, alias="readOnly", description="Reject write operations")
    root_data_dir: str = Field(default="", alias="rootDataDir", description="Storage root directory")
    root_temp_dir: str = Field(default="", alias="rootTempDir", description="Temporary directory")
    token_secret: str = Field(default="", alias="tokenSecret", description="Secret for signing tokens")
    token_cipher_suite: str = Field(default="", alias="tokenCipherSuite", description="Token signing algorithm")
    serve_web: str = Field(default="", alias="serveWeb", description="Serve the web client")
    web_dir: str = Field(default="", alias="webDir", description="Web client directory")
    web_url: str = Field(
        default="",
        alias="webURL",
        validation_alias=AliasChoices("webURL", "webUR", "web_url"),
        description="Public URL of the web client",
    )


class ConfigProvider:
    """Reads and writes a ServerConfig JSON file."""

    def __init__(self, config_file: str | Path):
        self.config_file = Path(config_file)

    def parse(self) -> ServerConfig:
        """
        Load the configuration record.

        Returns:
            Parsed ServerConfig

        Raises:
            ConfigError: If the file is missing, unreadable or invalid
        """
        try:
            data = self.config_file.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Error loading configuration file", path=str(self.config_file), error=str(e))
            raise ConfigError(f"Cannot read configuration: {e}", str(self.config_file)) from e

        try:
            return ServerConfig.model_validate_json(data)
        except ValidationError as e:
            logger.error("Invalid configuration", path=str(self.config_file), error=str(e))
            raise ConfigError(f"Invalid configuration: {e}", str(self.config_file)) from e

    def create_new_config(self, cfg: ServerConfig) -> None:
        """Write ``cfg`` to the configuration file, replacing it."""
        payload = json.dumps(cfg.model_dump(by_alias=True), indent=2)
        try:
            self.config_file.write_text(payload, encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot write configuration: {e}", str(self.config_file)) from e
        logger.info("Configuration written", path=str(self.config_file))
