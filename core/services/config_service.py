"""Configuration service implementation."""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Mapping, Optional

from core.interfaces.config_interface import IConfigService
from core.models.config import AWSConfig, LogLevel, RunMode, WorkflowConfig
from core.models.errors import ConfigurationError


class ConfigService(IConfigService):
    """Loads WorkflowConfig from defaults, an optional YAML file and the environment.

    Precedence, lowest first: dataclass defaults, YAML file, environment.
    Without an explicit path the shipped config/default.yml is read when present.
    """

    DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "default.yml"

    ENV_MAPPINGS = {
        "MAX_LAMBDA_TIME": "max_duration_seconds",
        "CHECK_INTERVAL": "check_interval_seconds",
        "AMI_COPY_MIN_REMAINING": "copy_min_remaining_seconds",
        "AMI_LOG_LEVEL": "log_level",
        "AMI_AWS_REGION": "aws.region",
        "AMI_RUN_MODE": "aws.run_mode",
    }

    INT_SETTINGS = (
        "max_duration_seconds",
        "check_interval_seconds",
        "copy_min_remaining_seconds",
    )

    def __init__(
        self,
        config_file_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self._config_file_path = config_file_path
        self._environ = os.environ if environ is None else environ
        self._workflow_config: Optional[WorkflowConfig] = None

    def _handle_error(self, operation: str, error: Exception) -> None:
        """Centralized error handling and logging."""
        self.logger.error(f"Error {operation}: {str(error)}")
        raise error

    def load_workflow_config(self, config_path: Optional[str] = None) -> WorkflowConfig:
        """Load workflow configuration from defaults, file and environment."""
        config_path = config_path or self._config_file_path
        if not config_path and self.DEFAULT_CONFIG_PATH.exists():
            config_path = str(self.DEFAULT_CONFIG_PATH)
        try:
            raw_config: Dict[str, Any] = {}
            if config_path:
                raw_config = self._read_yaml(config_path)

            self._apply_environment_overrides(raw_config)
            workflow_config = self._parse_workflow_config(raw_config)

            errors = workflow_config.validate()
            if errors:
                raise ConfigurationError(
                    f"Configuration validation failed: {'; '.join(errors)}"
                )

            self._workflow_config = workflow_config
            self._config_file_path = config_path
            return workflow_config

        except Exception as e:
            self._handle_error("loading workflow configuration", e)

    def get_workflow_config(self) -> WorkflowConfig:
        if self._workflow_config is None:
            return self.load_workflow_config()
        return self._workflow_config

    def _read_yaml(self, config_file_path: str) -> Dict[str, Any]:
        config_path = Path(config_file_path)

        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_file_path}"
            )

        with open(config_path, "r", encoding="utf-8") as file:
            raw_config = yaml.safe_load(file)

        if raw_config is None:
            return {}
        if not isinstance(raw_config, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        return raw_config

    def _apply_environment_overrides(self, config: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration."""
        for env_var, config_key in self.ENV_MAPPINGS.items():
            env_value = self._environ.get(env_var)
            if env_value is not None and env_value.strip():
                self._set_nested_value(config, config_key, env_value.strip())

    def _set_nested_value(
        self, config: Dict[str, Any], key_path: str, value: Any
    ) -> None:
        """Set a nested value in configuration dictionary."""
        keys = key_path.split(".")
        current = config

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _parse_workflow_config(self, raw_config: Dict[str, Any]) -> WorkflowConfig:
        """Parse raw configuration into WorkflowConfig object."""
        defaults = WorkflowConfig()
        aws_data = raw_config.get("aws") or {}

        settings = {
            name: self._parse_int(name, raw_config.get(name), getattr(defaults, name))
            for name in self.INT_SETTINGS
        }

        return WorkflowConfig(
            instance_tag_key=self._parse_tag_key(
                raw_config.get("instance_tag_key"), defaults.instance_tag_key
            ),
            aws=AWSConfig(
                region=aws_data.get("region") or None,
                run_mode=self._parse_run_mode(aws_data.get("run_mode", RunMode.LAMBDA.value)),
            ),
            log_level=self._parse_log_level(raw_config.get("log_level", "INFO")),
            **settings,
        )

    def _parse_int(self, name: str, value: Any, default: int) -> int:
        if value is None or value == "":
            return default
        if isinstance(value, bool):
            raise ConfigurationError(f"Invalid integer for {name}: {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid integer for {name}: {value!r}") from e

    def _parse_tag_key(self, value: Any, default: str) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        if not isinstance(value, str):
            raise ConfigurationError(f"Invalid tag key for instance_tag_key: {value!r}")
        return value.strip()

    def _parse_log_level(self, level_str: str) -> LogLevel:
        """Parse log level string into LogLevel enum."""
        try:
            return LogLevel(str(level_str).upper())
        except ValueError:
            self.logger.warning(f"Invalid log level '{level_str}', using INFO")
            return LogLevel.INFO

    def _parse_run_mode(self, mode_str: str) -> RunMode:
        try:
            return RunMode(str(mode_str).lower())
        except ValueError as e:
            raise ConfigurationError(
                f"Unsupported run_mode: {mode_str}. Use 'lambda', 'local' or 'pipeline'"
            ) from e
