"""Configuration service interface."""

from abc import ABC, abstractmethod
from typing import Optional
from core.models.config import WorkflowConfig


class IConfigService(ABC):
    """Interface for configuration management."""

    @abstractmethod
    def load_workflow_config(self, config_path: Optional[str] = None) -> WorkflowConfig:
        """Load workflow configuration.

        Args:
            config_path: Optional path to a YAML configuration file. When
                omitted the shipped config/default.yml is read if present;
                environment overrides always apply.

        Returns:
            WorkflowConfig object

        Raises:
            ConfigurationError: If config is invalid or not found
        """
        pass

    @abstractmethod
    def get_workflow_config(self) -> WorkflowConfig:
        """Get the loaded workflow configuration, loading defaults if needed."""
        pass
