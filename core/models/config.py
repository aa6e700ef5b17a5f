from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum


class RunMode(Enum):
    """How AWS credentials are obtained."""
    LAMBDA = "lambda"
    LOCAL = "local"
    PIPELINE = "pipeline"


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class AWSConfig:
    """AWS configuration."""
    # None lets boto3 resolve the region (AWS_REGION in Lambda)
    region: Optional[str] = None
    run_mode: RunMode = RunMode.LAMBDA


@dataclass
class WorkflowConfig:
    """Tunables for one AMI workflow run."""

    # Time budget
    max_duration_seconds: int = 840
    check_interval_seconds: int = 30

    # Cross-region copy needs this much slack left to be attempted
    copy_min_remaining_seconds: int = 120

    # Tag that ties an image to its source instance
    instance_tag_key: str = "InstanceId"

    # AWS settings
    aws: AWSConfig = field(default_factory=AWSConfig)

    log_level: LogLevel = LogLevel.INFO

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.max_duration_seconds <= 0:
            errors.append("Maximum run duration must be positive")

        if self.check_interval_seconds <= 0:
            errors.append("Check interval must be positive")

        if self.check_interval_seconds >= self.max_duration_seconds:
            errors.append("Check interval must be shorter than the maximum run duration")

        if self.copy_min_remaining_seconds < 0:
            errors.append("Copy minimum remaining time cannot be negative")

        if not self.instance_tag_key:
            errors.append("Instance tag key cannot be empty")

        return errors
