"""Core data models for the AMI creator."""

from .ami_image import ImageRecord, ImageState
from .ami_request import AMIRequest
from .config import AWSConfig, LogLevel, RunMode, WorkflowConfig
from .workflow import ReplicationOutcome, WorkflowResult
from .errors import (
    AMIWorkflowError,
    ConfigurationError,
    ImageCreationFailed,
    ProviderError,
    ValidationError,
    WorkflowTimeout,
)

__all__ = [
    'ImageRecord',
    'ImageState',
    'AMIRequest',
    'AWSConfig',
    'LogLevel',
    'RunMode',
    'WorkflowConfig',
    'ReplicationOutcome',
    'WorkflowResult',
    'AMIWorkflowError',
    'ConfigurationError',
    'ImageCreationFailed',
    'ProviderError',
    'ValidationError',
    'WorkflowTimeout'
]
