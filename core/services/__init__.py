"""Core services for the AMI creator."""

from .config_service import ConfigService
from .existing_operation_guard import ExistingOperationGuard
from .image_creation_service import ImageCreationService
from .replication_service import ReplicationService

__all__ = [
    'ConfigService',
    'ExistingOperationGuard',
    'ImageCreationService',
    'ReplicationService'
]
