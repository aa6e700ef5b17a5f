"""Core interfaces for the AMI creator."""

from .image_service_interface import IImageService
from .config_interface import IConfigService

__all__ = [
    'IImageService',
    'IConfigService'
]
