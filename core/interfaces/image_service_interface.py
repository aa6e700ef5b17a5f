"""Image service interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from core.models.ami_image import ImageRecord


class IImageService(ABC):
    """Interface for region-scoped AMI operations."""

    @property
    @abstractmethod
    def region(self) -> str:
        """Region this client operates in."""
        pass

    @abstractmethod
    async def list_images(self, filters: List[Dict[str, Any]]) -> List[ImageRecord]:
        """List images matching EC2-style filters.

        Args:
            filters: e.g. [{"Name": "state", "Values": ["pending"]}]

        Returns:
            List of ImageRecord objects
        """
        pass

    @abstractmethod
    async def create_image(
        self,
        instance_id: str,
        name: str,
        description: str,
        no_reboot: bool = True,
        tags: Optional[Dict[str, str]] = None,
    ) -> str:
        """Request a new image from an instance.

        Returns:
            The new image ID

        Raises:
            ProviderError: If EC2 rejects the request
        """
        pass

    @abstractmethod
    async def describe_image(self, image_id: str) -> Optional[ImageRecord]:
        """Describe a single image, or None if EC2 does not report it yet."""
        pass

    @abstractmethod
    async def copy_image(
        self,
        source_image_id: str,
        source_region: str,
        name: str,
        description: str,
    ) -> str:
        """Copy an image from source_region into this client's region.

        Returns:
            The image ID in this region

        Raises:
            ProviderError: If EC2 rejects the request
        """
        pass
