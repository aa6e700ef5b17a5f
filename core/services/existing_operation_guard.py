"""Guard against overlapping image operations for the same instance."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from core.interfaces.image_service_interface import IImageService
from core.models.ami_image import ImageRecord
from core.utils.time_budget import TimeBudget

PENDING_IMAGE_FILTERS = [
    {"Name": "state", "Values": ["pending"]},
    {"Name": "image-type", "Values": ["machine"]},
]


class ExistingOperationGuard:
    """Waits until no pending image is tagged with the instance ID.

    The check is best-effort: another run can start creating an image between
    a clear check and our own create call. EC2 offers no idempotency token for
    CreateImage, so that window is accepted rather than hidden.
    """

    def __init__(
        self,
        image_service: IImageService,
        instance_id: str,
        time_budget: TimeBudget,
        check_interval: float = 30,
        instance_tag_key: str = "InstanceId",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.image_service = image_service
        self.instance_id = instance_id
        self.time_budget = time_budget
        self.check_interval = check_interval
        self.instance_tag_key = instance_tag_key
        self._sleep = sleep
        self.logger = logging.getLogger(__name__)

    async def find_existing_operation(self) -> Optional[ImageRecord]:
        """Return the first pending image tagged with this instance, if any."""
        images = await self.image_service.list_images(PENDING_IMAGE_FILTERS)
        for image in images:
            if image.has_tag(self.instance_tag_key, self.instance_id):
                return image
        return None

    async def wait_for_clear(self) -> bool:
        """Block until no image operation is pending for the instance.

        Returns:
            True when clear to proceed, False if the budget ran out first
        """
        while self.time_budget.remaining() > self.check_interval:
            existing = await self.find_existing_operation()
            if existing is None:
                return True

            delay = min(self.check_interval, self.time_budget.remaining())
            self.logger.info(
                f"AMI {existing.image_id} is already pending for instance "
                f"{self.instance_id}, waiting {delay:.0f} seconds..."
            )
            await self._sleep(delay)

        self.logger.warning(
            f"Time budget exhausted waiting for pending AMI of instance {self.instance_id}"
        )
        return False
