"""AMI creation and availability polling."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, Optional

from core.interfaces.image_service_interface import IImageService
from core.models.ami_image import ImageState
from core.models.errors import ImageCreationFailed, WorkflowTimeout
from core.utils.time_budget import TimeBudget


class ImageCreationService:
    """Creates an AMI from an instance and waits for it to become available."""

    CREATED_BY = "AMICreator"

    def __init__(
        self,
        image_service: IImageService,
        instance_id: str,
        time_budget: TimeBudget,
        check_interval: float = 30,
        instance_tag_key: str = "InstanceId",
        created_time: Optional[datetime] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.image_service = image_service
        self.instance_id = instance_id
        self.time_budget = time_budget
        self.check_interval = check_interval
        self.instance_tag_key = instance_tag_key
        self.created_time = created_time or datetime.now(timezone.utc)
        self._sleep = sleep
        self.logger = logging.getLogger(__name__)

    @property
    def timestamp(self) -> str:
        return self.created_time.strftime("%Y%m%d%H%M%S")

    @property
    def ami_name(self) -> str:
        return f"AMI-{self.instance_id}-{self.timestamp}"

    @property
    def description(self) -> str:
        return f"AMI from instance-{self.instance_id} (created {self.timestamp})"

    @property
    def tags(self) -> Dict[str, str]:
        return {
            "Name": self.ami_name,
            self.instance_tag_key: self.instance_id,
            "CreatedBy": self.CREATED_BY,
        }

    async def create(self) -> str:
        """Request the image. The instance is never rebooted."""
        image_id = await self.image_service.create_image(
            instance_id=self.instance_id,
            name=self.ami_name,
            description=self.description,
            no_reboot=True,
            tags=self.tags,
        )
        self.logger.info(f"AMI {image_id} creation started")
        return image_id

    async def wait_for_available(self, image_id: str) -> None:
        """Poll until the image is available.

        Raises:
            ImageCreationFailed: EC2 reports the image as failed
            WorkflowTimeout: Not enough budget left for another poll
        """
        while True:
            image = await self.image_service.describe_image(image_id)
            state = image.state if image else ImageState.OTHER

            if state == ImageState.AVAILABLE:
                self.logger.info(f"AMI {image_id} is now available.")
                return

            if state == ImageState.FAILED:
                raise ImageCreationFailed(image_id)

            # Any other state, known or not, counts as still in progress
            if self.time_budget.remaining() < self.check_interval:
                raise WorkflowTimeout(
                    image_id, f"Timeout waiting for AMI {image_id} to become available."
                )

            raw_state = image.raw_state if image else "not found"
            self.logger.info(
                f"AMI {image_id} is in state '{raw_state}', "
                f"waiting {self.check_interval} seconds..."
            )
            await self._sleep(self.check_interval)
