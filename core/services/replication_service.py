"""Cross-region AMI replication."""

import logging

from core.interfaces.image_service_interface import IImageService
from core.models.errors import ProviderError
from core.models.workflow import ReplicationOutcome
from core.utils.time_budget import TimeBudget


class ReplicationService:
    """Copies a finished AMI into the target region when time allows."""

    def __init__(
        self,
        target_service: IImageService,
        source_region: str,
        target_region: str,
        time_budget: TimeBudget,
        ami_name: str,
        description: str,
        min_remaining_seconds: float = 120,
    ):
        self.target_service = target_service
        self.source_region = source_region
        self.target_region = target_region
        self.time_budget = time_budget
        self.ami_name = ami_name
        self.description = description
        self.min_remaining_seconds = min_remaining_seconds
        self.logger = logging.getLogger(__name__)

    @property
    def is_cross_region(self) -> bool:
        return self.target_region != self.source_region

    async def maybe_replicate(self, image_id: str) -> ReplicationOutcome:
        """Copy the image to the target region.

        A failed copy does not fail the run; the image already exists in the
        source region, so the failure is reported in the note instead.
        """
        if not self.is_cross_region:
            return ReplicationOutcome()

        if self.time_budget.remaining() <= self.min_remaining_seconds:
            self.logger.warning("Skipping AMI copy due to insufficient remaining time")
            return ReplicationOutcome(
                note=f", but copying to {self.target_region} was skipped (insufficient time)"
            )

        try:
            copy_image_id = await self.target_service.copy_image(
                source_image_id=image_id,
                source_region=self.source_region,
                name=self.ami_name,
                description=self.description,
            )
        except ProviderError as e:
            self.logger.error(f"Failed to copy AMI {image_id} to {self.target_region}: {e}")
            return ReplicationOutcome(
                note=f", but copying to {self.target_region} failed: {e.message}"
            )

        self.logger.info(f"AMI copied to {self.target_region}: {copy_image_id}")
        return ReplicationOutcome(
            copied=True,
            copy_image_id=copy_image_id,
            note=f" and copied to {self.target_region} as {copy_image_id}",
        )
