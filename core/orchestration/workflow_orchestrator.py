import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from core.interfaces.image_service_interface import IImageService
from core.models.ami_request import AMIRequest
from core.models.config import WorkflowConfig
from core.models.errors import (
    AMIWorkflowError,
    ProviderError,
    ValidationError,
    WorkflowTimeout,
)
from core.models.workflow import WorkflowResult
from core.services.existing_operation_guard import ExistingOperationGuard
from core.services.image_creation_service import ImageCreationService
from core.services.replication_service import ReplicationService
from core.utils.time_budget import TimeBudget


class AMIWorkflowOrchestrator:
    """Creates an AMI from one instance and optionally copies it to another region.

    One orchestrator serves exactly one run. The time budget starts when the
    orchestrator is built; the AMI name timestamp is taken when run() starts.
    """

    def __init__(
        self,
        instance_id: str,
        source_service: IImageService,
        target_service: Optional[IImageService] = None,
        target_region: Optional[str] = None,
        config: Optional[WorkflowConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        if not instance_id or not instance_id.strip():
            raise ValidationError("Invalid input: instance_id is required.")

        self.logger = logging.getLogger(__name__)
        self.instance_id = instance_id
        self.config = config or WorkflowConfig()
        self.source_region = source_service.region
        self.target_region = target_region or self.source_region

        if target_service is None:
            if self.target_region != self.source_region:
                raise ValueError(
                    f"A client for target region {self.target_region} is required"
                )
            target_service = source_service

        self.source_service = source_service
        self.target_service = target_service
        self._sleep = sleep
        self._now = now
        self.time_budget = TimeBudget.start_now(self.config.max_duration_seconds, clock)

        self.guard = ExistingOperationGuard(
            image_service=source_service,
            instance_id=instance_id,
            time_budget=self.time_budget,
            check_interval=self.config.check_interval_seconds,
            instance_tag_key=self.config.instance_tag_key,
            sleep=sleep,
        )
        self.creation: Optional[ImageCreationService] = None
        self.replication: Optional[ReplicationService] = None
        self._started = False

    def _build_steps(self) -> None:
        """Create the creation and replication steps for this run."""
        self.creation = ImageCreationService(
            image_service=self.source_service,
            instance_id=self.instance_id,
            time_budget=self.time_budget,
            check_interval=self.config.check_interval_seconds,
            instance_tag_key=self.config.instance_tag_key,
            created_time=self._now(),
            sleep=self._sleep,
        )
        self.replication = ReplicationService(
            target_service=self.target_service,
            source_region=self.source_region,
            target_region=self.target_region,
            time_budget=self.time_budget,
            ami_name=self.creation.ami_name,
            description=self.creation.description,
            min_remaining_seconds=self.config.copy_min_remaining_seconds,
        )

    @classmethod
    def from_request(
        cls,
        request: AMIRequest,
        client_factory: Callable[[Optional[str]], IImageService],
        config: Optional[WorkflowConfig] = None,
        **kwargs,
    ) -> "AMIWorkflowOrchestrator":
        """Build an orchestrator with region-scoped clients.

        ``client_factory(region)`` returns an image service for a region;
        None means the default region. The source client is reused when the
        target region matches.
        """
        config = config or WorkflowConfig()
        source_service = client_factory(config.aws.region)
        source_region = source_service.region
        target_region = request.target_region or source_region

        target_service = (
            source_service
            if target_region == source_region
            else client_factory(target_region)
        )

        return cls(
            instance_id=request.instance_id,
            source_service=source_service,
            target_service=target_service,
            target_region=target_region,
            config=config,
            **kwargs,
        )

    async def run(self) -> WorkflowResult:
        """Run the workflow once.

        Raises:
            WorkflowTimeout: Budget ran out waiting on EC2
            ImageCreationFailed: EC2 reported the image as failed
            ProviderError: EC2 rejected a create or describe call
        """
        if self._started:
            raise RuntimeError("AMIWorkflowOrchestrator.run() can only be called once")
        self._started = True
        self._build_steps()

        self.logger.info(
            f"Starting AMI workflow for instance {self.instance_id} "
            f"({self.source_region} -> {self.target_region})"
        )

        try:
            if not await self.guard.wait_for_clear():
                raise WorkflowTimeout(
                    "existing operation", "Timeout waiting for existing AMI operation"
                )

            image_id = await self.creation.create()
            await self.creation.wait_for_available(image_id)

            replication = await self.replication.maybe_replicate(image_id)

            return WorkflowResult.build(
                ami_id=image_id,
                source_region=self.source_region,
                target_region=self.target_region,
                replication=replication,
            )

        except ProviderError as e:
            self.logger.error(f"AWS EC2 error: {e}")
            raise
        except AMIWorkflowError as e:
            self.logger.error(f"AMI workflow failed: {e}")
            raise
        except Exception as e:
            self.logger.exception(f"Unhandled error: {e}")
            raise
        finally:
            self.logger.info(
                f"Total execution time: {self.time_budget.elapsed():.2f} seconds"
            )
