import asyncio
import logging
from datetime import datetime, timezone

import pytest

from core.models.ami_request import AMIRequest
from core.models.config import WorkflowConfig
from core.models.errors import (
    ImageCreationFailed,
    ProviderError,
    ValidationError,
    WorkflowTimeout,
)
from core.orchestration.workflow_orchestrator import AMIWorkflowOrchestrator

INSTANCE_ID = "i-1234567890abcdef0"
AMI_ID = "ami-abcdef1234567890"


def make_orchestrator(source, clock, sleep, target=None, target_region=None, config=None):
    return AMIWorkflowOrchestrator(
        instance_id=INSTANCE_ID,
        source_service=source,
        target_service=target,
        target_region=target_region,
        config=config,
        clock=clock,
        sleep=sleep,
    )


def total_time_logs(caplog):
    return [r for r in caplog.records if r.getMessage().startswith("Total execution time")]


class TestAMIWorkflowOrchestrator:
    """Test cases for the end-to-end workflow."""

    def test_create_ami_returns_ami_id(self, make_service, clock, sleep):
        """No pending images, pending then available, same region."""
        source = make_service(describe_states=["pending", "available"])
        orchestrator = make_orchestrator(source, clock, sleep, target_region="us-east-1")

        result = asyncio.run(orchestrator.run()).to_dict()

        assert result["statusCode"] == "200"
        assert result["ami_id"] == AMI_ID
        assert result["source_region"] == "us-east-1"
        assert result["target_region"] == "us-east-1"
        assert set(result) == {"statusCode", "body", "ami_id", "source_region", "target_region"}
        assert source.call_names == ["list_images", "create_image", "describe_image", "describe_image"]
        assert sleep.delays == [30]

    def test_same_region_body_does_not_mention_copy(self, make_service, clock, sleep):
        """The body only narrates the creation."""
        source = make_service()
        orchestrator = make_orchestrator(source, clock, sleep)

        result = asyncio.run(orchestrator.run())

        assert result.body == f"Successfully created AMI {AMI_ID} on us-east-1"
        assert "cop" not in result.body
        assert "copy_image" not in source.call_names

    def test_cross_region_copy(self, make_service, clock, sleep):
        """A successful copy is reported with both image IDs."""
        source = make_service()
        target = make_service(region="us-west-2")
        orchestrator = make_orchestrator(source, clock, sleep, target=target, target_region="us-west-2")

        result = asyncio.run(orchestrator.run())

        assert result.status_code == "200"
        assert AMI_ID in result.body
        assert "ami-copy0000000001" in result.body
        assert result.copy_image_id == "ami-copy0000000001"
        assert result.to_dict()["target_region"] == "us-west-2"
        assert target.call_names == ["copy_image"]
        assert "copy_image" not in source.call_names

    def test_cross_region_copy_skipped_when_short_on_time(self, make_service, clock, sleep):
        """Too little budget left after creation skips the copy."""
        source = make_service(describe_states=["pending"] * 24 + ["available"])
        target = make_service(region="us-west-2")
        orchestrator = make_orchestrator(source, clock, sleep, target=target, target_region="us-west-2")

        result = asyncio.run(orchestrator.run())

        # 24 waits of 30s leave exactly 120s
        assert orchestrator.time_budget.remaining() == 120
        assert result.status_code == "200"
        assert "skipped" in result.body
        assert target.calls == []

    def test_copy_failure_still_succeeds(self, make_service, clock, sleep):
        """A failed copy degrades the message but not the status."""
        error = ProviderError("Copy AMI", "Image is not available", "InvalidAMIID.Unavailable")
        source = make_service()
        target = make_service(region="us-west-2", copy_error=error)
        orchestrator = make_orchestrator(source, clock, sleep, target=target, target_region="us-west-2")

        result = asyncio.run(orchestrator.run())

        assert result.status_code == "200"
        assert result.ami_id == AMI_ID
        assert "failed: Image is not available" in result.body

    def test_existing_operation_timeout(self, make_service, make_pending_image, clock, sleep, caplog):
        """A pending image that never clears aborts before creating."""
        source = make_service(pending_batches=[[make_pending_image("ami-old", INSTANCE_ID)]])
        orchestrator = make_orchestrator(source, clock, sleep)

        with caplog.at_level(logging.INFO):
            with pytest.raises(WorkflowTimeout) as exc_info:
                asyncio.run(orchestrator.run())

        assert exc_info.value.subject == "existing operation"
        assert "create_image" not in source.call_names
        assert len(total_time_logs(caplog)) == 1

    def test_provider_error_is_reraised_unchanged(self, make_service, clock, sleep, caplog):
        """Create failures are logged and re-raised as the same object."""
        error = ProviderError("Create AMI", "instance is terminated", "IncorrectInstanceState")
        source = make_service(create_error=error)
        orchestrator = make_orchestrator(source, clock, sleep)

        with caplog.at_level(logging.INFO):
            with pytest.raises(ProviderError) as exc_info:
                asyncio.run(orchestrator.run())

        assert exc_info.value is error
        assert any("AWS EC2 error" in r.getMessage() for r in caplog.records)
        assert len(total_time_logs(caplog)) == 1

    def test_image_failure_is_fatal(self, make_service, clock, sleep):
        """A failed image fails the run."""
        source = make_service(describe_states=["failed"])
        orchestrator = make_orchestrator(source, clock, sleep)

        with pytest.raises(ImageCreationFailed):
            asyncio.run(orchestrator.run())

    def test_unhandled_error_is_reraised(self, make_service, clock, sleep, caplog):
        """Unexpected errors propagate after logging."""
        source = make_service(create_error=KeyError("ImageId"))
        orchestrator = make_orchestrator(source, clock, sleep)

        with caplog.at_level(logging.INFO):
            with pytest.raises(KeyError):
                asyncio.run(orchestrator.run())

        assert any("Unhandled error" in r.getMessage() for r in caplog.records)
        assert len(total_time_logs(caplog)) == 1

    def test_total_time_logged_once_on_success(self, make_service, clock, sleep, caplog):
        """The elapsed time is logged exactly once."""
        orchestrator = make_orchestrator(make_service(), clock, sleep)

        with caplog.at_level(logging.INFO):
            asyncio.run(orchestrator.run())

        assert len(total_time_logs(caplog)) == 1

    def test_single_use(self, make_service, clock, sleep):
        """A second run is refused without touching EC2."""
        source = make_service()
        orchestrator = make_orchestrator(source, clock, sleep)
        asyncio.run(orchestrator.run())
        call_count = len(source.calls)

        with pytest.raises(RuntimeError):
            asyncio.run(orchestrator.run())

        assert len(source.calls) == call_count

    @pytest.mark.parametrize("instance_id", ["", "   ", None])
    def test_missing_instance_id(self, make_service, clock, sleep, instance_id):
        """Validation fails before any provider call."""
        source = make_service()

        with pytest.raises(ValidationError):
            AMIWorkflowOrchestrator(instance_id=instance_id, source_service=source, clock=clock, sleep=sleep)

        assert source.calls == []

    def test_config_drives_intervals(self, make_service, clock, sleep):
        """Poll cadence comes from the config."""
        source = make_service(describe_states=["pending", "available"])
        config = WorkflowConfig(max_duration_seconds=300, check_interval_seconds=10)
        orchestrator = make_orchestrator(source, clock, sleep, config=config)

        asyncio.run(orchestrator.run())

        assert sleep.delays == [10]
        assert orchestrator.time_budget.max_duration_seconds == 300

    def test_ami_name_timestamp_taken_when_run_starts(self, make_service, clock, sleep):
        """The name reflects when the run started, not when it was built."""
        readings = []

        def now():
            readings.append(True)
            return datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        source = make_service()
        orchestrator = AMIWorkflowOrchestrator(
            instance_id=INSTANCE_ID, source_service=source, clock=clock, sleep=sleep, now=now
        )
        assert readings == []
        assert orchestrator.creation is None

        asyncio.run(orchestrator.run())

        assert readings == [True]
        create_params = source.calls[1][1]
        assert create_params["name"] == f"AMI-{INSTANCE_ID}-20240102030405"
        assert create_params["description"] == f"AMI from instance-{INSTANCE_ID} (created 20240102030405)"

    def test_cross_region_requires_target_client(self, make_service, clock, sleep):
        """A different target region needs its own client."""
        with pytest.raises(ValueError):
            make_orchestrator(make_service(), clock, sleep, target_region="eu-west-1")


class TestFromRequest:
    """Test cases for building the orchestrator from a request."""

    def test_same_region_reuses_source_client(self, make_service):
        """Only one client is built when the regions match."""
        built = []

        def factory(region):
            service = make_service(region=region or "us-east-1")
            built.append(region)
            return service

        orchestrator = AMIWorkflowOrchestrator.from_request(AMIRequest(INSTANCE_ID), factory)

        assert built == [None]
        assert orchestrator.source_region == "us-east-1"
        assert orchestrator.target_region == "us-east-1"
        assert orchestrator.target_service is orchestrator.source_service

    def test_cross_region_builds_target_client(self, make_service):
        """A second client is built for the target region."""
        built = []

        def factory(region):
            built.append(region)
            return make_service(region=region or "us-east-1")

        request = AMIRequest(INSTANCE_ID, target_region="ap-southeast-2")
        orchestrator = AMIWorkflowOrchestrator.from_request(request, factory)

        assert built == [None, "ap-southeast-2"]
        assert orchestrator.target_service.region == "ap-southeast-2"
