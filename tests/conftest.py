"""Shared test doubles for the AMI workflow tests."""

from typing import Any, Dict, List, Optional

import pytest

from core.interfaces.image_service_interface import IImageService
from core.models.ami_image import ImageRecord, ImageState


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that records delays and advances the clock."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        self.clock.advance(delay)


class FakeImageService(IImageService):
    """In-memory image service scripted per test."""

    def __init__(
        self,
        region: str = "us-east-1",
        pending_batches: Optional[List[List[ImageRecord]]] = None,
        describe_states: Optional[List[Optional[str]]] = None,
        image_id: str = "ami-abcdef1234567890",
        copy_image_id: str = "ami-copy0000000001",
        create_error: Optional[Exception] = None,
        copy_error: Optional[Exception] = None,
    ):
        self._region = region
        self.pending_batches = list(pending_batches or [])
        self.describe_states = list(describe_states or ["available"])
        self.image_id = image_id
        self.copy_image_id = copy_image_id
        self.create_error = create_error
        self.copy_error = copy_error
        self.calls: List[tuple] = []

    @property
    def region(self) -> str:
        return self._region

    @property
    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    async def list_images(self, filters: List[Dict[str, Any]]) -> List[ImageRecord]:
        self.calls.append(("list_images", {"filters": filters}))
        if not self.pending_batches:
            return []
        if len(self.pending_batches) == 1:
            return self.pending_batches[0]
        return self.pending_batches.pop(0)

    async def create_image(self, instance_id, name, description, no_reboot=True, tags=None):
        self.calls.append((
            "create_image",
            {
                "instance_id": instance_id,
                "name": name,
                "description": description,
                "no_reboot": no_reboot,
                "tags": tags,
            },
        ))
        if self.create_error:
            raise self.create_error
        return self.image_id

    async def describe_image(self, image_id: str) -> Optional[ImageRecord]:
        self.calls.append(("describe_image", {"image_id": image_id}))
        state = self.describe_states.pop(0) if len(self.describe_states) > 1 else self.describe_states[0]
        if state is None:
            return None
        return ImageRecord(image_id=image_id, state=ImageState.from_aws(state), raw_state=state)

    async def copy_image(self, source_image_id, source_region, name, description):
        self.calls.append((
            "copy_image",
            {
                "source_image_id": source_image_id,
                "source_region": source_region,
                "name": name,
                "description": description,
            },
        ))
        if self.copy_error:
            raise self.copy_error
        return self.copy_image_id


def pending_image(image_id: str, instance_id: str, tag_key: str = "InstanceId") -> ImageRecord:
    return ImageRecord(
        image_id=image_id,
        state=ImageState.PENDING,
        tags={tag_key: instance_id},
        raw_state="pending",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep(clock):
    return RecordingSleep(clock)


@pytest.fixture
def make_service():
    return FakeImageService


@pytest.fixture
def make_pending_image():
    return pending_image


CONFIG_ENV_VARS = (
    "MAX_LAMBDA_TIME",
    "CHECK_INTERVAL",
    "AMI_COPY_MIN_REMAINING",
    "AMI_LOG_LEVEL",
    "AMI_AWS_REGION",
    "AMI_RUN_MODE",
)


@pytest.fixture
def clean_config_env(monkeypatch):
    """Remove configuration overrides inherited from the environment."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
