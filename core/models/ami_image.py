"""AMI image data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional


class ImageState(Enum):
    """AMI lifecycle state as seen by the workflow."""
    PENDING = "pending"
    AVAILABLE = "available"
    FAILED = "failed"
    OTHER = "other"

    @classmethod
    def from_aws(cls, aws_state: Optional[str]) -> "ImageState":
        """Map an EC2 image state string to an ImageState.

        Anything that is not pending, available or failed (including states
        EC2 may add later) maps to OTHER and is treated as still in progress.
        """
        state_mapping = {
            "pending": cls.PENDING,
            "available": cls.AVAILABLE,
            "failed": cls.FAILED,
        }
        return state_mapping.get((aws_state or "").lower(), cls.OTHER)


@dataclass(frozen=True)
class ImageRecord:
    """Read-only view of an AMI reported by EC2."""

    image_id: str
    state: ImageState = ImageState.OTHER
    tags: Dict[str, str] = field(default_factory=dict)
    name: Optional[str] = None
    raw_state: Optional[str] = None

    @classmethod
    def from_aws(cls, image: Dict[str, Any]) -> "ImageRecord":
        """Build a record from a describe_images entry."""
        raw_state = image.get("State")
        return cls(
            image_id=image["ImageId"],
            state=ImageState.from_aws(raw_state),
            tags={tag["Key"]: tag["Value"] for tag in image.get("Tags", [])},
            name=image.get("Name"),
            raw_state=raw_state,
        )

    def has_tag(self, key: str, value: str) -> bool:
        """Exact match on a tag key and value."""
        return self.tags.get(key) == value
