"""Workflow input model."""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from core.models.errors import ValidationError


@dataclass(frozen=True)
class AMIRequest:
    """Request to image an instance and optionally copy the image."""

    instance_id: str
    target_region: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.instance_id, str) or not self.instance_id.strip():
            raise ValidationError("Invalid input: instance_id is required.")
        if self.target_region is not None and not isinstance(self.target_region, str):
            raise ValidationError("Invalid input: target_region must be a string.")

    @classmethod
    def from_event(cls, event: Union[str, bytes, Dict[str, Any], None]) -> "AMIRequest":
        """Parse a Lambda event (dict or JSON string).

        Expected shape: {"instance_id": "...", "target_region": "..."}
        """
        if isinstance(event, (str, bytes)):
            try:
                event = json.loads(event)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise ValidationError(f"Invalid input: event is not valid JSON: {e}") from e

        if not isinstance(event, dict):
            raise ValidationError("Invalid input: instance_id is required.")

        # An empty target region means "stay in the source region"
        target_region = event.get("target_region") or None

        return cls(
            instance_id=event.get("instance_id"),
            target_region=target_region,
        )

