from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class ReplicationOutcome:
    """Result of the optional cross-region copy.

    ``note`` is appended to the workflow message as-is; it is None when
    there is nothing to report (target region equals source region).
    """
    copied: bool = False
    copy_image_id: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class WorkflowResult:
    """Outcome of a successful AMI workflow run."""
    ami_id: str
    source_region: str
    target_region: str
    body: str
    status_code: str = "200"
    replication: ReplicationOutcome = field(default_factory=ReplicationOutcome)

    @classmethod
    def build(
        cls,
        ami_id: str,
        source_region: str,
        target_region: str,
        replication: Optional[ReplicationOutcome] = None,
    ) -> "WorkflowResult":
        """Assemble the result, narrating what happened in the body."""
        replication = replication or ReplicationOutcome()
        message = f"Successfully created AMI {ami_id} on {source_region}"
        if replication.note:
            message += replication.note

        return cls(
            ami_id=ami_id,
            source_region=source_region,
            target_region=target_region,
            body=message,
            replication=replication,
        )

    @property
    def copy_image_id(self) -> Optional[str]:
        return self.replication.copy_image_id

    def to_dict(self) -> Dict[str, str]:
        """Convert to the response mapping."""
        return {
            "statusCode": self.status_code,
            "body": self.body,
            "ami_id": self.ami_id,
            "source_region": self.source_region,
            "target_region": self.target_region,
        }
