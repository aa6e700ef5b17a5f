"""AWS EC2 client for AMI operations."""

from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from core.interfaces.image_service_interface import IImageService
from core.models.ami_image import ImageRecord
from core.models.errors import ProviderError
from core.utils.logger import get_infrastructure_logger
from .session_manager import AWSSessionManager

IMAGE_NOT_FOUND_CODES = ("InvalidAMIID.NotFound", "InvalidAMIID.Unavailable")


class EC2Client(IImageService):
    """AWS EC2 client wrapper for image operations in one region."""

    def __init__(
        self,
        region: Optional[str] = None,
        session_manager: Optional[AWSSessionManager] = None,
        client: Any = None,
    ):
        self.logger = get_infrastructure_logger(__name__)
        self._session_manager = session_manager or AWSSessionManager()
        self._client = client
        self._region = region

    def _ensure_client(self) -> None:
        """Ensure the EC2 client is initialized (lazy initialization)."""
        if self._client is None:
            session = self._session_manager.get_session(self._region)
            self._client = session.client("ec2", region_name=self._region)

    @property
    def region(self) -> str:
        """Region the client talks to, resolved from boto3 when not given."""
        if self._region is None:
            self._ensure_client()
            self._region = self._client.meta.region_name
        return self._region

    def _handle_error(self, operation: str, error: Exception) -> None:
        """Log an AWS failure and raise it as a ProviderError."""
        if isinstance(error, ClientError):
            error_info = error.response.get("Error", {})
            error_code = error_info.get("Code")
            message = error_info.get("Message") or str(error)
            self.logger.error(f"{operation} failed: {error_code}")
            raise ProviderError(operation, message, error_code) from error
        if isinstance(error, BotoCoreError):
            self.logger.error(f"{operation} failed: {str(error)}")
            raise ProviderError(operation, str(error)) from error
        raise error

    async def list_images(self, filters: List[Dict[str, Any]]) -> List[ImageRecord]:
        """Describe images owned by this account that match the filters."""
        try:
            self._ensure_client()
            response = self._client.describe_images(Owners=["self"], Filters=filters)
            return [ImageRecord.from_aws(image) for image in response["Images"]]
        except Exception as e:
            self._handle_error("Describe images", e)

    async def create_image(
        self,
        instance_id: str,
        name: str,
        description: str,
        no_reboot: bool = True,
        tags: Optional[Dict[str, str]] = None,
    ) -> str:
        """Create an AMI from an instance."""
        try:
            self._ensure_client()
            params = {
                "InstanceId": instance_id,
                "Name": name,
                "Description": description,
                "NoReboot": no_reboot,
            }
            if tags:
                params["TagSpecifications"] = [
                    {
                        "ResourceType": "image",
                        "Tags": [{"Key": k, "Value": v} for k, v in tags.items()],
                    }
                ]

            response = self._client.create_image(**params)
            return response["ImageId"]
        except Exception as e:
            self._handle_error("Create AMI", e)

    async def describe_image(self, image_id: str) -> Optional[ImageRecord]:
        """Describe one AMI; None while EC2 does not list it yet."""
        try:
            self._ensure_client()
            response = self._client.describe_images(ImageIds=[image_id])
            images = response["Images"]
            return ImageRecord.from_aws(images[0]) if images else None
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in IMAGE_NOT_FOUND_CODES:
                self.logger.info(f"AMI {image_id} is not visible yet")
                return None
            self._handle_error("Describe AMI", e)
        except Exception as e:
            self._handle_error("Describe AMI", e)

    async def copy_image(
        self,
        source_image_id: str,
        source_region: str,
        name: str,
        description: str,
    ) -> str:
        """Copy an AMI from another region into this client's region."""
        try:
            self._ensure_client()
            response = self._client.copy_image(
                Name=name,
                Description=description,
                SourceImageId=source_image_id,
                SourceRegion=source_region,
            )
            return response["ImageId"]
        except Exception as e:
            self._handle_error("Copy AMI", e)
