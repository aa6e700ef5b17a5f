"""
AWS Lambda entry point for the AMI creator.

Expected event: {"instance_id": "i-...", "target_region": "us-west-2"}
(either a JSON object or a JSON string). target_region is optional.

Configuration comes from config/default.yml when it is deployed with the
function, overridden by environment variables such as MAX_LAMBDA_TIME and
CHECK_INTERVAL.
"""

import asyncio
import json
import logging
from typing import Any, Optional

from core.models.ami_request import AMIRequest
from core.models.config import WorkflowConfig
from core.models.errors import ValidationError
from core.orchestration.workflow_orchestrator import AMIWorkflowOrchestrator
from core.services.config_service import ConfigService
from core.utils.logger import setup_logging
from infrastructure.aws.ec2_client import EC2Client
from infrastructure.aws.session_manager import AWSSessionManager

logger = logging.getLogger(__name__)


def build_orchestrator(
    request: AMIRequest, config: WorkflowConfig
) -> AMIWorkflowOrchestrator:
    """Wire EC2 clients for the source and target regions."""
    session_manager = AWSSessionManager(run_mode=config.aws.run_mode)

    def client_factory(region: Optional[str]) -> EC2Client:
        return EC2Client(region=region, session_manager=session_manager)

    return AMIWorkflowOrchestrator.from_request(request, client_factory, config=config)


def lambda_handler(event: Any, context: Any = None) -> str:
    """Create an AMI from the requested instance and return the result as JSON."""
    config = ConfigService().get_workflow_config()
    setup_logging(config.log_level.value)

    try:
        request = AMIRequest.from_event(event)
    except ValidationError as e:
        logger.error(str(e))
        raise

    orchestrator = build_orchestrator(request, config)
    result = asyncio.run(orchestrator.run())

    return json.dumps(result.to_dict())
