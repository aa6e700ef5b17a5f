#!/usr/bin/env python3
"""
Create an AMI from an EC2 instance and optionally copy it to another region.

Usage:
    python create_ami.py --instance-id i-1234567890abcdef0
    python create_ami.py --instance-id i-1234567890abcdef0 --target-region us-west-2
    python create_ami.py --instance-id i-1234567890abcdef0 --config config/default.yml
    python create_ami.py --instance-id i-1234567890abcdef0 --log-file ami.log
"""

import argparse
import asyncio
import json
import logging
import sys

from core.models.ami_request import AMIRequest
from core.models.errors import AMIWorkflowError
from core.services.config_service import ConfigService
from core.utils.logger import setup_logging
from lambda_function import build_orchestrator


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Create an AMI from an EC2 instance without rebooting it"
    )

    parser.add_argument(
        "--instance-id",
        required=True,
        help="EC2 instance ID to image (e.g., i-1234567890abcdef0)"
    )

    parser.add_argument(
        "--target-region",
        default=None,
        help="Region to copy the AMI into (default: the source region)"
    )

    parser.add_argument(
        "--config",
        default=None,
        help="YAML configuration file (default: the shipped config/default.yml)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file under logs/ (e.g., ami.log)"
    )

    return parser.parse_args(argv)


async def run(instance_id: str, target_region, config_path) -> int:
    """Run the workflow and print the result."""
    logger = logging.getLogger(__name__)

    try:
        request = AMIRequest(instance_id=instance_id, target_region=target_region or None)
        config = ConfigService(config_path).get_workflow_config()

        orchestrator = build_orchestrator(request, config)
        result = await orchestrator.run()

    except AMIWorkflowError as e:
        logger.error(f"AMI creation failed: {e}")
        return 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0


def main(argv=None) -> None:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(args.log_level, args.log_file)
    sys.exit(asyncio.run(run(args.instance_id, args.target_region, args.config)))


if __name__ == "__main__":
    main()
