"""AWS session manager"""

import os
import boto3
from typing import Dict, Optional

from core.models.config import RunMode
from core.utils.logger import get_infrastructure_logger


class AWSSessionManager:
    """Builds boto3 sessions for the supported execution modes."""

    _sessions: Dict[str, boto3.Session] = {}

    def __init__(self, run_mode: RunMode = RunMode.LAMBDA):
        self.run_mode = run_mode
        self.logger = get_infrastructure_logger(__name__)

    def get_session(self, region: Optional[str] = None) -> boto3.Session:
        """Get an AWS session for the configured execution mode.

        Lambda and local runs use the default credential chain; pipeline runs
        read explicit credentials from the environment.
        """
        if self.run_mode == RunMode.PIPELINE:
            self.logger.info("Using pipeline mode with environment credentials")
            return self.get_session_from_env(region=region)

        if self.run_mode in (RunMode.LAMBDA, RunMode.LOCAL):
            return boto3.Session(region_name=region)

        raise ValueError(f"Unsupported run_mode: {self.run_mode}")

    @classmethod
    def get_session_from_env(
        cls, region: Optional[str] = None, session_name: str = "pipeline"
    ) -> boto3.Session:
        """Create a boto3 Session from environment variables for pipeline usage.

        Expected environment variables:
        - AWS_ACCESS_KEY_ID
        - AWS_SECRET_ACCESS_KEY
        - AWS_SESSION_TOKEN (optional)
        """
        session_key = f"env:{region}:{session_name}"

        if session_key not in cls._sessions:
            access_key = os.getenv("AWS_ACCESS_KEY_ID")
            secret_key = os.getenv("AWS_SECRET_ACCESS_KEY")
            session_token = os.getenv("AWS_SESSION_TOKEN")

            if not access_key or not secret_key:
                raise ValueError(
                    "Missing required environment variables. "
                    "Please set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY"
                )

            cls._sessions[session_key] = boto3.Session(
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                aws_session_token=session_token,
                region_name=region,
            )

        return cls._sessions[session_key]
