import threading
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from awsprovider.config.schemas.provider_schema import ProviderSettings
from awsprovider.domain.tags import DefaultTagsConfig, IgnoreTagsConfig, KeyValueTags
from awsprovider.infrastructure.exceptions import CredentialsError
from awsprovider.infrastructure.logging import get_logger

logger = get_logger(__name__)


def partition_for_region(region: str) -> str:
    if region.startswith("cn-"):
        return "aws-cn"
    if region.startswith("us-gov-"):
        return "aws-us-gov"
    if region.startswith("us-iso-"):
        return "aws-iso"
    if region.startswith("us-isob-"):
        return "aws-iso-b"
    return "aws"


class AWSClient:
    """
    Centralized AWS client management.

    This is the ``meta`` handle every resource handler receives: boto3
    clients created lazily per service, plus provider-wide settings such as
    default and ignored tags.
    """

    def __init__(self, settings: Optional[ProviderSettings] = None, session: Optional[boto3.Session] = None):
        """
        Initialize AWS client with configuration.

        Args:
            settings: Provider settings; defaults are used when omitted
            session: Preconfigured boto3 session

        Raises:
            CredentialsError: If AWS credentials validation fails
        """
        self.settings = settings or ProviderSettings()
        self.region_name = self.settings.region
        self.partition = partition_for_region(self.region_name)
        self.config = Config(
            region_name=self.region_name,
            retries={
                'max_attempts': self.settings.max_retries,
                'mode': 'standard'
            },
            connect_timeout=self.settings.connect_timeout,
            read_timeout=self.settings.read_timeout,
        )
        self.session = session or boto3.Session(
            profile_name=self.settings.profile,
            region_name=self.region_name,
        )
        self.default_tags_config = DefaultTagsConfig(KeyValueTags.new(self.settings.default_tags.tags))
        self.ignore_tags_config = IgnoreTagsConfig(
            keys=tuple(self.settings.ignore_tags.keys),
            key_prefixes=tuple(self.settings.ignore_tags.key_prefixes),
        )
        self._clients: Dict[str, Any] = {}
        self._clients_lock = threading.Lock()
        self.account_id = ""

        if not self.settings.skip_credentials_validation:
            identity = self.validate_credentials()
            if not self.settings.skip_requesting_account_id:
                self.account_id = identity.get("Account", "")

    def validate_credentials(self) -> Dict[str, Any]:
        """Call STS GetCallerIdentity with the configured credentials."""
        try:
            return self.client("sts").get_caller_identity()
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to validate AWS credentials", error=str(e))
            raise CredentialsError(f"Failed to validate AWS credentials: {str(e)}") from e

    def client(self, service_name: str) -> Any:
        """Get the boto3 client of a service, creating it on first use."""
        client = self._clients.get(service_name)
        if client is None:
            with self._clients_lock:
                client = self._clients.get(service_name)
                if client is None:
                    client = self.session.client(
                        service_name,
                        config=self.config,
                        endpoint_url=self.settings.endpoints.get(service_name),
                    )
                    self._clients[service_name] = client
        return client

    @property
    def sqs_client(self) -> Any:
        return self.client("sqs")

    @property
    def ec2_client(self) -> Any:
        return self.client("ec2")

    @property
    def eks_client(self) -> Any:
        return self.client("eks")

    @property
    def cloudformation_client(self) -> Any:
        return self.client("cloudformation")

    @property
    def s3_client(self) -> Any:
        return self.client("s3")

    @property
    def sts_client(self) -> Any:
        return self.client("sts")
