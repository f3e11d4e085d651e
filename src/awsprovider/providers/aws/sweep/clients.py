"""Regional client cache shared by every sweeper."""
import os
import threading
from typing import Dict

from awsprovider.config.schemas.provider_schema import ProviderSettings
from awsprovider.infrastructure.logging import get_logger
from awsprovider.providers.aws import envvar
from awsprovider.providers.aws.aws_client import AWSClient

logger = get_logger(__name__)

SWEEPER_MAX_RETRIES = 5

_clients: Dict[str, AWSClient] = {}
_clients_lock = threading.Lock()


def shared_client_for_region(region: str) -> AWSClient:
    """
    AWS client for ``region``, built once per process.

    Raises:
        CredentialsError: If no usable credentials are configured in the
            environment
    """
    client = _clients.get(region)
    if client is not None:
        return client

    with _clients_lock:
        client = _clients.get(region)
        if client is not None:
            return client

        envvar.require_one_of(
            [envvar.AWS_PROFILE, envvar.AWS_ACCESS_KEY_ID, envvar.AWS_CONTAINER_CREDENTIALS_FULL_URI],
            "credentials for running sweepers",
        )
        if os.environ.get(envvar.AWS_ACCESS_KEY_ID):
            envvar.require(envvar.AWS_SECRET_ACCESS_KEY,
                           f"static credentials value when using {envvar.AWS_ACCESS_KEY_ID}")

        logger.debug("Creating sweeper client", region=region,
                     credential_env_vars=envvar.consulted_credential_env_vars())
        client = AWSClient(ProviderSettings(region=region, max_retries=SWEEPER_MAX_RETRIES,
                                            profile=os.environ.get(envvar.AWS_PROFILE) or None))
        _clients[region] = client
        return client


def reset_shared_clients() -> None:
    """Forget cached clients; used by tests."""
    with _clients_lock:
        _clients.clear()
