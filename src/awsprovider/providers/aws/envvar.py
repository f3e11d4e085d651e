"""Environment variables consulted by the AWS provider."""
import os
from typing import Iterable, List, Tuple

from awsprovider.infrastructure.exceptions import CredentialsError

AWS_ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
AWS_SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
AWS_SESSION_TOKEN = "AWS_SESSION_TOKEN"
AWS_PROFILE = "AWS_PROFILE"
AWS_CONTAINER_CREDENTIALS_FULL_URI = "AWS_CONTAINER_CREDENTIALS_FULL_URI"
AWS_CONTAINER_CREDENTIALS_RELATIVE_URI = "AWS_CONTAINER_CREDENTIALS_RELATIVE_URI"
AWS_SHARED_CREDENTIALS_FILE = "AWS_SHARED_CREDENTIALS_FILE"
AWS_WEB_IDENTITY_TOKEN_FILE = "AWS_WEB_IDENTITY_TOKEN_FILE"
AWS_ROLE_ARN = "AWS_ROLE_ARN"
AWS_DEFAULT_REGION = "AWS_DEFAULT_REGION"
AWS_REGION = "AWS_REGION"

# Checked by the standard credential provider chain, in order.
CREDENTIAL_ENV_VARS = (
    AWS_ACCESS_KEY_ID,
    AWS_SECRET_ACCESS_KEY,
    AWS_SESSION_TOKEN,
    AWS_PROFILE,
    AWS_SHARED_CREDENTIALS_FILE,
    AWS_WEB_IDENTITY_TOKEN_FILE,
    AWS_ROLE_ARN,
    AWS_CONTAINER_CREDENTIALS_RELATIVE_URI,
    AWS_CONTAINER_CREDENTIALS_FULL_URI,
)


def consulted_credential_env_vars() -> List[str]:
    """Names of credential environment variables that are currently set."""
    return [name for name in CREDENTIAL_ENV_VARS if os.environ.get(name)]


def require(name: str, usage: str) -> str:
    """
    Value of a required environment variable.

    Raises:
        CredentialsError: If the variable is unset or empty
    """
    value = os.environ.get(name, "")
    if not value:
        raise CredentialsError(f"environment variable {name} must be set. Usage: {usage}", env_vars=[name])
    return value


def require_one_of(names: Iterable[str], usage: str) -> Tuple[str, str]:
    """
    First of ``names`` that is set, with its value.

    Raises:
        CredentialsError: If none of them is set
    """
    names = list(names)
    for name in names:
        value = os.environ.get(name, "")
        if value:
            return name, value
    raise CredentialsError(f"at least one environment variable of {names} must be set. Usage: {usage}",
                           env_vars=names)
