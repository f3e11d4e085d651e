import logging

import pytest
import structlog
from botocore.exceptions import ClientError
from moto import mock_aws
from unittest.mock import MagicMock

from awsprovider.config.schemas import ProviderSettings
from awsprovider.domain.tags import DefaultTagsConfig, IgnoreTagsConfig, KeyValueTags
from awsprovider.infrastructure.logging.logger import NOISY_SDK_LOGGERS
from awsprovider.infrastructure.runtime.registry import ResourceRegistry
from awsprovider.providers.aws.aws_client import AWSClient
from awsprovider.providers.aws.sweep import configure_sweep_orchestrator, reset_shared_clients
from awsprovider.providers.aws.sweep.orchestrator import DEFAULT_MAX_WORKERS, SWEEP_THROTTLING_RETRY_TIMEOUT
from awsprovider.providers.aws.sweep.registry import SweeperRegistry


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Mocked AWS Credentials for moto."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
    monkeypatch.delenv('AWS_PROFILE', raising=False)
    monkeypatch.delenv('AWSPROVIDER_CONFIG_FILE', raising=False)


@pytest.fixture(autouse=True)
def reset_registries():
    """Every test starts with empty registries, client cache and sweep defaults."""
    ResourceRegistry.reset_instance()
    SweeperRegistry.reset_instance()
    reset_shared_clients()
    yield
    ResourceRegistry.reset_instance()
    SweeperRegistry.reset_instance()
    reset_shared_clients()
    configure_sweep_orchestrator(throttling_retry_timeout=SWEEP_THROTTLING_RETRY_TIMEOUT,
                                 max_workers=DEFAULT_MAX_WORKERS)


@pytest.fixture
def restore_logging():
    """Undo setup_logging side effects on the root logger and structlog."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
    for name in NOISY_SDK_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)
    structlog.reset_defaults()


@pytest.fixture
def client_error():
    """Factory for botocore ClientErrors."""
    def make(code, message="", operation="Operation", status=400):
        return ClientError(
            {
                "Error": {"Code": code, "Message": message},
                "ResponseMetadata": {"HTTPStatusCode": status},
            },
            operation,
        )
    return make


@pytest.fixture
def aws_client():
    """AWSClient against the moto backend."""
    with mock_aws():
        yield AWSClient(ProviderSettings(region='us-east-1'))


@pytest.fixture
def mock_meta():
    """Provider handle with mocked service clients and real tag configuration."""
    meta = MagicMock()
    meta.region_name = "us-east-1"
    meta.partition = "aws"
    meta.account_id = "123456789012"
    meta.default_tags_config = DefaultTagsConfig(KeyValueTags())
    meta.ignore_tags_config = IgnoreTagsConfig()
    for name in ("ec2_client", "eks_client", "cloudformation_client", "sqs_client"):
        getattr(meta, name).can_paginate.return_value = False
    return meta
