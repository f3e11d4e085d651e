# src/awsprovider/config/defaults.py
from enum import Enum
from typing import Any, Dict


class LogLevel(str, Enum):
    """Log level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogDestination(str, Enum):
    """Log destination enumeration."""
    FILE = "file"
    STDOUT = "stdout"
    BOTH = "both"


CONFIG_FILE_ENV_VAR = "AWSPROVIDER_CONFIG_FILE"

DEFAULT_CONFIG: Dict[str, Any] = {
    "version": "1.0.0",
    "provider": {
        "region": "${AWS_REGION:us-east-1}",
        "max_retries": 25,
        "connect_timeout": 10,
        "read_timeout": 60,
        "endpoints": {},
        "default_tags": {"tags": {}},
        "ignore_tags": {"keys": [], "key_prefixes": []},
        "skip_credentials_validation": False,
        "skip_requesting_account_id": False,
    },
    "logging": {
        "level": LogLevel.INFO.value,
        "destination": LogDestination.STDOUT.value,
        "file_path": "logs/awsprovider.log",
        "max_size_mb": 10,
        "backup_count": 5,
    },
    "sweeper": {
        "regions": [],
        "throttling_retry_timeout": 600,
        "max_workers": 10,
    },
}

# Environment variable -> (section, key)
ENVIRONMENT_OVERRIDES = {
    "AWS_DEFAULT_REGION": ("provider", "region"),
    "AWS_REGION": ("provider", "region"),
    "AWS_PROFILE": ("provider", "profile"),
    "AWSPROVIDER_LOG_LEVEL": ("logging", "level"),
    "AWSPROVIDER_LOG_DESTINATION": ("logging", "destination"),
    "AWSPROVIDER_LOG_FILE": ("logging", "file_path"),
    "SWEEP": ("sweeper", "regions"),
    "SWEEP_THROTTLING_RETRY_TIMEOUT": ("sweeper", "throttling_retry_timeout"),
}
