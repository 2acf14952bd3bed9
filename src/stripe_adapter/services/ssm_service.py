"""Adapter configuration sources.

Parameters is a plain in-memory mapping for tests and hosts that already
hold their configuration. SSMParameters reads SecureString parameters from
AWS SSM Parameter Store under /payments/{environment}/stripe/{key}.
"""

import logging
import os
from collections.abc import Mapping
from functools import lru_cache
from typing import ClassVar

import boto3
from botocore.exceptions import ClientError

from ..models.errors import ConfigurationError, ErrorCode

logger = logging.getLogger(__name__)

API_KEY = "api_key"
CLIENT_ID = "client_id"
WEBHOOK_SECRET = "webhook_secret"
SESSION_ID = "session_id"
DOMAIN = "domain"


class Parameters:
    """In-memory key-value configuration."""

    def __init__(self, values: Mapping[str, str | None] | None = None) -> None:
        self._values = dict(values or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)


class SSMParameters:
    """Configuration backed by AWS SSM Parameter Store.

    Features:
    - Retrieves SecureString parameters with automatic decryption
    - In-process caching, including parameters that do not exist
    - Environment-aware parameter paths

    Usage:
        params = SSMParameters(environment="prod")
        secret = params.get("webhook_secret")
    """

    _cache: ClassVar[dict[str, str | None]] = {}

    def __init__(self, environment: str | None = None, prefix: str = "/payments") -> None:
        """Initialize the SSM client.

        Args:
            environment: Environment name (dev, prod). Defaults to ENVIRONMENT env var.
            prefix: Root of the parameter hierarchy.
        """
        self._environment = environment or os.environ.get("ENVIRONMENT", "dev")
        self._prefix = prefix.rstrip("/")
        self._client = boto3.client("ssm")

    def parameter_name(self, key: str) -> str:
        return f"{self._prefix}/{self._environment}/stripe/{key}"

    def get(self, key: str, *, use_cache: bool = True) -> str | None:
        """Retrieve a configuration value.

        Args:
            key: Configuration key (e.g., "webhook_secret")
            use_cache: Whether to use cached value if available (default: True)

        Returns:
            The decrypted value, or None if the parameter does not exist.

        Raises:
            ConfigurationError: If the parameter store cannot be read.
        """
        name = self.parameter_name(key)

        if use_cache and name in self._cache:
            logger.debug("SSM cache hit for %s", name)
            return self._cache[name]

        try:
            logger.info("Fetching SSM parameter: %s", name)
            response = self._client.get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "ParameterNotFound":
                logger.info("SSM parameter not found: %s", name)
                self._cache[name] = None
                return None
            logger.error("Failed to retrieve SSM parameter %s: %s", name, error_code)
            raise ConfigurationError(
                ErrorCode.PARAMETER_STORE_ERROR,
                details={"parameter": name, "error_code": error_code},
            ) from e

        value = response["Parameter"]["Value"]
        self._cache[name] = value
        return value

    def clear_cache(self) -> None:
        """Clear all cached parameters."""
        self._cache.clear()
        logger.info("SSM parameter cache cleared")


@lru_cache(maxsize=1)
def get_parameters() -> SSMParameters:
    """Get the shared SSM-backed parameter source (singleton pattern)."""
    return SSMParameters()
