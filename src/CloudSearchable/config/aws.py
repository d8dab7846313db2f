"""AWS access configuration.

Keys are never stored in the YAML file; the config names the environment
variables that hold them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping

from CloudSearchable.config.common import expect_str, get_required_value, get_section
from CloudSearchable.core.exceptions import ConfigurationError
from CloudSearchable.signing.signer import Credentials


@dataclass(frozen=True, slots=True)
class AwsConfig:
    """Store region and credential settings."""

    region: str
    access_key_env: str = "AWS_ACCESS_KEY_ID"
    secret_key_env: str = "AWS_SECRET_ACCESS_KEY"
    access_key: str = field(default="", repr=False)
    secret_key: str = field(default="", repr=False)

    def credentials(self) -> Credentials:
        """Return the signing credentials.

        Raises:
            ConfigurationError: If either key is missing from the environment.
        """
        missing = [
            env for env, value in ((self.access_key_env, self.access_key), (self.secret_key_env, self.secret_key))
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"AWS credentials not set: {', '.join(missing)}. Set them in your .env file or shell environment."
            )
        return Credentials(access_key=self.access_key, secret_key=self.secret_key)


def load_aws(raw: Mapping[str, Any]) -> AwsConfig:
    """Load the `aws` section and read the keys from the environment.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "aws", required=True)
    access_key_env = expect_str(section.get("access_key_env", "AWS_ACCESS_KEY_ID"), "aws.access_key_env")
    secret_key_env = expect_str(section.get("secret_key_env", "AWS_SECRET_ACCESS_KEY"), "aws.secret_key_env")
    return AwsConfig(
        region=expect_str(get_required_value(section, "region", "aws.region"), "aws.region"),
        access_key_env=access_key_env,
        secret_key_env=secret_key_env,
        access_key=_load_from_env(access_key_env),
        secret_key=_load_from_env(secret_key_env),
    )


def check_aws(config: AwsConfig) -> None:
    """Validate aws domain constraints."""
    if not config.region.strip():
        raise ValueError("aws.region must not be empty")
    if not config.access_key_env.strip():
        raise ValueError("aws.access_key_env must not be empty")
    if not config.secret_key_env.strip():
        raise ValueError("aws.secret_key_env must not be empty")


def _load_from_env(name: str) -> str:
    return os.getenv(name, "").strip()
