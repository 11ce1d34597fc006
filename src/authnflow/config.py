"""Client configuration for authnflow.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ._transport import USER_AGENT
from .exceptions import ValidationError

ENV_ORG_URL = "AUTHN_ORG_URL"
ENV_TIMEOUT = "AUTHN_TIMEOUT"
ENV_API_KEY = "AUTHN_API_KEY"


class ClientConfig(BaseModel):
    """Settings used to build the default HTTP transport."""

    model_config = ConfigDict(frozen=True)

    org_url: str
    timeout: float = Field(default=30.0, gt=0)
    api_key: str | None = Field(default=None, repr=False)
    user_agent: str = USER_AGENT

    @field_validator("org_url")
    @classmethod
    def _check_org_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            msg = "org_url must be an http(s) URL"
            raise ValueError(msg)
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Build a config from ``AUTHN_*`` environment variables.

        Raises:
            ValidationError: If the org URL is missing or a value is invalid.

        """
        env = os.environ if environ is None else environ
        org_url = env.get(ENV_ORG_URL)
        if not org_url:
            msg = f"{ENV_ORG_URL} is not set"
            raise ValidationError(msg, field=ENV_ORG_URL)

        values: dict[str, str] = {"org_url": org_url}
        if env.get(ENV_TIMEOUT):
            values["timeout"] = env[ENV_TIMEOUT]
        if env.get(ENV_API_KEY):
            values["api_key"] = env[ENV_API_KEY]

        try:
            return cls.model_validate(values)
        except pydantic.ValidationError as e:
            raise ValidationError("Invalid client configuration", details=e.errors()) from e
