# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Client settings bound from the ``pysign.client`` configuration section."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from pysign.core.config import Config, config_properties

BASE_URLS: dict[str, str] = {
    "sandbox": "https://api-sandbox.yousign.app/v3",
    "production": "https://api.yousign.app/v3",
}


class RetrySettings(BaseModel):
    """Retry policy for idempotent reads."""

    max_attempts: int = Field(default=3, ge=1)
    base_delay: float = Field(default=0.5, ge=0)


@config_properties(prefix="pysign.client")
class ClientSettings(BaseModel):
    """Connection settings for the YouSign v3 API.

    Attributes:
        environment: ``"sandbox"`` or ``"production"``; selects the base URL.
        timeout: Request timeout in seconds.
        api_key: Bearer token; usually supplied via ``PYSIGN_CLIENT_API_KEY``.
        retry: Backoff policy applied to GET requests.
    """

    environment: Literal["sandbox", "production"] = "sandbox"
    timeout: float = Field(default=30.0, gt=0)
    api_key: str | None = None
    retry: RetrySettings = Field(default_factory=RetrySettings)

    @property
    def base_url(self) -> str:
        return BASE_URLS[self.environment]

    @classmethod
    def from_config(cls, config: Config) -> ClientSettings:
        """Bind the ``pysign.client`` section, honouring ``PYSIGN_CLIENT_*`` env overrides."""
        return config.bind(cls)
