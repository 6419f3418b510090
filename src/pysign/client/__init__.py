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
"""PySign Client: YouSign v3 REST client with lifecycle hooks."""

from pysign.client.client import Client, YouSignClient
from pysign.client.files import build_document_form
from pysign.client.retry import RetryPolicy
from pysign.client.settings import BASE_URLS, ClientSettings, RetrySettings

__all__ = [
    "BASE_URLS",
    "Client",
    "ClientSettings",
    "RetryPolicy",
    "RetrySettings",
    "YouSignClient",
    "build_document_form",
]
