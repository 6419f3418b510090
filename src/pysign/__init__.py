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
"""PySign: YouSign v3 client with generated before/after lifecycle hooks."""

from pysign.client import Client, ClientSettings, YouSignClient
from pysign.core import Config, config_properties
from pysign.hooks import HookRegistry, discover_operations, instrument, no_hook
from pysign.kernel import HooksNotInitialized, InvalidHandler, PySignException

__version__ = "0.1.0"

__all__ = [
    "Client",
    "ClientSettings",
    "Config",
    "HookRegistry",
    "HooksNotInitialized",
    "InvalidHandler",
    "PySignException",
    "YouSignClient",
    "config_properties",
    "discover_operations",
    "instrument",
    "no_hook",
    "__version__",
]
