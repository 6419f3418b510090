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
"""Hook core types: OperationDescriptor dataclass."""

from __future__ import annotations

import inspect
from dataclasses import dataclass


@dataclass(frozen=True)
class OperationDescriptor:
    """An instrumented operation discovered on a class.

    Attributes:
        name: Method name of the operation.
        begin_event: Event fired with the call arguments before the operation runs.
        after_event: Event fired with the resolved value after it succeeds.
        signature: Signature of the original method, forwarded unchanged.
        owner: The most-derived class that defines the operation.
    """

    name: str
    begin_event: str
    after_event: str
    signature: inspect.Signature
    owner: type
