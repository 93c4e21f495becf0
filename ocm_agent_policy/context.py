# Copyright 2026 The Kubernetes Authors.
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
"""
Caller-owned cancellation and deadline for a single reconcile pass.

The control loop creates a ReconcileContext, hands it to the reconciler and may
cancel it from another thread. The reconciler checks it before every store call
and the Kubernetes store turns the remaining time into a request timeout.
"""

import threading
import time
from typing import Optional

from .errors import ReconcileCancelled, ReconcileTimeout


class ReconcileContext:

    def __init__(self, timeout: Optional[float] = None):
        self._deadline = None
        if timeout is not None:
            self._deadline = time.monotonic() + timeout
        self._cancelled = threading.Event()

    def cancel(self):
        """Marks the pass as cancelled. Safe to call from any thread."""
        self._cancelled.set()

    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self):
        """Raises if the pass must not perform any further store operation."""
        if self._cancelled.is_set():
            raise ReconcileCancelled("reconcile pass was cancelled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise ReconcileTimeout("reconcile pass exceeded its deadline")
