"""Type aliases used across the Callsight pipeline."""

from __future__ import annotations

from typing import Any

JsonDict = dict[str, Any]
CallId = str
CorrelationKey = str
ResumeMarker = dict[str, Any]
