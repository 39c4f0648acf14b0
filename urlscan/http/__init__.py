"""
HTTP layer: data model, transport adapter, error classifier and request pipeline.

Only the dependency-free data model is re-exported here; import the
classifier, transport and pipeline from their modules.
"""

from .models import (
    Attempt,
    FailureKind,
    Outcome,
    Request,
    ResponseEnvelope,
    TransportFailure,
    freeze_headers,
)

__all__ = [
    "Attempt",
    "FailureKind",
    "Outcome",
    "Request",
    "ResponseEnvelope",
    "TransportFailure",
    "freeze_headers",
]
