# ============================================================================
# REMOTE FUNCTION RESULT MODELS
# ============================================================================
# EPOCH: 1 - RETAIL STORAGE
# STATUS: Core model - Function app response envelope and typed result
# PURPOSE: Distinguish unreachable remote from remote-rejected requests
# CREATED: 18 OCT 2026
# EXPORTS: FunctionEnvelope, RemoteResult
# DEPENDENCIES: pydantic
# ============================================================================
"""
Remote Function Result Models

The function app answers with a small JSON envelope:

    {"Success": true, "Message": "...", "Url": "..."}

but callers must tolerate any body. RemoteResult keeps the raw body
verbatim alongside the parsed fields and an outcome classification, so
"remote said no" and "we could not reach the remote" stay distinct.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.contracts import RemoteOperation, RemoteOutcome


class FunctionEnvelope(BaseModel):
    """Response envelope produced by the function app."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=False, alias="Success")
    message: str = Field(default="", alias="Message")
    url: str = Field(default="", alias="Url")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def ok(cls, message: str, url: str = "") -> "FunctionEnvelope":
        return cls(success=True, message=message, url=url)

    @classmethod
    def fail(cls, message: str) -> "FunctionEnvelope":
        return cls(success=False, message=message)

    @classmethod
    def parse(cls, body: str) -> Optional["FunctionEnvelope"]:
        """Parse a body, returning None if it is not an envelope-shaped JSON object."""
        try:
            data = json.loads(body)
        except (TypeError, ValueError):
            return None
        if not isinstance(data, dict):
            return None
        try:
            return cls.model_validate(data)
        except ValidationError:
            return None


@dataclass
class RemoteResult:
    """Typed result of one remote function call."""
    operation: RemoteOperation
    outcome: RemoteOutcome
    body: str
    status_code: Optional[int] = None
    success: bool = False
    message: str = ""
    url: Optional[str] = None
    payload: Optional[Dict[str, Any]] = field(default=None, repr=False)

    @property
    def reached_remote(self) -> bool:
        return self.outcome.reached_remote

    @classmethod
    def from_response(
        cls,
        operation: RemoteOperation,
        status_code: int,
        body: str,
    ) -> "RemoteResult":
        """
        Classify an HTTP response.

        - 2xx + envelope: success taken from the envelope
        - 2xx + non-JSON body: success, raw body is the message
        - non-2xx: rejected, message from envelope or raw body
        """
        envelope = FunctionEnvelope.parse(body)
        is_2xx = 200 <= status_code < 300

        if envelope is not None:
            success = is_2xx and envelope.success
            message = envelope.message or body
            url = envelope.url or None
            payload = envelope.model_dump(by_alias=True)
        else:
            success = is_2xx
            message = body.strip() or f"HTTP {status_code}"
            url = None
            payload = None

        return cls(
            operation=operation,
            outcome=RemoteOutcome.ACCEPTED if success else RemoteOutcome.REJECTED,
            body=body,
            status_code=status_code,
            success=success,
            message=message,
            url=url,
            payload=payload,
        )

    @classmethod
    def failure(
        cls,
        operation: RemoteOperation,
        outcome: RemoteOutcome,
        message: str,
    ) -> "RemoteResult":
        """Synthesized failure for calls that produced no remote answer."""
        return cls(
            operation=operation,
            outcome=outcome,
            body=FunctionEnvelope.fail(message).to_json(),
            success=False,
            message=message,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation.value,
            "outcome": self.outcome.value,
            "status_code": self.status_code,
            "success": self.success,
            "message": self.message,
            "url": self.url,
        }


__all__ = ["FunctionEnvelope", "RemoteResult"]
