"""Notification delivery models.

Destinations describe who a message is for; the dispatcher resolves them once
and walks an ordered list of delivery strategies. DeliveryOutcome records what
was tried, for reporting only.

Uses Pydantic BaseModel for:
- Email validation (EmailStr)
- Runtime input validation of destinations built from CSV rows
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator


class StrategyName(Enum):
    """Delivery strategies, in their default evaluation order."""

    DIRECT = "direct"
    OPEN_OR_FIND = "open_or_find"
    BROADCAST = "broadcast"


class ResolutionKind(Enum):
    DIRECT_ID = "direct_id"
    CHANNEL_ID = "channel_id"
    UNRESOLVED = "unresolved"


class Destination(BaseModel):
    """Where a notification should go.

    Exactly what is known about the recipient varies by script: a Slack user
    ID read from config, an email address from a CSV row, or only a channel.

    Attributes:
        user_id: Resolved direct identity (Slack user ID)
        email: Identity to resolve through the directory
        channel_id: Broadcast channel to post to directly
        display_name: Human label used when mentioning an unresolved recipient

    Example:
        Destination(email="new.hire@example.com", display_name="jdoe")
    """

    user_id: Optional[str] = None
    email: Optional[EmailStr] = None
    channel_id: Optional[str] = None
    display_name: Optional[str] = None

    @model_validator(mode="after")
    def require_identifier(self) -> "Destination":
        if not (self.user_id or self.email or self.channel_id):
            raise ValueError("Destination needs a user_id, email or channel_id")
        return self

    @property
    def label(self) -> str:
        """Best human-readable name for logs and broadcast mentions."""
        return self.display_name or self.email or self.user_id or self.channel_id


class ResolvedDestination(BaseModel):
    """Outcome of resolving a Destination, produced once per target."""

    kind: ResolutionKind
    value: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_direct(self) -> bool:
        return self.kind == ResolutionKind.DIRECT_ID

    @classmethod
    def direct(cls, user_id: str) -> "ResolvedDestination":
        return cls(kind=ResolutionKind.DIRECT_ID, value=user_id)

    @classmethod
    def channel(cls, channel_id: str) -> "ResolvedDestination":
        return cls(kind=ResolutionKind.CHANNEL_ID, value=channel_id)

    @classmethod
    def unresolved(cls, error: str) -> "ResolvedDestination":
        return cls(kind=ResolutionKind.UNRESOLVED, error=error)


class DeliveryOutcome(BaseModel):
    """What happened while delivering one message.

    Attributes:
        attempted: Strategies tried, in order
        succeeded: Strategy that delivered the message, if any
        errors: Error message per failed strategy
        resolution_error: Why the recipient could not be resolved, if it could not
        channel: Channel the message landed in
        ts: Slack message timestamp
    """

    attempted: List[StrategyName] = Field(default_factory=list)
    succeeded: Optional[StrategyName] = None
    errors: Dict[StrategyName, str] = Field(default_factory=dict)
    resolution_error: Optional[str] = None
    channel: Optional[str] = None
    ts: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.succeeded is not None

    def summary(self) -> str:
        """Aggregated description of every failure, used in error messages."""
        parts = []
        if self.resolution_error:
            parts.append(f"resolve: {self.resolution_error}")
        for name in self.attempted:
            if name in self.errors:
                parts.append(f"{name.value}: {self.errors[name]}")
        return "; ".join(parts) or "no strategy was applicable"
