"""
Controller State Models

Value types shared by the controller and the presentation layer. All of them
are immutable; the controller replaces them wholesale instead of editing them.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from linkfinder.api.schemas import LinkPayload, ViewCounts


class CandidateKind(str, Enum):
    """What selecting a candidate does."""
    EXISTING = "existing"
    CREATE = "create"


class ResolutionStatus(str, Enum):
    """Resolution executor state."""
    IDLE = "idle"
    LOADING = "loading"
    RESOLVED = "resolved"
    FAILED = "failed"


class ErrorKind(str, Enum):
    """Failure last reported to the user."""
    SEARCH_FAILED = "search_failed"
    NOT_FOUND = "not_found"
    LOOKUP_ERROR = "lookup_error"
    CREATE_ERROR = "create_error"
    ALIAS_CONFLICT = "alias_conflict"


class Candidate(BaseModel):
    """
    One option offered to the user.

    An existing candidate points at a stored link; a create candidate carries
    the raw typed text the user wants to shorten and has no alias.
    """
    model_config = ConfigDict(frozen=True)

    kind: CandidateKind
    target: str
    alias: Optional[str] = None

    @model_validator(mode="after")
    def _check_alias(self) -> "Candidate":
        if self.kind is CandidateKind.EXISTING and not self.alias:
            raise ValueError("existing candidates need an alias")
        if self.kind is CandidateKind.CREATE and self.alias is not None:
            raise ValueError("create candidates have no alias")
        return self

    @classmethod
    def existing(cls, alias: str, target: str) -> "Candidate":
        return cls(kind=CandidateKind.EXISTING, alias=alias, target=target)

    @classmethod
    def create(cls, text: str) -> "Candidate":
        return cls(kind=CandidateKind.CREATE, target=text)

    @classmethod
    def from_payload(cls, payload: LinkPayload) -> "Candidate":
        return cls.existing(payload.alias, payload.url)

    @property
    def is_create(self) -> bool:
        return self.kind is CandidateKind.CREATE

    @property
    def label(self) -> str:
        if self.is_create:
            return f'Shorten "{self.target}"'
        return f"{self.alias} → {self.target}"

    def matches(self, text: str) -> bool:
        """True if text is exactly this candidate's alias or target."""
        return text == self.alias or text == self.target


class ResolvedLink(BaseModel):
    """The link shown to the user once a lookup or creation succeeds."""
    model_config = ConfigDict(frozen=True)

    alias: str
    target: str
    views: Optional[ViewCounts] = None

    @classmethod
    def from_payload(cls, payload: LinkPayload) -> "ResolvedLink":
        return cls(alias=payload.alias, target=payload.url, views=payload.views)


class SessionState(BaseModel):
    """Snapshot of everything the presentation layer renders."""
    model_config = ConfigDict(frozen=True)

    input_text: str = ""
    candidates: Tuple[Candidate, ...] = Field(default_factory=tuple)
    resolved_link: Optional[ResolvedLink] = None
    pending_request_id: Optional[int] = None
    error_kind: Optional[ErrorKind] = None
    status: ResolutionStatus = ResolutionStatus.IDLE

    @property
    def loading(self) -> bool:
        return self.status is ResolutionStatus.LOADING
