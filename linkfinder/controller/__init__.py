"""
Interaction controller for the find-or-create input.
"""

from linkfinder.controller.controller import SearchOrCreateController, build_candidates
from linkfinder.controller.models import (
    Candidate,
    CandidateKind,
    ErrorKind,
    ResolutionStatus,
    ResolvedLink,
    SessionState,
)

__all__ = [
    "Candidate",
    "CandidateKind",
    "ErrorKind",
    "ResolutionStatus",
    "ResolvedLink",
    "SearchOrCreateController",
    "SessionState",
    "build_candidates",
]
