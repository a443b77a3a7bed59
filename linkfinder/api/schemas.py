"""
Link Store Request and Response Schemas

This module defines the Pydantic models exchanged with the link store API.
Separated from the client so tests and stub servers can reuse them.

Design Principles:
- Request models: Define what the client sends
- Response models: Define what the client accepts back
- Unknown response fields are ignored so the store can grow its payload
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ViewCounts(BaseModel):
    """Visit counters reported for a link."""
    model_config = ConfigDict(frozen=True)

    today: int = Field(default=0, ge=0)
    week: int = Field(default=0, ge=0)
    all: int = Field(default=0, ge=0)


class LinkPayload(BaseModel):
    """A link as returned by search, lookup and create."""
    model_config = ConfigDict(extra="ignore")

    alias: str = Field(..., description="The short identifier")
    url: str = Field(..., description="The destination URL")
    views: Optional[ViewCounts] = Field(default=None, description="Visit counters, when the store reports them")


class SearchRequest(BaseModel):
    """Request body for the search endpoint."""
    query: str = Field(..., min_length=1, description="Partial alias or URL")


class SearchResponse(BaseModel):
    """Response body for the search endpoint."""
    model_config = ConfigDict(extra="ignore")

    results: List[LinkPayload] = Field(default_factory=list)


class CreateRequest(BaseModel):
    """Request body for the create endpoint."""
    url: str = Field(..., min_length=1, description="The destination URL to shorten")
