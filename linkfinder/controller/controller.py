"""
Search-or-Create Controller

Owns the single input of the find-or-shorten view and reconciles the three
asynchronous operations that compete for it:

- Input tracking: set_input() and clear() mutate the typed text synchronously.
- Search: a debounced search runs once typing pauses. Every issued search
  carries a request id; a response whose id is no longer the pending one is
  dropped, so a slow early response can never overwrite a later one.
- Resolution: selecting a candidate looks the link up or creates it. Only one
  resolution may be outstanding; selections made while loading are ignored.

All state lives in one immutable SessionState that is replaced on every
transition and broadcast to subscribers. Everything runs on one asyncio event
loop, so transitions never interleave.
"""

import asyncio
import itertools
import logging
from typing import Callable, Iterable, List, Optional, Set, Tuple

from linkfinder.api.schemas import LinkPayload
from linkfinder.clients.link_store import LinkStore
from linkfinder.controller.debouncer import Debouncer
from linkfinder.controller.models import (
    Candidate,
    ErrorKind,
    ResolutionStatus,
    ResolvedLink,
    SessionState,
)
from linkfinder.core.exceptions import AliasConflictError, LinkNotFoundError, LinkStoreError
from linkfinder.core.setting import settings
from linkfinder.core.validators import normalize_input

logger = logging.getLogger(__name__)

StateCallback = Callable[[SessionState, SessionState], None]


def build_candidates(query: str, results: Iterable[LinkPayload]) -> Tuple[Candidate, ...]:
    """
    Map search results to candidates and append the create option.

    The create candidate is added last, and only when the query is non-empty
    and equals no result's alias or target exactly.
    """
    candidates: List[Candidate] = [
        Candidate.from_payload(payload) for payload in results if payload.alias
    ]
    if query and not any(candidate.matches(query) for candidate in candidates):
        candidates.append(Candidate.create(query))
    return tuple(candidates)


class SearchOrCreateController:
    """
    Interaction state machine for finding or creating a short link.

    Presentation code reads the properties (or subscribes to state changes)
    and calls set_input(), select_candidate() and clear(). No other code may
    change the state.
    """

    def __init__(
        self,
        store: LinkStore,
        debounce_seconds: Optional[float] = None,
        min_query_length: Optional[int] = None,
        cancel_superseded: Optional[bool] = None,
    ):
        """
        Initialize the controller.

        Args:
            store: Link store used for search, lookup and create
            debounce_seconds: Quiet interval before searching (default: settings)
            min_query_length: Shortest query that is searched (default: settings)
            cancel_superseded: Cancel tasks of superseded requests (default: settings);
                stale responses are ignored regardless
        """
        self._store = store
        self._debouncer = Debouncer(
            settings.SEARCH_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        )
        self._min_query_length = max(
            1, settings.MIN_QUERY_LENGTH if min_query_length is None else min_query_length
        )
        self._cancel_superseded = (
            settings.CANCEL_SUPERSEDED_REQUESTS if cancel_superseded is None else cancel_superseded
        )

        self._state = SessionState()
        self._subscribers: List[StateCallback] = []

        self._request_ids = itertools.count(1)
        self._search_task: Optional[asyncio.Task] = None

        self._resolution_ids = itertools.count(1)
        self._resolution_id: Optional[int] = None
        self._resolve_task: Optional[asyncio.Task] = None

        # Superseded requests left running when cancel_superseded is off
        self._abandoned: Set[asyncio.Task] = set()

    # State exposed to the presentation layer

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def input_text(self) -> str:
        return self._state.input_text

    @property
    def query(self) -> str:
        """The input as searched and matched: trimmed, case preserved."""
        return normalize_input(self._state.input_text)

    @property
    def candidates(self) -> Tuple[Candidate, ...]:
        return self._state.candidates

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def resolved_link(self) -> Optional[ResolvedLink]:
        return self._state.resolved_link

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self._state.error_kind

    @property
    def status(self) -> ResolutionStatus:
        return self._state.status

    @property
    def pending_request_id(self) -> Optional[int]:
        return self._state.pending_request_id

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        """
        Subscribe to state changes.

        Args:
            callback: Called with (old_state, new_state) after every change

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)
        return lambda: self._subscribers.remove(callback)

    def _update(self, **changes) -> None:
        old_state = self._state
        new_state = old_state.model_copy(update=changes)
        if new_state == old_state:
            return
        self._state = new_state
        for callback in list(self._subscribers):
            callback(old_state, new_state)

    # Input tracking

    def set_input(self, text: Optional[str]) -> None:
        """
        Replace the typed text.

        Never fetches directly: it (re)starts the debounce timer, or clears the
        candidates when the query is too short to search. A keystroke after a
        resolution settled returns the executor to idle.
        """
        text = text or ""
        changes = {"input_text": text}

        if self._state.status in (ResolutionStatus.RESOLVED, ResolutionStatus.FAILED):
            changes.update(status=ResolutionStatus.IDLE, resolved_link=None, error_kind=None)

        query = normalize_input(text)
        self._supersede_search()
        changes["pending_request_id"] = None

        if len(query) >= self._min_query_length:
            self._debouncer.schedule(self._fire_search, query)
            logger.debug(f"Search for '{query}' scheduled in {self._debouncer.delay}s")
        else:
            self._debouncer.cancel()
            changes["candidates"] = ()
            if self._state.error_kind is ErrorKind.SEARCH_FAILED:
                changes["error_kind"] = None

        self._update(**changes)

    def clear(self) -> None:
        """Reset the whole session and abandon every outstanding request."""
        self._debouncer.cancel()
        self._supersede_search()
        self._abandon(self._resolve_task)
        self._resolve_task = None
        self._resolution_id = None

        self._update(
            input_text="",
            candidates=(),
            resolved_link=None,
            pending_request_id=None,
            error_kind=None,
            status=ResolutionStatus.IDLE,
        )
        logger.debug("Session cleared")

    # Search

    def _abandon(self, task: Optional[asyncio.Task]) -> None:
        if task is None or task.done():
            return
        if self._cancel_superseded:
            task.cancel()
        self._abandoned.add(task)
        task.add_done_callback(self._abandoned.discard)

    def _supersede_search(self) -> None:
        self._abandon(self._search_task)
        self._search_task = None

    def _fire_search(self, query: str) -> None:
        request_id = next(self._request_ids)
        self._update(pending_request_id=request_id)
        self._search_task = asyncio.get_running_loop().create_task(
            self._run_search(request_id, query)
        )
        logger.debug(f"Search #{request_id} issued for '{query}'")

    async def _run_search(self, request_id: int, query: str) -> None:
        try:
            results = await self._store.search(query)
        except Exception as e:
            if request_id != self._state.pending_request_id:
                logger.debug(f"Dropping failure of stale search #{request_id}")
                return
            if isinstance(e, LinkStoreError):
                logger.warning(f"Search #{request_id} for '{query}' failed: {e}")
            else:
                logger.error(f"Search #{request_id} for '{query}' failed unexpectedly: {e}", exc_info=True)
            self._update(
                error_kind=ErrorKind.SEARCH_FAILED,
                candidates=(Candidate.create(query),),
            )
            return

        if request_id != self._state.pending_request_id:
            logger.debug(f"Dropping stale search #{request_id} for '{query}'")
            return

        changes = {"candidates": build_candidates(query, results)}
        if self._state.error_kind is ErrorKind.SEARCH_FAILED:
            changes["error_kind"] = None
        self._update(**changes)
        logger.debug(f"Search #{request_id} for '{query}' returned {len(results)} result(s)")

    # Resolution

    def select_candidate(self, candidate: Candidate) -> Optional[asyncio.Task]:
        """
        Resolve a candidate: look up an existing link or create a new one.

        Selections made while a resolution is outstanding are ignored.

        Returns:
            The task performing the request, or None if the selection was ignored
        """
        if self._state.status is ResolutionStatus.LOADING:
            logger.debug(f"Ignoring selection of {candidate.label!r} while loading")
            return None

        loop = asyncio.get_running_loop()
        resolution_id = next(self._resolution_ids)
        self._resolution_id = resolution_id
        self._update(status=ResolutionStatus.LOADING, resolved_link=None, error_kind=None)

        self._resolve_task = loop.create_task(self._resolve(resolution_id, candidate))
        return self._resolve_task

    async def _resolve(self, resolution_id: int, candidate: Candidate) -> None:
        try:
            if candidate.is_create:
                payload = await self._store.create(candidate.target)
            else:
                payload = await self._store.lookup(candidate.alias)
        except asyncio.CancelledError:
            if resolution_id == self._resolution_id:
                self._resolution_id = None
                self._update(status=ResolutionStatus.IDLE)
            raise
        except Exception as e:
            if resolution_id != self._resolution_id:
                logger.debug(f"Dropping failure of abandoned resolution #{resolution_id}")
                return
            error_kind = self._classify_failure(candidate, e)
            if isinstance(e, LinkStoreError):
                logger.warning(f"Resolving {candidate.label!r} failed ({error_kind.value}): {e}")
            else:
                logger.error(f"Resolving {candidate.label!r} failed unexpectedly: {e}", exc_info=True)
            self._resolution_id = None
            self._update(status=ResolutionStatus.FAILED, error_kind=error_kind)
            return

        if resolution_id != self._resolution_id:
            logger.debug(f"Dropping result of abandoned resolution #{resolution_id}")
            return

        self._resolution_id = None
        # The resolved link is now what the user sees; searches still queued lose.
        self._debouncer.cancel()
        self._supersede_search()
        self._update(
            status=ResolutionStatus.RESOLVED,
            resolved_link=ResolvedLink.from_payload(payload),
            pending_request_id=None,
        )
        logger.info(f"Resolved '{payload.alias}' -> {payload.url}")

    @staticmethod
    def _classify_failure(candidate: Candidate, error: Exception) -> ErrorKind:
        if isinstance(error, LinkNotFoundError):
            return ErrorKind.NOT_FOUND
        if isinstance(error, AliasConflictError):
            return ErrorKind.ALIAS_CONFLICT
        if candidate.is_create:
            return ErrorKind.CREATE_ERROR
        return ErrorKind.LOOKUP_ERROR

    # Lifecycle

    def _outstanding(self) -> List[asyncio.Task]:
        tasks = [self._debouncer.task, self._search_task, self._resolve_task, *self._abandoned]
        return [task for task in tasks if task is not None and not task.done()]

    async def settle(self) -> SessionState:
        """Wait until no timer or request is outstanding and return the state."""
        while True:
            tasks = self._outstanding()
            if not tasks:
                return self._state
            await asyncio.gather(*tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel every timer and request; the store is left open."""
        tasks = self._outstanding()
        self._debouncer.cancel()
        for task in tasks:
            task.cancel()
        self._search_task = None
        self._resolve_task = None
        self._resolution_id = None
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        changes = {"pending_request_id": None}
        if self._state.status is ResolutionStatus.LOADING:
            changes["status"] = ResolutionStatus.IDLE
        self._update(**changes)

    async def __aenter__(self) -> "SearchOrCreateController":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
