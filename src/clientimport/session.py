# src/clientimport/session.py
"""
One operator's import interaction: fetch the roster, pick clients, import.

The session owns the candidate list and the selection. It is the boundary of
the import pipeline: fetch errors end up in `error` for the operator to read,
they are never raised to the caller.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, List, Optional

from clientimport.clients.ekontroll import CandidateSource, fetch_candidates
from clientimport.errors import EmptyCredential, FetchFailed
from clientimport.io.store import ClientStore
from clientimport.models import CandidateRecord, ClientDraft
from clientimport.pipeline import selection as sel
from clientimport.pipeline.mapping import map_candidates, merge

logger = logging.getLogger(__name__)

WAITING_MESSAGE = "Waiting for fetch..."
NO_DATA_MESSAGE = "No data found."
CLOSED_MESSAGE = "Import closed."


class ImportSession:
    def __init__(
        self,
        source: CandidateSource,
        *,
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        self.source = source
        self.on_close = on_close
        self.candidates: List[CandidateRecord] = []
        self.selection: sel.Selection = sel.EMPTY
        self.busy = False
        self.error = ""
        self.has_fetched = False
        self.closed = False

    # ---- fetch -------------------------------------------------------------

    def fetch(self, credential: str) -> bool:
        """
        Run the fetch stage. Returns False if it did not run or failed; the
        reason is in `error` (or the session was busy/closed).
        """
        if self.closed:
            logger.debug("Ignoring fetch on a closed session")
            return False
        if self.busy:
            logger.debug("Ignoring fetch while another fetch is running")
            return False

        self.busy = True
        self.error = ""
        try:
            candidates = fetch_candidates(credential, self.source)
        except EmptyCredential as e:
            # nothing was asked of the source; keep the current list
            self.error = str(e)
            return False
        except FetchFailed as e:
            logger.warning("Roster fetch failed: %s", e.cause)
            self.error = str(e)
            self.candidates = []
            self.selection = sel.EMPTY
            return False
        finally:
            self.busy = False

        self.candidates = list(candidates)
        self.selection = sel.on_new_fetch_result(self.candidates)
        self.has_fetched = True
        return True

    # ---- selection ---------------------------------------------------------

    def toggle(self, cid: int) -> None:
        self.selection = sel.toggle(self.selection, self.candidates, cid)

    def select_all(self) -> None:
        self.selection = sel.select_all(self.candidates)

    def select_none(self) -> None:
        self.selection = sel.select_none()

    @property
    def all_selected(self) -> bool:
        return bool(self.candidates) and len(self.selection) == len(self.candidates)

    def selected(self) -> List[CandidateRecord]:
        return sel.selected_candidates(self.candidates, self.selection)

    # ---- import / close ----------------------------------------------------

    def preview(self, *, today: Optional[dt.date] = None) -> List[ClientDraft]:
        """Drafts the current selection would produce, without merging."""
        return map_candidates(self.selected(), today=today)

    def import_selected(self, store: ClientStore, *, today: Optional[dt.date] = None) -> List[ClientDraft]:
        """
        Map every selected candidate, hand the batch to `store` and close.
        With nothing selected this does nothing and the session stays open.
        """
        if self.closed or not self.selection:
            return []
        drafts = map_candidates(self.selected(), today=today)
        merge(drafts, store)
        self.close()
        return drafts

    def close(self) -> None:
        """Cancel or finish: drop the list and the selection, touch nothing else."""
        self.candidates = []
        self.selection = sel.EMPTY
        self.error = ""
        self.closed = True
        if self.on_close is not None:
            self.on_close()

    # ---- operator messages -------------------------------------------------

    @property
    def message(self) -> str:
        if self.closed:
            return CLOSED_MESSAGE
        if self.error:
            return self.error
        if not self.has_fetched:
            return WAITING_MESSAGE
        if not self.candidates:
            return NO_DATA_MESSAGE
        return f"{len(self.selection)} selected"
