# src/clientimport/pipeline/selection.py
"""
Selection state for the import list.

A selection is a frozenset of candidate ids. Every function takes the current
candidate list and returns a new selection that only holds ids present in it.
"""
from typing import FrozenSet, Iterable, List, Sequence

from clientimport.models import CandidateRecord

Selection = FrozenSet[int]

EMPTY: Selection = frozenset()


def candidate_ids(candidates: Iterable[CandidateRecord]) -> Selection:
    return frozenset(c["id"] for c in candidates)


def toggle(selection: Selection, candidates: Sequence[CandidateRecord], cid: int) -> Selection:
    """Flip one id. Ids not in the candidate list are ignored."""
    if cid not in candidate_ids(candidates):
        return selection
    if cid in selection:
        return selection - {cid}
    return selection | {cid}


def select_all(candidates: Sequence[CandidateRecord]) -> Selection:
    return candidate_ids(candidates)


def select_none() -> Selection:
    return EMPTY


def on_new_fetch_result(candidates: Sequence[CandidateRecord]) -> Selection:
    # old ids may mean different clients in the new list
    return EMPTY


def selected_candidates(
    candidates: Sequence[CandidateRecord], selection: Selection
) -> List[CandidateRecord]:
    """Selected candidates in list order (not selection order)."""
    return [c for c in candidates if c["id"] in selection]
