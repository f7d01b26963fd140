# src/clientimport/pipeline/reconcile.py
"""
Flag roster candidates that look like clients we already have.

Only used to annotate listings; the operator still decides what to import.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence

from rapidfuzz import fuzz, process

from clientimport.models import CandidateRecord

# Brazilian legal-form suffixes that say nothing about who the company is
_SUFFIXES = (
    "ltda", "ltda.", "ltda me", "ltda-me", "ltda epp", "me", "epp", "eireli",
    "s/a", "s.a.", "s.a", "sa", "s/s", "ss", "mei",
)
_SUFFIX_RE = re.compile(r"[\s,\-]+(" + "|".join(re.escape(s) for s in _SUFFIXES) + r")$")


def _clean_co(s: str) -> str:
    if not s:
        return ""
    s = s.lower().strip()
    # strip repeated suffixes, e.g. "foo ltda me"
    while True:
        stripped = _SUFFIX_RE.sub("", s).strip()
        if stripped == s:
            break
        s = stripped
    return s


def find_existing_client(
    company_name: str, existing_names: Sequence[str], score_cutoff: int = 90
) -> Optional[str]:
    """
    Return the existing client name that best matches `company_name`, or None.
    Matching uses RapidFuzz WRatio on suffix-stripped, lowercased names.
    """
    cand = _clean_co(company_name)
    if not cand or not existing_names:
        return None

    # Parallel arrays so RapidFuzz only sees strings
    names: List[str] = []
    originals: List[str] = []
    for n in existing_names:
        co = _clean_co(str(n))
        if co:
            names.append(co)
            originals.append(str(n))

    if not names:
        return None

    best = process.extractOne(cand, names, scorer=fuzz.WRatio, score_cutoff=score_cutoff)
    if not best:
        return None

    _, _, idx = best
    return originals[idx]


def possible_duplicates(
    candidates: Iterable[CandidateRecord], existing_names: Sequence[str], score_cutoff: int = 90
) -> Dict[int, str]:
    """Map candidate id -> existing client name it probably duplicates."""
    out: Dict[int, str] = {}
    for c in candidates:
        match = find_existing_client(c["razao_social"], existing_names, score_cutoff)
        if match is None and c.get("nome_fantasia"):
            match = find_existing_client(c["nome_fantasia"] or "", existing_names, score_cutoff)
        if match is not None:
            out[c["id"]] = match
    return out
