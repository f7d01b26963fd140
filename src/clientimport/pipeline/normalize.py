# src/clientimport/pipeline/normalize.py
"""
Convert e-Kontroll's raw roster response into CandidateRecord dicts.

The roster is loosely typed (ids as strings, blank strings for missing data,
timestamps where we want dates), so this is where it gets cleaned up. Any
shape problem becomes a FetchFailed, never a KeyError further down.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Any, List, Optional

from clientimport.errors import FetchFailed
from clientimport.models import CandidateRecord

logger = logging.getLogger(__name__)

_OPTIONAL_TEXT = (
    "nome_fantasia",
    "cnpj_cpf",
    "email_contato",
    "telefone_contato",
    "endereco_cidade",
    "endereco_uf",
    "status",
)


def _text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None


def _date_ymd(raw: Any, row_id: int) -> Optional[str]:
    # e-Kontroll sends "2023-11-15", "2023-11-15T00:00:00" or "2023-11-15 00:00:00"
    s = _text(raw)
    if not s:
        return None
    try:
        return dt.date.fromisoformat(s[:10]).isoformat()
    except ValueError:
        raise FetchFailed(f"row {row_id}: invalid data_cadastro {raw!r}") from None


def _fee(raw: Any, row_id: int) -> Optional[float]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    if isinstance(raw, bool):
        raise FetchFailed(f"row {row_id}: invalid valor_mensalidade {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise FetchFailed(f"row {row_id}: invalid valor_mensalidade {raw!r}") from None
    # json accepts NaN/Infinity, float() accepts "inf"
    if not math.isfinite(value):
        raise FetchFailed(f"row {row_id}: invalid valor_mensalidade {raw!r}")
    return value


def _row_id(raw: Any) -> int:
    if isinstance(raw, bool):
        raise FetchFailed(f"invalid client id {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise FetchFailed(f"invalid client id {raw!r}") from None


def normalize_ekontroll(payload: Any) -> List[CandidateRecord]:
    """
    Turn `{"data": [...]}` into a list of CandidateRecord, in roster order.

    An empty `data` list is a valid, empty result. A missing payload or
    `data` key is a format error.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        raise FetchFailed("no data found or invalid response format")

    out: List[CandidateRecord] = []
    seen: set[int] = set()

    for x in payload["data"]:
        if not isinstance(x, dict):
            raise FetchFailed(f"roster row is not an object: {x!r}")

        row_id = _row_id(x.get("id"))
        if row_id in seen:
            raise FetchFailed(f"duplicate client id {row_id} in roster")
        seen.add(row_id)

        legal_name = _text(x.get("razao_social"))
        if not legal_name:
            raise FetchFailed(f"row {row_id}: missing razao_social")

        rec: CandidateRecord = {"id": row_id, "razao_social": legal_name}
        for key in _OPTIONAL_TEXT:
            rec[key] = _text(x.get(key))  # type: ignore[literal-required]
        rec["valor_mensalidade"] = _fee(x.get("valor_mensalidade"), row_id)
        rec["data_cadastro"] = _date_ymd(x.get("data_cadastro"), row_id)
        out.append(rec)

    logger.debug("Normalized %s roster rows", len(out))
    return out
