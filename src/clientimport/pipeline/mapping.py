# src/clientimport/pipeline/mapping.py
"""
Map e-Kontroll candidates to internal client drafts, and hand them to a store.

The mapping is total: every candidate yields exactly one draft, and every
draft field has a concrete value. Most of the internal client has no
counterpart in the roster; those fields get the defaults below.
"""
from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, List, Optional

from clientimport.models import (
    NO,
    NOT_APPLICABLE,
    AcquisitionChannel,
    CandidateRecord,
    ClientDraft,
    ClientPlan,
    EntryProcess,
    OnboardingStatus,
    TaxRegime,
)

if TYPE_CHECKING:
    from clientimport.io.store import ClientStore

logger = logging.getLogger(__name__)

# Provenance: imported clients stay recognizable after the merge.
IMPORT_CATEGORY = "Importado e-Kontroll"
IMPORT_GROUP = "e-Kontroll"
IMPORT_RESPONSIBLE = "Contato e-Kontroll"

DEFAULT_PLAN = ClientPlan.DECOLA_EMPRESA


def _or_empty(value: Optional[str]) -> str:
    return value or ""


def format_fee(value: Optional[float]) -> str:
    """4500.0 -> "4500", 2200.5 -> "2200.5", missing or zero -> "0"."""
    if not value:
        return "0"
    d = Decimal(str(value)).normalize()
    return format(d, "f")


def map_candidate(candidate: CandidateRecord, *, today: Optional[dt.date] = None) -> ClientDraft:
    """
    Build the client draft for one candidate.

    `today` is only used when the roster has no registration date; it defaults
    to the current date at the moment of mapping.
    """
    entry_date = candidate.get("data_cadastro")
    if not entry_date:
        entry_date = (today or dt.date.today()).isoformat()

    return {
        "name": candidate.get("nome_fantasia") or candidate["razao_social"],
        "plan": DEFAULT_PLAN,
        "responsible_name": IMPORT_RESPONSIBLE,
        "responsible_id": "",
        "email": _or_empty(candidate.get("email_contato")),
        "phone": _or_empty(candidate.get("telefone_contato")),
        "state": _or_empty(candidate.get("endereco_uf")),
        "city": _or_empty(candidate.get("endereco_cidade")),
        "acquisition_channel": AcquisitionChannel.OUTROS,
        "product": DEFAULT_PLAN,
        "company_name": candidate["razao_social"],
        "cnpj": _or_empty(candidate.get("cnpj_cpf")),
        "domain_code": "",
        "category": IMPORT_CATEGORY,
        "fee": format_fee(candidate.get("valor_mensalidade")),
        # imports always start in onboarding, whatever the roster status says
        "status": OnboardingStatus.ONBOARDING,
        "entry_date": entry_date,
        "tax_regime": TaxRegime.INDEFINIDO,
        "group": IMPORT_GROUP,
        "entry_process": EntryProcess.ABERTURA,
        "department_responsible": "",
        "has_employee": NO,
        "pro_labore": NO,
        "has_certificate": NO,
        "fiscal_department_responsible": "",
        "r_factor": NO,
        "main_branch": "",
        "secondary_branch": "",
        "annex": NOT_APPLICABLE,
        "secondary_annex": NOT_APPLICABLE,
        "state_registration": "",
        "municipal_registration": "",
        "accounting_department_responsible": "",
        "closing": "",
        "use_conta_azul": NO,
        "banks": [],
        "imported_logs": [],
        "imported_docs": [],
    }


def map_candidates(
    candidates: Iterable[CandidateRecord], *, today: Optional[dt.date] = None
) -> List[ClientDraft]:
    """One draft per candidate, in input order. `today` is resolved once per batch."""
    today = today or dt.date.today()
    return [map_candidate(c, today=today) for c in candidates]


def merge(drafts: List[ClientDraft], store: "ClientStore") -> None:
    """
    Hand the whole batch to the client store in one call. The store assigns
    ids and persists; we keep no reference to the drafts afterwards.
    """
    if not drafts:
        return
    logger.info("Merging %s imported client(s) into the client store", len(drafts))
    store.add_clients(drafts)
