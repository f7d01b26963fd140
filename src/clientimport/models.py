# src/clientimport/models.py
"""
Typed dictionaries for client records as they come from the e-Kontroll roster
and as the application stores them.

Everything is a plain dict with type hints. Enum members are `str` subclasses,
so drafts serialize to JSON and sheet rows without extra work.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, TypedDict


class OnboardingStatus(str, Enum):
    PROSPECT = "Prospect"
    ONBOARDING = "Onboarding"
    SETUP_COMPLETE = "Setup Completo"
    ACTIVE = "Ativo"
    CHURNED = "Churned"


class ClientStage(str, Enum):
    ONBOARDING = "onboarding"
    SOCIETARIO = "societário"
    ADOCAO = "adoção"
    OPERACAO = "operação"


class ClientPlan(str, Enum):
    DECOLA_OBRIGACOES = "Decola Obrigações"
    DECOLA_EMPRESA = "Decola Empresa"
    DECOLA_LUCRO = "Decola Lucro"


class TaxRegime(str, Enum):
    SIMPLES_NACIONAL = "Simples Nacional"
    LUCRO_PRESUMIDO = "Lucro Presumido"
    LUCRO_REAL = "Lucro Real"
    INDEFINIDO = "Indefinido"


class AcquisitionChannel(str, Enum):
    INDICACAO = "Indicação"
    WEBSITE = "Website"
    FEIRAS = "Feiras"
    ANUNCIOS = "Anúncios"
    OUTROS = "Outros"


class EntryProcess(str, Enum):
    ABERTURA = "Abertura de Empresa"
    TROCA_CONTADOR = "Troca de Contador"


class ProcessFrequency(str, Enum):
    DAILY = "Diário"
    WEEKLY = "Semanal"
    MONTHLY = "Mensal"
    YEARLY = "Anual"


YES = "Sim"
NO = "Não"
NOT_APPLICABLE = "Não se aplica"


class _CandidateRequired(TypedDict):
    # Unique within one roster response
    id: int

    # Legal company name; rows without it are rejected by the normalizer
    razao_social: str


class CandidateRecord(_CandidateRequired, total=False):
    """
    One row of the e-Kontroll client roster, after normalization.

    Notes:
    - Field names are kept as the roster sends them.
    - Optional fields are None when the roster leaves them out or blank.
    - A fresh list of these is built on every fetch; nobody mutates them.
    """

    nome_fantasia: Optional[str]
    cnpj_cpf: Optional[str]
    email_contato: Optional[str]
    telefone_contato: Optional[str]
    endereco_cidade: Optional[str]
    endereco_uf: Optional[str]

    # Monthly fee in BRL
    valor_mensalidade: Optional[float]

    # "YYYY-MM-DD"
    data_cadastro: Optional[str]

    # Roster status, e.g. "ATIVO" / "PENDENTE"
    status: Optional[str]


class ClientDraft(TypedDict):
    """
    Payload needed to create an internal client. Every key is always present;
    fields the roster knows nothing about carry explicit "none yet" values.
    """

    name: str
    plan: ClientPlan
    responsible_name: str
    responsible_id: str
    email: str
    phone: str
    state: str
    city: str
    acquisition_channel: AcquisitionChannel
    product: ClientPlan
    company_name: str
    cnpj: str
    domain_code: str
    category: str
    fee: str
    status: OnboardingStatus
    entry_date: str
    tax_regime: TaxRegime
    group: str
    entry_process: EntryProcess
    department_responsible: str
    has_employee: str
    pro_labore: str
    has_certificate: str
    fiscal_department_responsible: str
    r_factor: str
    main_branch: str
    secondary_branch: str
    annex: str
    secondary_annex: str
    state_registration: str
    municipal_registration: str
    accounting_department_responsible: str
    closing: str
    use_conta_azul: str
    banks: List[str]
    imported_logs: List[dict]
    imported_docs: List[dict]


class StoredClient(ClientDraft):
    """A draft after the client store gave it an identity."""

    id: str
    joined_date: str
    stage: ClientStage
    in_warning: bool
    is_blocked: bool
    tags: List[str]
