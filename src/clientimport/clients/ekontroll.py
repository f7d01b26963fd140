# src/clientimport/clients/ekontroll.py

"""
Client for e-Kontroll's client roster, plus the offline demo roster.

Design goals:
- Keep *all* HTTP details here so the pipeline never worries about URLs,
  headers, timeouts or retries.
- Everything that produces candidates looks the same to the caller: a
  CandidateSource with `fetch(credential)`. The real API and the demo roster
  are interchangeable.
- Transport and format problems leave this module as FetchFailed.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, Iterable, List, Optional, Protocol

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from clientimport.config import DEFAULT_BASE_URL, DEFAULT_MAX_ATTEMPTS, DEFAULT_TIMEOUT_SECONDS, Settings
from clientimport.errors import EmptyCredential, FetchFailed
from clientimport.models import CandidateRecord
from clientimport.pipeline.normalize import normalize_ekontroll

logger = logging.getLogger(__name__)


class CandidateSource(Protocol):
    """Anything that can list import candidates for a credential."""

    def fetch(self, credential: str) -> List[CandidateRecord]:
        ...


# ---- Internal helpers ---------------------------------------------------------

def _clients_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/clientes"


def _default_headers(token: str) -> Dict[str, str]:
    # e-Kontroll accepts either header depending on account type; send both.
    return {
        "User-Agent": "client-import/0.1",
        "Accept": "application/json",
        "Authorization": f"Bearer {token}",
        "X-Token": token,
    }


def _is_transient(exc: BaseException) -> bool:
    """Network hiccups, 429 and 5xx are worth another try; 4xx are not."""
    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        return code == 429 or code >= 500
    return isinstance(exc, httpx.TransportError)


@retry(
    # Wait 1s, then 2s, 4s ... up to 8s between attempts.
    wait=wait_exponential(min=1, max=8),
    stop=stop_after_attempt(DEFAULT_MAX_ATTEMPTS),
    retry=retry_if_exception(_is_transient),
    reraise=True,
)
def _get_json(
    url: str,
    headers: Dict[str, str],
    timeout: float,
    transport: Optional[httpx.BaseTransport] = None,
):
    """One HTTP GET with a timeout; tenacity retries transient failures."""
    with httpx.Client(timeout=timeout, headers=headers, transport=transport) as client:
        resp = client.get(url)
        resp.raise_for_status()  # raises httpx.HTTPStatusError for 4xx/5xx
        return resp.json()


# ---- Public API ---------------------------------------------------------------

def ekontroll_list_clients(
    token: str,
    *,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    transport: Optional[httpx.BaseTransport] = None,
):
    """
    Fetch the whole client roster and return the raw JSON.

    Raises FetchFailed once retries are exhausted or the body is not JSON.
    """
    url = _clients_url(base_url)
    get_json = _get_json.retry_with(stop=stop_after_attempt(max_attempts))
    try:
        return get_json(url, _default_headers(token), timeout, transport)
    except httpx.HTTPStatusError as e:
        code = e.response.status_code
        logger.warning("e-Kontroll request failed url=%s status=%s", url, code)
        if code in (401, 403):
            raise FetchFailed("API key was rejected; check the key") from e
        raise FetchFailed(f"e-Kontroll answered HTTP {code}") from e
    except httpx.HTTPError as e:
        logger.warning("e-Kontroll request failed url=%s error=%s", url, e)
        raise FetchFailed("could not reach e-Kontroll; check the connection") from e
    except ValueError as e:
        # resp.json() on a non-JSON body
        logger.warning("e-Kontroll returned a non-JSON body url=%s", url)
        raise FetchFailed("invalid response format") from e


class EKontrollSource:
    """The real roster, over HTTP."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._transport = transport

    def fetch(self, credential: str) -> List[CandidateRecord]:
        raw = ekontroll_list_clients(
            credential,
            base_url=self.base_url,
            timeout=self.timeout,
            max_attempts=self.max_attempts,
            transport=self._transport,
        )
        return normalize_ekontroll(raw)


# Sample roster served by DemoSource; shaped like a real /clientes response.
DEMO_ROSTER = {
    "data": [
        {
            "id": 501,
            "razao_social": "Indústrias Metalúrgicas Ltda",
            "nome_fantasia": "MetalForte",
            "cnpj_cpf": "22.333.444/0001-55",
            "email_contato": "financeiro@metalforte.com.br",
            "telefone_contato": "(11) 4002-8922",
            "endereco_cidade": "Guarulhos",
            "endereco_uf": "SP",
            "valor_mensalidade": 4500.00,
            "data_cadastro": "2023-11-15",
            "status": "ATIVO",
        },
        {
            "id": 502,
            "razao_social": "Clínica Saúde & Bem Estar S/S",
            "nome_fantasia": "Clínica Saúde",
            "cnpj_cpf": "33.444.555/0001-66",
            "email_contato": "contato@saudeebemestar.com",
            "telefone_contato": "(21) 99888-7777",
            "endereco_cidade": "Niterói",
            "endereco_uf": "RJ",
            "valor_mensalidade": 2200.00,
            "data_cadastro": "2024-01-20",
            "status": "ATIVO",
        },
        {
            "id": 503,
            "razao_social": "Comércio de Bebidas Silva",
            "nome_fantasia": "Adega do Silva",
            "cnpj_cpf": "44.555.666/0001-77",
            "email_contato": "silva@adega.com",
            "telefone_contato": "(31) 3333-4444",
            "endereco_cidade": "Contagem",
            "endereco_uf": "MG",
            "valor_mensalidade": 1100.00,
            "data_cadastro": "2024-02-10",
            "status": "PENDENTE",
        },
    ]
}


class DemoSource:
    """
    Offline roster for demos and training: accepted tokens get the sample
    roster, anything else gets an empty one. Tokens come from configuration.
    """

    def __init__(self, accepted_tokens: Iterable[str], *, delay: float = 0.8) -> None:
        self.accepted_tokens = frozenset(accepted_tokens)
        self.delay = delay

    def fetch(self, credential: str) -> List[CandidateRecord]:
        if self.delay > 0:
            time.sleep(self.delay)  # feels like a network call
        if credential in self.accepted_tokens:
            return normalize_ekontroll(DEMO_ROSTER)
        return normalize_ekontroll({"data": []})


def source_from_settings(settings: Settings) -> CandidateSource:
    if settings.demo_mode:
        logger.info("Using the offline demo roster")
        return DemoSource(settings.demo_tokens)
    return EKontrollSource(
        base_url=settings.base_url,
        timeout=settings.timeout,
        max_attempts=settings.max_attempts,
    )


def fetch_candidates(credential: str, source: CandidateSource) -> List[CandidateRecord]:
    """
    Fetch stage: validate the credential, then ask the source.

    An empty credential fails right away, before the source is touched.
    Returns candidates in the source's order; an empty list is a success.
    """
    if not credential or not credential.strip():
        raise EmptyCredential()
    candidates = source.fetch(credential)
    logger.info("Fetched %s candidate(s) from e-Kontroll", len(candidates))
    return candidates
