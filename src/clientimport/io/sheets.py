# src/clientimport/io/sheets.py
"""
Client store backed by a Google Sheets worksheet (one row per client).
"""
from __future__ import annotations

import datetime as dt
import logging
import uuid
from enum import Enum
from typing import Any, Iterable, List, Optional

import gspread
import pandas as pd

from clientimport.models import ClientDraft

logger = logging.getLogger(__name__)

# Sheet header -> draft key. Columns not in the sheet are skipped.
COLUMNS = {
    "Nome": "name",
    "Razão Social": "company_name",
    "CNPJ": "cnpj",
    "E-mail": "email",
    "Telefone": "phone",
    "Cidade": "city",
    "UF": "state",
    "Plano": "plan",
    "Produto": "product",
    "Responsável": "responsible_name",
    "Canal": "acquisition_channel",
    "Categoria": "category",
    "Grupo": "group",
    "Mensalidade": "fee",
    "Status": "status",
    "Entrada": "entry_date",
    "Regime Tributário": "tax_regime",
    "Processo de Entrada": "entry_process",
    "Código Domínio": "domain_code",
    "Possui Funcionário": "has_employee",
    "Pró-labore": "pro_labore",
    "Certificado": "has_certificate",
    "Fator R": "r_factor",
    "Anexo": "annex",
    "Anexo Secundário": "secondary_annex",
    "Inscrição Estadual": "state_registration",
    "Inscrição Municipal": "municipal_registration",
    "Fechamento": "closing",
    "Usa Conta Azul": "use_conta_azul",
    "Bancos": "banks",
}

REQUIRED_HEADERS = {"Client ID", "Nome", "Razão Social", "CNPJ", "Status", "Entrada"}


def _cell(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return "" if value is None else str(value)


def draft_to_row(draft: ClientDraft, headers: List[str], client_id: str, added_at: str) -> List[str]:
    """Lay a draft out in the worksheet's header order."""
    row = []
    for h in headers:
        if h == "Client ID":
            row.append(client_id)
        elif h == "Added At":
            row.append(added_at)
        elif h in COLUMNS:
            row.append(_cell(draft.get(COLUMNS[h])))
        else:
            row.append("")
    return row


class SheetsClientStore:
    def __init__(
        self,
        sheet_id: str,
        worksheet: str = "Clientes",
        service_account_file: str = "service_account.json",
        *,
        client: Optional[gspread.Client] = None,
    ) -> None:
        self.sheet_id = sheet_id
        self.worksheet_title = worksheet
        self.service_account_file = service_account_file
        self._client = client

    def _worksheet(self):
        gc = self._client or gspread.service_account(filename=self.service_account_file)
        sh = gc.open_by_key(self.sheet_id)
        try:
            return sh.worksheet(self.worksheet_title)  # exact title, no fallback
        except gspread.WorksheetNotFound as e:
            raise RuntimeError(f"Worksheet {self.worksheet_title!r} not found.") from e

    def headers(self) -> List[str]:
        return self._worksheet().row_values(1)

    def existing_company_names(self) -> List[str]:
        df = pd.DataFrame(self._worksheet().get_all_records())
        if "Razão Social" not in df.columns:
            return []
        return df["Razão Social"].dropna().astype(str).tolist()

    def add_clients(self, drafts: Iterable[ClientDraft]) -> List[str]:
        """
        Append drafts at the bottom of the worksheet.
        - Raises if the header row is empty or misses required columns.
        - Returns the generated client ids, in draft order.
        """
        drafts = list(drafts)
        if not drafts:
            return []

        ws = self._worksheet()
        headers = ws.row_values(1)
        if not headers:
            raise RuntimeError(f"Header row is empty in {self.worksheet_title!r} worksheet.")
        missing = sorted(REQUIRED_HEADERS - set(headers))
        if missing:
            raise RuntimeError(
                f"{self.worksheet_title!r} is missing required header(s): {', '.join(missing)}"
            )

        now = dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds")
        ids = [str(uuid.uuid4()) for _ in drafts]
        rows = [draft_to_row(d, headers, cid, now) for d, cid in zip(drafts, ids)]

        # RAW keeps "0" fees and ISO dates as typed
        ws.append_rows(rows, value_input_option="RAW")
        logger.info("Appended %s client row(s) to worksheet=%s", len(rows), self.worksheet_title)
        return ids
