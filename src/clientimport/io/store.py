# src/clientimport/io/store.py
"""
Client store: the collaborator that receives imported drafts, gives them
identities and makes them visible to the rest of the application.
"""
from __future__ import annotations

import logging
import uuid
from typing import Dict, Iterable, List, Protocol

from clientimport.models import ClientDraft, ClientStage, StoredClient

logger = logging.getLogger(__name__)


class ClientStore(Protocol):
    def add_clients(self, drafts: Iterable[ClientDraft]) -> List[str]:
        """Persist drafts, returning the new client ids in the same order."""
        ...

    def existing_company_names(self) -> List[str]:
        ...


class InMemoryClientStore:
    """Keeps clients in a dict for the lifetime of the process."""

    def __init__(self) -> None:
        self.clients: Dict[str, StoredClient] = {}

    def add_clients(self, drafts: Iterable[ClientDraft]) -> List[str]:
        ids: List[str] = []
        for d in drafts:
            client_id = str(uuid.uuid4())
            self.clients[client_id] = {
                **d,
                # copy the lists so the store owns its own
                "banks": list(d["banks"]),
                "imported_logs": list(d["imported_logs"]),
                "imported_docs": list(d["imported_docs"]),
                "id": client_id,
                "joined_date": d["entry_date"],
                "stage": ClientStage.ONBOARDING,
                "in_warning": False,
                "is_blocked": False,
                "tags": [],
            }
            ids.append(client_id)
        logger.info("Stored %s new client(s); %s total", len(ids), len(self.clients))
        return ids

    def existing_company_names(self) -> List[str]:
        return [c["company_name"] for c in self.clients.values()]
