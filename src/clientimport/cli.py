# src/clientimport/cli.py
"""
Command-line interface for the e-Kontroll client import.

This module provides CLI commands to:
- List the clients e-Kontroll has for an API key (flagging likely duplicates)
- Import a selection of them into the client store
- Debug the Google Sheets client store
"""

from dotenv import load_dotenv
load_dotenv(override=True)  # automatically looks for a .env file in the project root

import datetime as dt
import json
import logging
from typing import List, Optional

import typer

from clientimport.clients.ekontroll import source_from_settings
from clientimport.config import Settings, get_settings
from clientimport.io.sheets import SheetsClientStore
from clientimport.io.store import ClientStore, InMemoryClientStore
from clientimport.pipeline.reconcile import possible_duplicates
from clientimport.session import ImportSession

logger = logging.getLogger(__name__)

# Typer app instance for CLI commands
app = typer.Typer(help="e-Kontroll client import")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _store_from_settings(settings: Settings) -> ClientStore:
    if settings.store == "sheets":
        if not settings.sheet_id:
            raise typer.BadParameter("Set CLIENTS_SHEET_ID to use the sheets client store.")
        return SheetsClientStore(
            settings.sheet_id,
            settings.worksheet,
            settings.service_account_file,
        )
    return InMemoryClientStore()


def _fetch_or_exit(session: ImportSession, token: Optional[str], settings: Settings) -> None:
    credential = token if token is not None else settings.api_key
    typer.echo("Fetching clients from e-Kontroll...")
    if not session.fetch(credential):
        typer.echo(session.message, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Fetched {len(session.candidates)} client(s).")


def _existing_names(store: ClientStore) -> List[str]:
    try:
        return store.existing_company_names()
    except Exception as e:
        typer.echo(f"Existing clients not available ({e}); skipping duplicate check.", err=True)
        return []


@app.command("fetch")
def fetch_clients(
    token: Optional[str] = typer.Option(None, "--token", help="e-Kontroll API key (default: EKONTROLL_API_KEY)"),
    as_json: bool = typer.Option(False, "--json", help="Print the candidates as JSON"),
):
    """
    List the clients e-Kontroll returns for the API key. Nothing is imported.
    """
    settings = get_settings()
    session = ImportSession(source_from_settings(settings))
    _fetch_or_exit(session, token, settings)

    if not session.candidates:
        typer.echo(session.message)
        return

    dupes = possible_duplicates(session.candidates, _existing_names(_store_from_settings(settings)))

    if as_json:
        typer.echo(json.dumps(
            [{**c, "possible_duplicate_of": dupes.get(c["id"])} for c in session.candidates],
            indent=2,
            ensure_ascii=False,
        ))
        return

    for c in session.candidates:
        fee = c.get("valor_mensalidade")
        line = (
            f"{c['id']:>6}  {c['razao_social']}"
            f"  [{c.get('nome_fantasia') or '-'}]"
            f"  {c.get('cnpj_cpf') or '-'}"
            f"  {c.get('endereco_cidade') or '-'}/{c.get('endereco_uf') or '-'}"
            f"  {f'R$ {fee:,.2f}' if fee else '-'}"
        )
        if c["id"] in dupes:
            line += f"  (already a client? {dupes[c['id']]})"
        typer.echo(line)


@app.command("import")
def import_clients(
    ids: Optional[List[int]] = typer.Option(None, "--id", help="e-Kontroll id to import (repeatable)"),
    select_all: bool = typer.Option(False, "--all", help="Select every fetched client"),
    exclude: Optional[List[int]] = typer.Option(None, "--exclude", help="Deselect this id (repeatable)"),
    token: Optional[str] = typer.Option(None, "--token", help="e-Kontroll API key (default: EKONTROLL_API_KEY)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print drafts but do not write to the store"),
    today: Optional[str] = typer.Option(None, "--today", help="Entry date for clients without one (YYYY-MM-DD)"),
):
    """
    Fetch e-Kontroll → select → map to client drafts → merge into the client store.
    """
    entry_default = None
    if today:
        try:
            entry_default = dt.date.fromisoformat(today)
        except ValueError:
            raise typer.BadParameter(f"--today must be YYYY-MM-DD, got {today!r}") from None

    settings = get_settings()
    store = _store_from_settings(settings)
    session = ImportSession(source_from_settings(settings))
    _fetch_or_exit(session, token, settings)

    if not session.candidates:
        typer.echo(session.message)
        return

    # --- selection ---
    if select_all:
        session.select_all()
    for cid in ids or []:
        if cid not in session.selection:
            session.toggle(cid)
    for cid in exclude or []:
        if cid in session.selection:
            session.toggle(cid)

    known = {c["id"] for c in session.candidates}
    unknown = sorted(set(ids or []) - known)
    if unknown:
        typer.echo(f"Ignoring id(s) not in the roster: {unknown}", err=True)

    typer.echo(session.message)
    if not session.selection:
        typer.echo("Nothing selected; use --id or --all.", err=True)
        raise typer.Exit(code=1)

    # --- write or preview ---
    if dry_run:
        drafts = session.preview(today=entry_default)
        typer.echo(json.dumps({
            "fetched": len(session.candidates),
            "selected": len(drafts),
            "preview_drafts": drafts,
        }, indent=2, ensure_ascii=False))
        return

    fetched = len(session.candidates)
    drafts = session.import_selected(store, today=entry_default)
    typer.echo(json.dumps({
        "fetched": fetched,
        "imported": len(drafts),
        "clients": [d["name"] for d in drafts],
    }, indent=2, ensure_ascii=False))


@app.command()
def store_headers():
    """
    Debug: show the header row of the clients worksheet (sheets store only).
    """
    settings = get_settings()
    if settings.store != "sheets" or not settings.sheet_id:
        raise typer.BadParameter("Set CLIENT_STORE=sheets and CLIENTS_SHEET_ID first.")
    store = SheetsClientStore(settings.sheet_id, settings.worksheet, settings.service_account_file)
    print("Headers in clients tab:", store.headers())


if __name__ == "__main__":
    app()
