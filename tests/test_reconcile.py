from __future__ import annotations

from clientimport.pipeline.reconcile import _clean_co, find_existing_client, possible_duplicates


def test_clean_co_strips_legal_suffixes() -> None:
    assert _clean_co("Padaria Central Ltda") == "padaria central"
    assert _clean_co("Oficina Rocha LTDA ME") == "oficina rocha"
    assert _clean_co("Clínica Saúde & Bem Estar S/S") == "clínica saúde & bem estar"
    assert _clean_co("") == ""


def test_find_existing_client_matches_despite_suffix() -> None:
    existing = ["Comércio de Bebidas Silva ME", "Tech Solutions"]
    assert find_existing_client("Comércio de Bebidas Silva", existing) == "Comércio de Bebidas Silva ME"


def test_find_existing_client_no_match() -> None:
    assert find_existing_client("Construtora Viver Bem", ["Padaria do João"]) is None
    assert find_existing_client("Construtora Viver Bem", []) is None
    assert find_existing_client("", ["Padaria do João"]) is None


def test_possible_duplicates_checks_trade_name_too() -> None:
    candidates = [
        {"id": 501, "razao_social": "Indústrias Metalúrgicas Ltda", "nome_fantasia": "MetalForte"},
        {"id": 502, "razao_social": "Clínica Saúde & Bem Estar S/S", "nome_fantasia": None},
    ]
    dupes = possible_duplicates(candidates, ["MetalForte"])
    assert dupes == {501: "MetalForte"}
