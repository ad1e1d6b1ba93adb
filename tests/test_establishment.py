"""Tests for merchant name extraction."""

import pytest

from fintrack.utils.establishment import (
    ESTABLISHMENT_RULES,
    extract_establishment,
    register_establishment_rules,
)


@pytest.mark.parametrize(
    "description,expected",
    [
        ("Compra no débito - Padaria Central", "Padaria Central"),
        ("Compra no crédito Posto Shell", "Posto Shell"),
        ("PIX - Maria Silva", "Maria Silva"),
        ("Posto Shell - 11/01", "Posto Shell"),
        ("Uber Trip", "Uber Trip"),
    ],
)
def test_nubank_rules(description, expected):
    """Test Nubank prefixes and date suffixes are removed."""
    assert extract_establishment(description, "Nubank") == expected


def test_inter_installment_suffix():
    """Test Inter installment suffixes are removed."""
    assert extract_establishment("SUPERMERCADO EXTRA - 1/3", "Inter") == "SUPERMERCADO EXTRA"
    assert extract_establishment("LOJA ABC - 02/10 PARC", "inter") == "LOJA ABC"


def test_generic_split_on_digits():
    """Test the merchant ends before the first whitespace-digit run."""
    assert extract_establishment("MERCADO LIVRE 123456", "Unknown Bank") == "MERCADO LIVRE"


def test_unknown_institution_skips_cleanup():
    """Test that institution rules are not applied to other institutions."""
    assert extract_establishment("PIX - Maria Silva", "Itaú") == "PIX"


def test_empty_split_falls_back_to_description():
    """Test the whole cleaned description is used when the split leaves nothing."""
    assert extract_establishment("- 123", None) == "- 123"


def test_never_raises_on_empty_input():
    """Test empty descriptions."""
    assert extract_establishment("", "Nubank") == ""


def test_register_new_institution(monkeypatch):
    """Test registering rules for a new institution."""
    monkeypatch.setattr(
        "fintrack.utils.establishment.ESTABLISHMENT_RULES", dict(ESTABLISHMENT_RULES)
    )
    register_establishment_rules("C6 Bank", [r"^COMPRA\s+"])
    assert extract_establishment("COMPRA Livraria Cultura", "c6 bank") == "Livraria Cultura"
