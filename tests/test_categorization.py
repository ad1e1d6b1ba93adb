"""Tests for the categorization engine tiers."""


import pytest

from fintrack.domain.categorization import CategorizationEngine, CategoryCatalog
from fintrack.domain.classifier import OpenAIClassifier
from fintrack.domain.entities import CategorizationTier
from fintrack.domain.errors import ClassifierUnavailableError
from fintrack.domain.keyword_rules import match_keyword
from fintrack.domain.result_cache import DEFAULT_TTL, InMemoryResultCache, ResultCache, cache_key
from tests.helpers.openai_stub import OpenAIStub, json_reply


def _store(temp_db, row_parser, generic_mapping, description, amount="25.50"):
    draft = row_parser.parse(["2025-01-10", description, amount], generic_mapping, 1, None)
    return temp_db.create_transaction(draft)


@pytest.fixture
def catalog(temp_db, sample_categories):
    return CategoryCatalog.load(temp_db)


def test_keyword_tier_without_classifier(temp_db, engine, catalog, row_parser, generic_mapping):
    """Test 'POSTO SHELL' is Transporte via keywords when the classifier is off."""
    txn = _store(temp_db, row_parser, generic_mapping, "POSTO SHELL")

    result = engine.categorize(txn, catalog)

    assert result.tier == CategorizationTier.KEYWORD
    assert result.category_name == "Transporte"
    assert result.category_id == catalog.by_name("Transporte").id
    assert result.confidence == 0.6
    assert "posto" in result.reasoning


def test_default_tier(temp_db, engine, catalog, row_parser, generic_mapping):
    """Test unmatched transactions go to Outros with 0.3."""
    txn = _store(temp_db, row_parser, generic_mapping, "XYZ123")

    result = engine.categorize(txn, catalog)

    assert result.tier == CategorizationTier.DEFAULT
    assert result.category_name == "Outros"
    assert result.confidence == 0.3


def test_default_without_catch_all_category(temp_db, engine, row_parser, generic_mapping):
    """Test the default result has no category when Outros doesn't exist."""
    txn = _store(temp_db, row_parser, generic_mapping, "XYZ123")

    result = engine.categorize(txn, CategoryCatalog.of([]))

    assert result.tier == CategorizationTier.DEFAULT
    assert result.category_id is None


def test_catalog_loaded_when_not_given(temp_db, engine, sample_categories, row_parser, generic_mapping):
    txn = _store(temp_db, row_parser, generic_mapping, "Drogasil")

    result = engine.categorize(txn)

    assert result.category_name == "Saúde"


def test_external_tier_and_cache(temp_db, catalog, row_parser, generic_mapping):
    """Test classifier replies are used and cached."""
    calls = []
    classifier = OpenAIClassifier(api_key=None, client=OpenAIStub(json_reply("Lazer", 0.93), calls))
    cache = InMemoryResultCache()
    engine = CategorizationEngine(temp_db, classifier=classifier, cache=cache)
    txn = _store(temp_db, row_parser, generic_mapping, "Cinemark Shopping")

    first = engine.categorize(txn, catalog)
    assert first.tier == CategorizationTier.EXTERNAL
    assert first.category_name == "Lazer"
    assert first.confidence == 0.93
    assert cache.get(cache_key(txn.description, txn.establishment))["category_name"] == "Lazer"

    second = engine.categorize(txn, catalog)
    assert second.tier == CategorizationTier.CACHE
    assert second.category_id == first.category_id
    assert len(calls) == 1


def test_cache_hit_skips_classifier(temp_db, catalog, row_parser, generic_mapping):
    """Test a cached entry prevents the classifier call."""
    calls = []
    classifier = OpenAIClassifier(api_key=None, client=OpenAIStub(json_reply("Lazer"), calls))
    cache = InMemoryResultCache()
    txn = _store(temp_db, row_parser, generic_mapping, "Padaria Central")
    cache.put(
        cache_key(txn.description, txn.establishment),
        {"category_name": "Alimentação", "confidence": 0.97, "reasoning": "padaria"},
    )

    result = CategorizationEngine(temp_db, classifier=classifier, cache=cache).categorize(txn, catalog)

    assert result.tier == CategorizationTier.CACHE
    assert result.category_name == "Alimentação"
    assert result.confidence == 0.97
    assert calls == []


def test_prompt_contents(temp_db, catalog, row_parser, generic_mapping):
    """Test the prompt lists categories, transaction data and examples."""
    calls = []
    classifier = OpenAIClassifier(api_key=None, client=OpenAIStub(json_reply("Transporte"), calls))
    engine = CategorizationEngine(temp_db, classifier=classifier, cache=InMemoryResultCache())
    txn = _store(temp_db, row_parser, generic_mapping, "Uber Trip")

    engine.categorize(txn, catalog)

    system = calls[0]["messages"][0]["content"]
    user = calls[0]["messages"][1]["content"]
    assert "- Transporte: Uber, combustível, pedágios e transporte público" in system
    assert '"category_name"' in system
    assert "Descrição: Uber Trip" in user
    assert "Estabelecimento: Uber Trip" in user
    assert "Valor: R$ 25.50" in user
    assert "Data: 10/01/2025" in user
    assert "- Uber - Corrida" in user
    assert "- Posto Shell - Gasolina" in user
    # Only two examples per category
    assert "Pedágio AutoBAn" not in user


def test_unknown_category_falls_through(temp_db, catalog, row_parser, generic_mapping):
    """Test a reply naming a missing category falls back to keywords."""
    classifier = OpenAIClassifier(api_key=None, client=OpenAIStub(json_reply("Pets", 0.99)))
    cache = InMemoryResultCache()
    engine = CategorizationEngine(temp_db, classifier=classifier, cache=cache)
    txn = _store(temp_db, row_parser, generic_mapping, "POSTO SHELL")

    result = engine.categorize(txn, catalog)

    assert result.tier == CategorizationTier.KEYWORD
    assert result.category_name == "Transporte"
    assert cache.get(cache_key(txn.description, txn.establishment)) is None


@pytest.mark.parametrize(
    "reply",
    [
        lambda _c: ClassifierUnavailableError("boom"),
        lambda _c: "no json here",
    ],
)
def test_classifier_failures_fall_through(temp_db, catalog, row_parser, generic_mapping, reply):
    """Test classifier failures never escape the engine."""
    classifier = OpenAIClassifier(api_key=None, client=OpenAIStub(reply))
    engine = CategorizationEngine(temp_db, classifier=classifier, cache=InMemoryResultCache())
    txn = _store(temp_db, row_parser, generic_mapping, "Drogasil")

    result = engine.categorize(txn, catalog)

    assert result.tier == CategorizationTier.KEYWORD
    assert result.category_name == "Saúde"


def test_keyword_skips_missing_categories(temp_db, engine, row_parser, generic_mapping, category_service):
    """Test keyword rules for categories that don't exist are ignored."""
    category_service.create_category("Outros")
    txn = _store(temp_db, row_parser, generic_mapping, "POSTO SHELL")

    result = engine.categorize(txn, CategoryCatalog.load(temp_db))

    assert result.tier == CategorizationTier.DEFAULT
    assert result.category_name == "Outros"


@pytest.mark.parametrize(
    "description,expected",
    [
        ("Netflix.com", "Lazer"),
        ("iFood *Restaurante", "Alimentação"),
        ("Drogasil 123", "Saúde"),
        ("Udemy Online", "Educação"),
        ("Riachuelo", "Vestuário"),
        ("Mercado Livre Loja", "Compras Online"),
        ("Barbearia do Zé", "Serviços"),
        ("Amazon Prime Video", "Lazer"),
    ],
)
def test_keyword_table(temp_db, engine, catalog, row_parser, generic_mapping, description, expected):
    txn = _store(temp_db, row_parser, generic_mapping, description)
    assert engine.categorize(txn, catalog).category_name == expected


class UnreachableCache(ResultCache):
    """Cache whose backend is down."""

    def get(self, key):
        raise RuntimeError("cache backend down")

    def put(self, key, value, ttl=DEFAULT_TTL):
        raise RuntimeError("cache backend down")


def test_cache_read_failure_falls_through(temp_db, catalog, row_parser, generic_mapping):
    """Test an unreadable cache is skipped and the keyword tier answers."""
    engine = CategorizationEngine(temp_db, cache=UnreachableCache())
    txn = _store(temp_db, row_parser, generic_mapping, "POSTO SHELL")

    result = engine.categorize(txn, catalog)

    assert result.tier == CategorizationTier.KEYWORD
    assert result.category_name == "Transporte"


def test_cache_write_failure_keeps_external_result(temp_db, catalog, row_parser, generic_mapping):
    classifier = OpenAIClassifier(api_key=None, client=OpenAIStub(json_reply("Lazer", 0.9)))
    engine = CategorizationEngine(temp_db, classifier=classifier, cache=UnreachableCache())
    txn = _store(temp_db, row_parser, generic_mapping, "Cinemark Shopping")

    result = engine.categorize(txn, catalog)

    assert result.tier == CategorizationTier.EXTERNAL
    assert result.category_name == "Lazer"
    assert result.confidence == 0.9


def test_longest_keyword_wins():
    assert match_keyword("mercado livre") == ("Compras Online", "mercado livre")
    assert match_keyword("barbearia") == ("Serviços", "barbearia")
    # Same length: the earlier entry wins
    assert match_keyword("posto shell") == ("Transporte", "posto")
    assert match_keyword("posto shell", {"Alimentação"}) is None
