"""Tests for CSV mapping service."""

import pytest

from fintrack.domain.csv_mapping import DEFAULT_MAPPINGS, validate_column_map
from fintrack.domain.entities import AmountFormat, ParseError, TransactionDraft
from fintrack.domain.errors import NotFoundError, ValidationError


def test_create_mapping(mapping_service):
    """Test creating a mapping."""
    mapping_id = mapping_service.create_mapping(
        name="Inter Simples",
        institution="Inter",
        column_map={"date": 0, "description": 1, "amount": 2},
        date_formats=["d/m/Y"],
        amount_format=AmountFormat(currency_symbol="R$", decimal_separator=",", thousands_separator="."),
    )

    mapping = mapping_service.get_mapping(mapping_id)
    assert mapping.name == "Inter Simples"
    assert mapping.institution == "Inter"
    assert mapping.credit_card_id is None
    assert mapping.column_map == {"date": 0, "description": 1, "amount": 2}
    assert mapping.date_formats == ("d/m/Y",)
    assert mapping.amount_format.decimal_separator == ","
    assert mapping.amount_format.currency_symbol == "R$"
    assert mapping.delimiter == ","
    assert mapping.has_header is True
    assert mapping.is_active is True
    assert mapping.required_column_count == 3


def test_create_mapping_bound_to_card(mapping_service, sample_card):
    """Test binding a mapping to a credit card."""
    mapping_id = mapping_service.create_mapping(
        name="Roxinho",
        institution="Nubank",
        column_map={"date": 0, "description": 1, "amount": 2},
        date_formats=["Y-m-d"],
        credit_card_id=sample_card.id,
    )
    assert mapping_service.get_mapping(mapping_id).credit_card_id == sample_card.id


def test_create_mapping_unknown_card(mapping_service):
    """Test binding to a missing card fails."""
    with pytest.raises(NotFoundError):
        mapping_service.create_mapping(
            name="Ghost",
            institution="Nubank",
            column_map={"date": 0, "description": 1, "amount": 2},
            date_formats=["Y-m-d"],
            credit_card_id=999,
        )


@pytest.mark.parametrize(
    "column_map,message",
    [
        ({"date": 0, "description": 1}, "missing required roles: amount"),
        ({"date": 0, "description": 0, "amount": 2}, "must be distinct"),
        ({"date": -1, "description": 1, "amount": 2}, "non-negative"),
        ({"date": "0", "description": 1, "amount": 2}, "must be an integer"),
        ({"date": 0, "description": 1, "amount": 2, "memo": 3}, "Invalid column roles: memo"),
    ],
)
def test_validate_column_map_rejects(column_map, message):
    """Test column map validation."""
    with pytest.raises(ValidationError) as excinfo:
        validate_column_map(column_map)
    assert message in str(excinfo.value)


def test_optional_column_may_share_index():
    """Test only the required roles must be distinct."""
    assert validate_column_map({"date": 0, "description": 1, "amount": 2, "type": 1})["type"] == 1


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"date_formats": []}, "date format"),
        ({"delimiter": ";;"}, "single character"),
        ({"name": "  "}, "name must not be empty"),
        ({"institution": ""}, "institution must not be empty"),
    ],
)
def test_create_mapping_invalid_options(mapping_service, kwargs, message):
    """Test invalid parsing options are rejected."""
    params = {
        "name": "Bad",
        "institution": "Nubank",
        "column_map": {"date": 0, "description": 1, "amount": 2},
        "date_formats": ["Y-m-d"],
    }
    params.update(kwargs)
    with pytest.raises(ValidationError) as excinfo:
        mapping_service.create_mapping(**params)
    assert message in str(excinfo.value)


def test_update_mapping(mapping_service, generic_mapping):
    """Test updating only the provided fields."""
    mapping_service.update_mapping(
        generic_mapping.id, date_formats=["d/m/Y", "Y-m-d"], delimiter=";", has_header=False
    )

    updated = mapping_service.get_mapping(generic_mapping.id)
    assert updated.date_formats == ("d/m/Y", "Y-m-d")
    assert updated.delimiter == ";"
    assert updated.has_header is False
    assert updated.name == generic_mapping.name
    assert updated.column_map == generic_mapping.column_map


def test_update_mapping_validates(mapping_service, generic_mapping):
    """Test updates go through the same validation."""
    with pytest.raises(ValidationError):
        mapping_service.update_mapping(generic_mapping.id, column_map={"date": 0, "description": 0, "amount": 0})


def test_update_missing_mapping(mapping_service):
    """Test updating a missing mapping."""
    with pytest.raises(NotFoundError):
        mapping_service.update_mapping(999, name="X")


def test_deactivate_mapping(mapping_service, generic_mapping):
    """Test deactivated mappings are hidden from the default listing."""
    mapping_service.set_active(generic_mapping.id, False)

    assert mapping_service.list_mappings() == []
    listed = mapping_service.list_mappings(include_inactive=True)
    assert [m.id for m in listed] == [generic_mapping.id]
    assert listed[0].is_active is False


def test_list_mappings_filters(mapping_service, generic_mapping, inter_mapping):
    """Test filtering by institution."""
    assert [m.id for m in mapping_service.list_mappings(institution="Inter")] == [inter_mapping.id]
    assert len(mapping_service.list_mappings()) == 2


def test_preview_row(mapping_service, generic_mapping):
    """Test previewing a sample row."""
    draft = mapping_service.preview_row(generic_mapping.id, ["2025-01-10", "Uber Trip", "25.50"])
    assert isinstance(draft, TransactionDraft)
    assert draft.establishment == "Uber Trip"

    error = mapping_service.preview_row(generic_mapping.id, ["2025-01-10"])
    assert isinstance(error, ParseError)


def test_preview_row_missing_mapping(mapping_service):
    """Test previewing with a missing mapping."""
    with pytest.raises(NotFoundError):
        mapping_service.preview_row(999, ["2025-01-10", "Uber Trip", "25.50"])


def test_seed_default_mappings(mapping_service):
    """Test built-in mappings are created once."""
    created = mapping_service.seed_default_mappings()
    assert created == [defaults["name"] for defaults in DEFAULT_MAPPINGS]

    nubank = mapping_service.list_mappings(institution="Nubank")[0]
    assert nubank.credit_card_id is None
    assert nubank.amount_format.negative_values_are_income is True
    assert nubank.date_formats == ("Y-m-d",)

    assert mapping_service.seed_default_mappings() == []
