"""Tests for entity models."""

import pytest
from pydantic import ValidationError
from src.models.entities import (
    ENTITY_KINDS,
    Agent,
    Client,
    Property,
    PropertyStatus,
    Transaction,
    parse_amount,
)


@pytest.mark.unit
def test_parse_amount_strips_currency_and_commas():
    assert parse_amount("$1,234,567") == 1234567


@pytest.mark.unit
def test_parse_amount_malformed_is_zero():
    assert parse_amount("N/A") == 0
    assert parse_amount("") == 0
    assert parse_amount(None) == 0


@pytest.mark.unit
def test_parse_amount_uses_leading_number():
    """Display strings like $3.2M keep their leading number."""
    assert parse_amount("$3.2M") == 3.2
    assert parse_amount("$850,000.50") == 850000.5


@pytest.mark.unit
def test_property_price_num_derived_from_price():
    """priceNum always follows price, whatever the caller sent."""
    prop = Property(name="Ocean View Apartment", location="Miami Beach, FL", price="$850,000", priceNum=1)
    assert prop.price_num == 850000


@pytest.mark.unit
def test_property_defaults():
    prop = Property(name="Loft", location="Austin, TX")
    assert prop.status == PropertyStatus.AVAILABLE
    assert prop.price_num == 0
    assert prop.id is None


@pytest.mark.unit
def test_property_wire_format_uses_camel_case():
    prop = Property(id=7, name="Loft", location="Austin, TX", price="$1,000")
    wire = prop.to_wire()
    assert wire["priceNum"] == 1000
    assert "price_num" not in wire
    assert wire["status"] == "Available"
    assert "description" not in wire


@pytest.mark.unit
def test_property_preserves_unknown_fields():
    prop = Property.model_validate({"name": "Loft", "location": "Austin, TX", "parking": "2 spots"})
    assert prop.to_wire()["parking"] == "2 spots"


@pytest.mark.unit
def test_property_rejects_unknown_status():
    with pytest.raises(ValidationError):
        Property(name="Loft", location="Austin, TX", status="Demolished")


@pytest.mark.unit
def test_property_missing_required_fields():
    with pytest.raises(ValidationError):
        Property(location="Austin, TX")


@pytest.mark.unit
def test_agent_rating_bounds():
    Agent(name="Sarah Johnson", email="sarah.j@homespace.com", rating=5.0)
    with pytest.raises(ValidationError):
        Agent(name="Sarah Johnson", email="sarah.j@homespace.com", rating=5.1)


@pytest.mark.unit
def test_client_assigned_agent_alias():
    client = Client.model_validate({
        "name": "John Smith",
        "email": "john.smith@email.com",
        "type": "Investor",
        "assignedAgent": "Sarah Johnson",
    })
    assert client.assigned_agent == "Sarah Johnson"
    assert client.to_wire()["assignedAgent"] == "Sarah Johnson"


@pytest.mark.unit
def test_transaction_amount_num_derived():
    txn = Transaction(date="2024-10-14", property="Luxury Villa", client="Sarah Williams", amount="$2,500,000")
    assert txn.amount_num == 2500000


@pytest.mark.unit
def test_transaction_numeric_id_becomes_string():
    txn = Transaction.model_validate({"id": 42, "date": "2024-10-14", "property": "Villa", "client": "Ann"})
    assert txn.id == "42"


@pytest.mark.unit
def test_entity_kinds_routes():
    assert set(ENTITY_KINDS) == {"properties", "agents", "clients", "transactions"}
    transactions = ENTITY_KINDS["transactions"]
    assert transactions.key_prefix == "transaction:"
    assert transactions.supports_get is False
    assert transactions.supports_update is False
    assert ENTITY_KINDS["properties"].integer_ids is True
