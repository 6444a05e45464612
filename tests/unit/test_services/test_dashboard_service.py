"""Tests for dashboard aggregates."""

import pytest
from src.models.entities import Agent, Property, Transaction
from src.services.dashboard_service import (
    dashboard_overview,
    distinct_values,
    format_millions,
    transaction_summary,
)
from src.services.sample_data import SAMPLE_TRANSACTIONS


@pytest.mark.unit
def test_format_millions():
    assert format_millions(2_500_000) == "$2.50M"
    assert format_millions(0) == "$0.00M"


@pytest.mark.unit
def test_transaction_summary():
    transactions = [
        Transaction(date="2024-10-14", property="A", client="X", amount="$1,000,000", status="Completed"),
        Transaction(date="2024-10-13", property="B", client="Y", amount="$2,000,000", status="Pending"),
    ]
    summary = transaction_summary(transactions)

    assert summary.total == 2
    assert summary.total_volume == 3_000_000
    assert summary.average_value == 1_500_000
    assert summary.total_volume_display == "$3.00M"
    assert summary.average_value_display == "$1.50M"


@pytest.mark.unit
def test_transaction_summary_empty():
    summary = transaction_summary([])
    assert summary.total == 0
    assert summary.average_value == 0
    assert summary.average_value_display == "$0.00M"


@pytest.mark.unit
def test_dashboard_overview_counts():
    properties = [
        Property(name="A", location="X", status="Available"),
        Property(name="B", location="Y", status="Sold"),
        Property(name="C", location="Z", status="Available"),
    ]
    agents = [
        Agent(name="Sarah", email="s@x.com", status="Active"),
        Agent(name="Mike", email="m@x.com", status="Away"),
    ]
    transactions = [Transaction.model_validate(record) for record in SAMPLE_TRANSACTIONS]

    overview = dashboard_overview(properties, agents, [], transactions)

    assert overview.total_properties == 3
    assert overview.properties_by_status == {"Available": 2, "Sold": 1, "Pending": 0}
    assert overview.active_agents == 1
    assert overview.total_clients == 0
    assert overview.total_transactions == 8
    completed = sum(t.amount_num for t in transactions if t.status.value == "Completed")
    assert overview.completed_sales_volume == completed


@pytest.mark.unit
def test_distinct_values_for_filter_options():
    rows = [{"agent": "mike Chen"}, {"agent": "Sarah Johnson"}, {"agent": ""}, {"agent": "Sarah Johnson"}]
    assert distinct_values(rows, "agent") == ["mike Chen", "Sarah Johnson"]


@pytest.mark.unit
def test_summaries_accept_wire_records():
    summary = transaction_summary([{"amountNum": 850000, "status": "Completed"}])
    assert summary.total_volume == 850000
    assert summary.total_volume_display == "$0.85M"

    overview = dashboard_overview(
        [{"name": "A", "status": "Sold"}],
        [{"name": "Sarah", "status": "Active"}],
        [{"name": "John", "status": "Active"}],
        [{"amountNum": 850000, "status": "Completed"}, {"amountNum": 100000, "status": "Pending"}],
    )
    assert overview.completed_sales_volume == 850000
    assert overview.properties_by_status["Sold"] == 1


@pytest.mark.unit
def test_distinct_values_collate_accents():
    rows = [{"agent": "Zoe Park"}, {"agent": "Émile Roux"}, {"agent": "Frank Lee"}]
    assert distinct_values(rows, "agent") == ["Émile Roux", "Frank Lee", "Zoe Park"]
