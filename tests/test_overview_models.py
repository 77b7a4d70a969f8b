import pytest

from cloudpeek.overview_models import (
    NO_BUDGETS,
    NO_RECOMMENDATIONS,
    Recommendation,
    SpendLimit,
    budget_lines,
    category_key,
    insight_lines,
    readable_category,
    summarize_recommendations,
)


def rec(subtype, description="", savings=0.0, currency=""):
    return Recommendation(
        recommender_subtype=subtype,
        description=description,
        estimated_savings_amount=savings,
        currency_code=currency,
    )


@pytest.mark.parametrize(
    "subtype,description,expected",
    [
        ("IDLE_VM", "", "IDLE_VM"),
        ("UNUSED_ADDRESS", "", "UNUSED_ADDRESS"),
        ("SNAPSHOT_AND_DELETE_DISK", "", "GHOST_DISK"),
        ("IDLE_RESOURCE", "Idle Disk found", "GHOST_DISK"),
        ("CHANGE_MACHINE_TYPE", "", "RESIZE"),
        ("IDLE_RESOURCE", "something else", "IDLE_RESOURCE"),
    ],
)
def test_category_key(subtype, description, expected):
    assert category_key(rec(subtype, description)) == expected


def test_readable_category():
    assert readable_category("SOME_NEW_THING") == "Some New Thing"
    assert readable_category("") == ""


def test_summarize_sums_and_orders():
    recs = [
        rec("OTHER_KIND", savings=1.5),
        rec("CHANGE_MACHINE_TYPE", savings=2.0, currency="EUR"),
        rec("IDLE_VM", savings=3.0),
        rec("IDLE_VM", savings=4.0),
    ]
    summary = summarize_recommendations(recs)
    assert list(summary) == ["IDLE_VM", "RESIZE", "OTHER_KIND"]
    assert summary["IDLE_VM"].count == 2
    assert summary["IDLE_VM"].savings == pytest.approx(3.0 + 4.0)
    assert summary["RESIZE"].currency == "EUR"
    assert summary["OTHER_KIND"].action == "Check Console"
    assert sum(c.count for c in summary.values()) == len(recs)


def test_insight_lines_empty():
    assert insight_lines([]) == [NO_RECOMMENDATIONS]


def test_insight_line_without_savings():
    (line,) = insight_lines([rec("IDLE_VM")])
    assert line.startswith("🛑 1 Idle VMs")
    assert line.endswith("- Stop")
    assert "Save" not in line


def test_insight_line_with_default_currency():
    (line,) = insight_lines([rec("UNUSED_ADDRESS", savings=12.5)])
    assert "(Save 12.50 USD/mo)" in line
    assert line.endswith("- Release")


def test_budget_lines():
    budgets = [SpendLimit(name="Main", budget_amount="100.00", currency_code="USD")]
    assert budget_lines(budgets) == ["• Main: 100.00 USD"]
    assert budget_lines([]) == [NO_BUDGETS]