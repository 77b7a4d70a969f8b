"""Project overview data models and the text summaries of the dashboard."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

NO_RECOMMENDATIONS = "✅ No active recommendations found (or Recommender API disabled)."
NO_ISSUES = "✅ No major cost issues found."
NO_BUDGETS = "No budgets configured (or permission denied)."


@dataclass
class BillingInfo:
    """Billing state of a project."""

    enabled: bool = False
    billing_account_name: str = ""
    billing_account_id: str = ""


@dataclass
class Recommendation:
    """A cost recommendation from the Recommender API."""

    id: str = ""
    description: str = ""
    recommender_subtype: str = ""
    priority: str = ""
    state: str = ""
    estimated_savings_amount: float = 0.0
    currency_code: str = ""


@dataclass
class ResourceInventory:
    """Counts of key resources in a project."""

    instance_count: int = 0
    disk_count: int = 0
    disk_gb: int = 0
    ip_count: int = 0
    sql_count: int = 0
    bucket_count: int = 0
    dataset_count: int = 0


@dataclass
class SpendLimit:
    """A billing budget."""

    name: str = ""
    budget_amount: str = ""
    currency_code: str = ""
    alert_thresholds: list[float] = field(default_factory=list)


@dataclass
class InsightCategory:
    """Recommendations grouped under one heading, with their total savings."""

    title: str
    icon: str
    action: str
    count: int = 0
    savings: float = 0.0
    currency: str = ""

    def line(self) -> str:
        """Dashboard line for the category."""
        text = f"{self.icon} {self.count} {self.title}"
        if self.savings > 0:
            text += f" (Save {self.savings:.2f} {self.currency or 'USD'}/mo)"
        return f"{text} - {self.action}"


_KNOWN = {
    "IDLE_VM": ("Idle VMs", "🛑", "Stop"),
    "UNUSED_ADDRESS": ("Unused IPs", "🗑️ ", "Release"),
    "GHOST_DISK": ("Ghost Disks", "💾", "Snapshot & Delete"),
    "RESIZE": ("Oversized VMs", "📉", "Resize"),
}


def readable_category(key: str) -> str:
    """Title-cased words of an UPPER_SNAKE key."""
    words = key.replace("_", " ").lower().split()
    return " ".join(w[0].upper() + w[1:] for w in words)


def category_key(recommendation: Recommendation) -> str:
    """Category a recommendation is grouped under."""
    subtype = recommendation.recommender_subtype
    if subtype in ("IDLE_VM", "UNUSED_ADDRESS"):
        return subtype
    if subtype == "SNAPSHOT_AND_DELETE_DISK" or (
        subtype == "IDLE_RESOURCE" and "disk" in recommendation.description.lower()
    ):
        return "GHOST_DISK"
    if subtype == "CHANGE_MACHINE_TYPE":
        return "RESIZE"
    return subtype


def summarize_recommendations(
    recommendations: Iterable[Recommendation],
) -> dict[str, InsightCategory]:
    """Non-empty categories, known ones first, then others in order of appearance."""
    categories = {
        key: InsightCategory(title=title, icon=icon, action=action)
        for key, (title, icon, action) in _KNOWN.items()
    }
    for rec in recommendations:
        key = category_key(rec)
        category = categories.get(key)
        if category is None:
            category = InsightCategory(
                title=readable_category(key), icon="💡", action="Check Console"
            )
            categories[key] = category
        category.count += 1
        category.savings += rec.estimated_savings_amount
        if rec.currency_code:
            category.currency = rec.currency_code
    return {key: cat for key, cat in categories.items() if cat.count > 0}


def insight_lines(recommendations: Iterable[Recommendation]) -> list[str]:
    """Lines of the actionable insights card."""
    recommendations = list(recommendations)
    if not recommendations:
        return [NO_RECOMMENDATIONS]
    lines = [cat.line() for cat in summarize_recommendations(recommendations).values()]
    return lines or [NO_ISSUES]


def budget_lines(budgets: Iterable[SpendLimit]) -> list[str]:
    """Lines of the budget card."""
    lines = [f"• {b.name}: {b.budget_amount} {b.currency_code}" for b in budgets]
    return lines or [NO_BUDGETS]