"""REST client for the project overview: billing, recommendations, budgets, inventory."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import requests

from .overview_models import BillingInfo, Recommendation, ResourceInventory, SpendLimit

BILLING_API = "https://cloudbilling.googleapis.com/v1"
RECOMMENDER_API = "https://recommender.googleapis.com/v1"
BUDGETS_API = "https://billingbudgets.googleapis.com/v1"
COMPUTE_API = "https://compute.googleapis.com/compute/v1"
SQLADMIN_API = "https://sqladmin.googleapis.com/v1"
STORAGE_API = "https://storage.googleapis.com/storage/v1"
BIGQUERY_API = "https://bigquery.googleapis.com/bigquery/v2"

DEFAULT_LOCATIONS = ("us-central1-a", "us-central1-b", "global")
TARGET_RECOMMENDERS = (
    "google.compute.instance.IdleResourceRecommender",
    "google.compute.instance.MachineTypeRecommender",
    "google.compute.address.UnusedAddressRecommender",
    "google.compute.disk.IdleResourceRecommender",
)

_TIMEOUT = 30
_FETCH_ERRORS = (requests.RequestException, ValueError)


def _int(value: Any) -> int:
    return int(value or 0)


def format_budget_amount(amount: dict[str, Any] | None) -> tuple[str, str]:
    """Display amount and currency of a budget's amount field."""
    if amount:
        specified = amount.get("specifiedAmount")
        if specified is not None:
            units = _int(specified.get("units"))
            cents = int(_int(specified.get("nanos")) / 10_000_000)
            return f"{units}.{cents:02d}", specified.get("currencyCode", "")
        if amount.get("lastPeriodAmount") is not None:
            return "Last Period", ""
    return "N/A", ""


def recommendation_from_api(data: dict[str, Any]) -> Recommendation:
    """Build a Recommendation from a Recommender API resource."""
    savings = 0.0
    currency = ""
    cost = ((data.get("primaryImpact") or {}).get("costProjection") or {}).get("cost")
    if cost is not None:
        value = _int(cost.get("units")) + _int(cost.get("nanos")) / 1e9
        savings = abs(value)
        currency = cost.get("currencyCode", "")
    return Recommendation(
        id=data.get("name", ""),
        description=data.get("description", ""),
        recommender_subtype=data.get("recommenderSubtype", ""),
        priority=data.get("priority", ""),
        state=(data.get("stateInfo") or {}).get("state", ""),
        estimated_savings_amount=savings,
        currency_code=currency,
    )


class OverviewClient:
    """Client over the billing, recommender, budget and inventory APIs."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    def _get(self, url: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        response = self.session.get(url, params=params or {}, timeout=_TIMEOUT)
        response.raise_for_status()
        return response.json()

    def _pages(self, url: str, params: dict[str, str] | None = None) -> Iterator[dict[str, Any]]:
        page_token = ""
        while True:
            query = dict(params or {})
            if page_token:
                query["pageToken"] = page_token
            page = self._get(url, query)
            yield page
            page_token = page.get("nextPageToken", "")
            if not page_token:
                return

    def get_project_billing_info(self, project_id: str) -> BillingInfo:
        """Billing state and account of the project."""
        info = self._get(f"{BILLING_API}/projects/{project_id}/billingInfo")
        account = info.get("billingAccountName", "")
        return BillingInfo(
            enabled=bool(info.get("billingEnabled", False)),
            billing_account_name=account,
            billing_account_id=account.removeprefix("billingAccounts/"),
        )

    def get_recommendations(self, project_id: str, zone: str = "") -> list[Recommendation]:
        """Cost recommendations from a fixed set of recommenders; failed lookups are skipped."""
        locations = list(DEFAULT_LOCATIONS)
        if zone:
            locations.append(zone)
        recommendations: list[Recommendation] = []
        for location in locations:
            for recommender in TARGET_RECOMMENDERS:
                url = (
                    f"{RECOMMENDER_API}/projects/{project_id}/locations/{location}"
                    f"/recommenders/{recommender}/recommendations"
                )
                try:
                    payload = self._get(url)
                except _FETCH_ERRORS:
                    continue
                recommendations.extend(
                    recommendation_from_api(r) for r in payload.get("recommendations") or []
                )
        return recommendations

    def get_budgets(self, billing_account_id: str) -> list[SpendLimit]:
        """Budgets of the billing account; empty when there is no account."""
        if not billing_account_id:
            return []
        payload = self._get(f"{BUDGETS_API}/billingAccounts/{billing_account_id}/budgets")
        limits = []
        for budget in payload.get("budgets") or []:
            amount, currency = format_budget_amount(budget.get("amount"))
            limits.append(
                SpendLimit(
                    name=budget.get("displayName", ""),
                    budget_amount=amount,
                    currency_code=currency,
                    alert_thresholds=[
                        float(rule.get("thresholdPercent", 0.0))
                        for rule in budget.get("thresholdRules") or []
                    ],
                )
            )
        return limits

    def _aggregated(self, project_id: str, resource: str) -> Iterator[dict[str, Any]]:
        url = f"{COMPUTE_API}/projects/{project_id}/aggregated/{resource}"
        for page in self._pages(url):
            for scoped in (page.get("items") or {}).values():
                yield from scoped.get(resource) or []

    def _count_instances(self, project_id: str) -> dict[str, int]:
        return {"instance_count": sum(1 for _ in self._aggregated(project_id, "instances"))}

    def _count_disks(self, project_id: str) -> dict[str, int]:
        count = gb = 0
        for disk in self._aggregated(project_id, "disks"):
            count += 1
            gb += _int(disk.get("sizeGb"))
        return {"disk_count": count, "disk_gb": gb}

    def _count_addresses(self, project_id: str) -> dict[str, int]:
        return {"ip_count": sum(1 for _ in self._aggregated(project_id, "addresses"))}

    def _count_sql(self, project_id: str) -> dict[str, int]:
        payload = self._get(f"{SQLADMIN_API}/projects/{project_id}/instances")
        return {"sql_count": len(payload.get("items") or [])}

    def _count_buckets(self, project_id: str) -> dict[str, int]:
        pages = self._pages(f"{STORAGE_API}/b", {"project": project_id})
        return {"bucket_count": sum(len(p.get("items") or []) for p in pages)}

    def _count_datasets(self, project_id: str) -> dict[str, int]:
        pages = self._pages(f"{BIGQUERY_API}/projects/{project_id}/datasets")
        return {"dataset_count": sum(len(p.get("datasets") or []) for p in pages)}

    def get_global_inventory(self, project_id: str) -> ResourceInventory:
        """Resource counts gathered in parallel; a failed count is left at zero."""
        counters: list[Callable[[str], dict[str, int]]] = [
            self._count_instances,
            self._count_disks,
            self._count_addresses,
            self._count_sql,
            self._count_buckets,
            self._count_datasets,
        ]
        counts: dict[str, int] = {}
        with ThreadPoolExecutor(max_workers=len(counters)) as pool:
            futures = [pool.submit(counter, project_id) for counter in counters]
            for future in futures:
                try:
                    counts.update(future.result())
                except _FETCH_ERRORS:
                    continue
        return ResourceInventory(**counts)