"""IAM service accounts: models, REST client and table presentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

IAM_API = "https://iam.googleapis.com/v1"
_TIMEOUT = 30


class IamError(RuntimeError):
    """Raised when the IAM API cannot be queried."""


@dataclass
class ServiceAccount:
    """A Google Cloud service account."""

    name: str = ""
    email: str = ""
    display_name: str = ""
    description: str = ""
    disabled: bool = False
    unique_id: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ServiceAccount:
        """Build a ServiceAccount from an IAM API resource."""
        return cls(
            name=data.get("name", ""),
            email=data.get("email", ""),
            display_name=data.get("displayName", ""),
            description=data.get("description", ""),
            disabled=bool(data.get("disabled", False)),
            unique_id=data.get("uniqueId", ""),
        )


@dataclass
class PolicyMember:
    """A member bound to a role in an IAM policy."""

    role: str = ""
    member: str = ""  # user:email, serviceAccount:email, ...


class IamClient:
    """Thin client over the IAM service accounts API."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    def list_service_accounts(self, project_id: str) -> list[ServiceAccount]:
        """All service accounts of the project."""
        url = f"{IAM_API}/projects/{project_id}/serviceAccounts"
        try:
            response = self.session.get(url, timeout=_TIMEOUT)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise IamError(f"failed to list service accounts: {exc}") from exc
        return [ServiceAccount.from_api(a) for a in payload.get("accounts") or []]


def account_status(account: ServiceAccount) -> str:
    """'Disabled' or 'Active'."""
    return "Disabled" if account.disabled else "Active"


def account_row(account: ServiceAccount) -> list[str]:
    """Table row: display name, email, status, unique id."""
    return [
        account.display_name,
        account.email,
        account_status(account),
        account.unique_id,
    ]