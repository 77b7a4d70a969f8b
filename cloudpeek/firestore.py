"""Firestore databases and Datastore-mode namespaces and kinds: models and REST client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

FIRESTORE_API = "https://firestore.googleapis.com/v1"
DATASTORE_API = "https://datastore.googleapis.com/v1"
DEFAULT = "(default)"
DATASTORE_MODE = "DATASTORE_MODE"
_TIMEOUT = 30


class FirestoreError(RuntimeError):
    """Raised when a Datastore metadata query fails."""


@dataclass
class Database:
    """A Firestore database."""

    name: str = ""  # short id such as "(default)"
    project_id: str = ""
    location: str = ""
    type: str = ""  # FIRESTORE_NATIVE or DATASTORE_MODE
    state: str = ""
    create_time: str = ""
    uid: str = ""

    def is_datastore_mode(self) -> bool:
        """True if the database runs in Datastore mode."""
        return self.type == DATASTORE_MODE


@dataclass
class Kind:
    """An entity kind of a Datastore-mode database."""

    name: str = ""
    namespace: str = ""


@dataclass
class Namespace:
    """A namespace of a Datastore-mode database."""

    name: str = ""


def _api_id(value: str) -> str:
    """The Datastore API spells the default database or namespace as an empty string."""
    return "" if value == DEFAULT else value


def _first_path_elements(payload: dict[str, Any]) -> list[dict[str, Any]]:
    elements = []
    for result in (payload.get("batch") or {}).get("entityResults") or []:
        key = (result.get("entity") or {}).get("key")
        if key is None:
            continue
        path = key.get("path") or []
        elements.append(path[0] if path else None)
    return elements


class FirestoreClient:
    """Thin client over the Firestore admin and Datastore query APIs."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    def list_databases(self, project_id: str) -> list[Database]:
        """All Firestore databases of the project."""
        url = f"{FIRESTORE_API}/projects/{project_id}/databases"
        response = self.session.get(url, timeout=_TIMEOUT)
        response.raise_for_status()
        return [
            Database(
                name=item.get("name", "").split("/")[-1],
                project_id=project_id,
                location=item.get("locationId", ""),
                type=item.get("type", ""),
                state="READY",
                create_time=item.get("createTime", ""),
                uid=item.get("uid", ""),
            )
            for item in response.json().get("databases") or []
        ]

    def _run_query(self, project_id: str, body: dict[str, Any], what: str) -> dict[str, Any]:
        url = f"{DATASTORE_API}/projects/{project_id}:runQuery"
        try:
            response = self.session.post(url, json=body, timeout=_TIMEOUT)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise FirestoreError(f"{what}: {exc}") from exc

    def list_namespaces(self, project_id: str, database_id: str) -> list[Namespace]:
        """Namespaces of a Datastore-mode database; never empty."""
        body = {
            "databaseId": _api_id(database_id),
            "query": {"kind": [{"name": "__namespace__"}]},
        }
        payload = self._run_query(project_id, body, "list namespaces")
        namespaces = []
        for element in _first_path_elements(payload):
            if element is None:
                name = ""
            else:
                name = element.get("name") or DEFAULT
            namespaces.append(Namespace(name=name))
        return namespaces or [Namespace(name=DEFAULT)]

    def list_kinds(self, project_id: str, database_id: str, namespace: str) -> list[Kind]:
        """User entity kinds in a namespace; internal kinds starting with '__' are skipped."""
        db_id = _api_id(database_id)
        body = {
            "databaseId": db_id,
            "partitionId": {
                "projectId": project_id,
                "databaseId": db_id,
                "namespaceId": _api_id(namespace),
            },
            "query": {"kind": [{"name": "__kind__"}]},
        }
        payload = self._run_query(project_id, body, "list kinds")
        return [
            Kind(name=element.get("name", ""), namespace=namespace)
            for element in _first_path_elements(payload)
            if element is not None and not element.get("name", "").startswith("__")
        ]


def clean_type(db_type: str) -> str:
    """Database type without its leading 'FIRESTORE_' marker."""
    return db_type.replace("FIRESTORE_", "", 1)


def database_details(db: Database) -> list[tuple[str, str]]:
    """Key/value pairs shown in the database detail card."""
    return [
        ("Name", db.name),
        ("Type", clean_type(db.type)),
        ("Location", db.location),
        ("Created", db.create_time),
        ("UID", db.uid),
    ]