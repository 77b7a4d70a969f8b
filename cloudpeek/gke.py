"""Kubernetes Engine clusters: models, REST client, presentation and k9s launch."""

from __future__ import annotations

import subprocess
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import requests

CONTAINER_API = "https://container.googleapis.com/v1"
_TIMEOUT = 30


class K9sError(RuntimeError):
    """Raised when k9s cannot be started for a cluster."""


@dataclass
class AutoscalingConfig:
    """Autoscaling bounds of a node pool."""

    enabled: bool = False
    min_node_count: int = 0
    max_node_count: int = 0


@dataclass
class NodePool:
    """A node pool of a cluster."""

    name: str = ""
    status: str = ""
    machine_type: str = ""
    disk_size_gb: int = 0
    initial_node_count: int = 0
    autoscaling: AutoscalingConfig = field(default_factory=AutoscalingConfig)
    is_spot: bool = False
    version: str = ""


@dataclass
class Cluster:
    """A GKE cluster with its node pools."""

    name: str = ""
    location: str = ""
    status: str = ""
    master_version: str = ""
    endpoint: str = ""
    network: str = ""
    subnetwork: str = ""
    node_count: int = 0
    mode: str = "Standard"
    self_link: str = ""
    node_pools: list[NodePool] = field(default_factory=list)


def _int(value: Any) -> int:
    return int(value or 0)


def cluster_mode(data: dict[str, Any]) -> str:
    """'Autopilot' when the cluster resource has Autopilot enabled, else 'Standard'."""
    autopilot = data.get("autopilot") or {}
    return "Autopilot" if autopilot.get("enabled") else "Standard"


def node_pools_from_api(pools: Iterable[dict[str, Any]] | None) -> list[NodePool]:
    """Convert node pool resources of the Container API into NodePool objects."""
    result: list[NodePool] = []
    for pool in pools or ():
        config = pool.get("config") or {}
        scaling = pool.get("autoscaling")
        result.append(
            NodePool(
                name=pool.get("name", ""),
                status=pool.get("status", ""),
                machine_type=config.get("machineType", ""),
                disk_size_gb=_int(config.get("diskSizeGb")),
                initial_node_count=_int(pool.get("initialNodeCount")),
                autoscaling=AutoscalingConfig(
                    enabled=bool(scaling and scaling.get("enabled")),
                    min_node_count=_int((scaling or {}).get("minNodeCount")),
                    max_node_count=_int((scaling or {}).get("maxNodeCount")),
                ),
                is_spot=bool(config.get("spot", False)),
                version=pool.get("version", ""),
            )
        )
    return result


def cluster_from_api(data: dict[str, Any]) -> Cluster:
    """Build a Cluster from a Container API cluster resource."""
    return Cluster(
        name=data.get("name", ""),
        location=data.get("location", ""),
        status=data.get("status", ""),
        master_version=data.get("currentMasterVersion", ""),
        endpoint=data.get("endpoint", ""),
        network=data.get("network", ""),
        subnetwork=data.get("subnetwork", ""),
        node_count=_int(data.get("currentNodeCount")),
        mode=cluster_mode(data),
        self_link=data.get("selfLink", ""),
        node_pools=node_pools_from_api(data.get("nodePools")),
    )


class GkeClient:
    """Thin client over the Kubernetes Engine clusters API."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    def list_clusters(self, project_id: str) -> list[Cluster]:
        """All clusters of the project across every location."""
        url = f"{CONTAINER_API}/projects/{project_id}/locations/-/clusters"
        response = self.session.get(url, timeout=_TIMEOUT)
        response.raise_for_status()
        return [cluster_from_api(c) for c in response.json().get("clusters") or []]


def cluster_row(cluster: Cluster) -> list[str]:
    """Table row: name, location, status, version, mode, node count."""
    return [
        cluster.name,
        cluster.location,
        cluster.status,
        cluster.master_version,
        cluster.mode,
        str(cluster.node_count),
    ]


def filter_clusters(clusters: Iterable[Cluster], query: str) -> list[Cluster]:
    """Clusters whose name, location, status or version contain the query, ignoring case."""
    clusters = list(clusters)
    if not query:
        return clusters
    needle = query.lower()
    return [
        c
        for c in clusters
        if any(
            needle in value.lower()
            for value in (c.name, c.location, c.status, c.master_version)
        )
    ]


def node_pool_lines(pool: NodePool) -> list[str]:
    """Text lines describing a node pool in the cluster detail view."""
    spot = " SPOT" if pool.is_spot else ""
    lines = [
        f"{pool.status} {pool.name}{spot}",
        f"  Type: {pool.machine_type} | Disk: {pool.disk_size_gb}GB"
        f" | Count: {pool.initial_node_count} (Init: {pool.initial_node_count})",
    ]
    if pool.autoscaling.enabled:
        lines.append(
            f"  Autoscaling: {pool.autoscaling.min_node_count}"
            f" - {pool.autoscaling.max_node_count} nodes"
        )
    return lines


def k9s_context(project_id: str, cluster: Cluster) -> str:
    """kubectl context name that gcloud creates for the cluster."""
    return f"gke_{project_id}_{cluster.location}_{cluster.name}"


def launch_k9s(project_id: str, cluster: Cluster) -> str:
    """Run k9s for the cluster, fetching credentials first if the context is missing."""
    try:
        subprocess.run(["k9s", "--context", k9s_context(project_id, cluster)], check=True)
        return "k9s session ended"
    except (subprocess.CalledProcessError, OSError):
        pass

    fallback = (
        f"gcloud container clusters get-credentials {cluster.name}"
        f" --zone {cluster.location} --project {project_id} && k9s"
    )
    try:
        subprocess.run(["bash", "-c", fallback], check=True)
    except (subprocess.CalledProcessError, OSError) as exc:
        raise K9sError(str(exc)) from exc
    return "k9s session ended"