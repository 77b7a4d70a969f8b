"""VPC networks, subnets and firewall rules: models and REST client."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

import requests

COMPUTE_API = "https://compute.googleapis.com/compute/v1"
_TIMEOUT = 30


@dataclass
class Network:
    """A VPC network."""

    name: str = ""
    id: int = 0
    self_link: str = ""
    ipv4_range: str = ""
    mode: str = "CUSTOM"  # AUTO, CUSTOM or LEGACY
    gateway_ipv4: str = ""


@dataclass
class Subnet:
    """A regional subnetwork."""

    name: str = ""
    region: str = ""
    ip_cidr_range: str = ""
    gateway: str = ""
    network: str = ""


@dataclass
class Firewall:
    """A firewall rule, summarised for display."""

    name: str = ""
    network: str = ""
    direction: str = ""  # INGRESS or EGRESS
    priority: int = 0
    action: str = "ALLOW"  # ALLOW or DENY
    source: str = ""
    target: str = ""


def network_mode(data: dict[str, Any]) -> str:
    """AUTO, LEGACY or CUSTOM, from a network resource."""
    if data.get("autoCreateSubnetworks"):
        return "AUTO"
    if data.get("IPv4Range"):
        return "LEGACY"
    return "CUSTOM"


def extract_region(url: str) -> str:
    """Last path segment of a region URL."""
    return url.split("/")[-1]


def truncate_list(items: Sequence[str]) -> str:
    """Bracketed list, shortened to two entries and a count of the rest."""
    if len(items) > 2:
        return f"[{items[0]}, {items[1]}, +{len(items) - 2}]"
    return "[" + " ".join(items) + "]"


def firewall_from_api(data: dict[str, Any]) -> Firewall:
    """Build a Firewall summary from a firewall rule resource."""
    action = "DENY" if data.get("denied") else "ALLOW"
    direction = data.get("direction", "")

    if direction == "INGRESS":
        if data.get("sourceRanges"):
            source = f"IPs: {truncate_list(data['sourceRanges'])}"
        elif data.get("sourceTags"):
            source = f"Tags: {truncate_list(data['sourceTags'])}"
        else:
            source = "All"
    elif data.get("destinationRanges"):
        source = f"Dest: {truncate_list(data['destinationRanges'])}"
    else:
        source = "All"

    if data.get("targetTags"):
        target = f"Tags: {truncate_list(data['targetTags'])}"
    else:
        target = "All Instances"

    return Firewall(
        name=data.get("name", ""),
        network=data.get("network", ""),
        direction=direction,
        priority=int(data.get("priority", 0) or 0),
        action=action,
        source=source,
        target=target,
    )


class NetClient:
    """Thin client over the Compute Engine networking APIs."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    def _pages(self, url: str, params: dict[str, str]) -> Iterator[dict[str, Any]]:
        page_token = ""
        while True:
            query = dict(params)
            if page_token:
                query["pageToken"] = page_token
            response = self.session.get(url, params=query, timeout=_TIMEOUT)
            response.raise_for_status()
            page = response.json()
            yield page
            page_token = page.get("nextPageToken", "")
            if not page_token:
                return

    def list_networks(self, project_id: str) -> list[Network]:
        """All VPC networks of the project."""
        url = f"{COMPUTE_API}/projects/{project_id}/global/networks"
        return [
            Network(
                name=item.get("name", ""),
                id=int(item.get("id", 0) or 0),
                self_link=item.get("selfLink", ""),
                ipv4_range=item.get("IPv4Range", ""),
                mode=network_mode(item),
                gateway_ipv4=item.get("gatewayIPv4", ""),
            )
            for page in self._pages(url, {})
            for item in page.get("items") or []
        ]

    def list_subnets(self, project_id: str, network_link: str) -> list[Subnet]:
        """Subnets of the given network across all regions."""
        url = f"{COMPUTE_API}/projects/{project_id}/aggregated/subnetworks"
        params = {"filter": f'network eq "{network_link}"'}
        return [
            Subnet(
                name=sub.get("name", ""),
                region=extract_region(sub.get("region", "")),
                ip_cidr_range=sub.get("ipCidrRange", ""),
                gateway=sub.get("gatewayAddress", ""),
                network=sub.get("network", ""),
            )
            for page in self._pages(url, params)
            for scoped in (page.get("items") or {}).values()
            for sub in scoped.get("subnetworks") or []
        ]

    def list_firewalls(self, project_id: str, network_link: str) -> list[Firewall]:
        """Firewall rules that apply to the given network."""
        url = f"{COMPUTE_API}/projects/{project_id}/global/firewalls"
        params = {"filter": f'network eq "{network_link}"'}
        return [
            firewall_from_api(item)
            for page in self._pages(url, params)
            for item in page.get("items") or []
        ]