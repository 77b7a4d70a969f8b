"""Compute Engine instance models and their table presentation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class InstanceState(str, Enum):
    """Lifecycle status of a VM as reported by the Compute API."""

    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    TERMINATED = "TERMINATED"
    PROVISIONING = "PROVISIONING"
    STAGING = "STAGING"
    STOPPING = "STOPPING"
    SUSPENDING = "SUSPENDING"
    REPAIRING = "REPAIRING"
    OTHER = "OTHER"


_TRANSITIONAL = {
    InstanceState.PROVISIONING,
    InstanceState.STAGING,
    InstanceState.STOPPING,
    InstanceState.SUSPENDING,
    InstanceState.REPAIRING,
}


def _state_text(state: InstanceState | str) -> str:
    return state.value if isinstance(state, InstanceState) else state


@dataclass
class Disk:
    """A disk attached to an instance."""

    name: str = ""
    size_gb: int = 0
    type: str = "pd-standard"


@dataclass
class Instance:
    """A simplified Compute Engine VM."""

    id: str = ""
    name: str = ""
    zone: str = ""
    state: InstanceState | str = InstanceState.OTHER
    machine_type: str = ""
    internal_ip: str = ""
    external_ip: str = ""
    creation_time: datetime | None = None
    tags: list[str] = field(default_factory=list)
    disks: list[Disk] = field(default_factory=list)
    os_image: str = "Unknown"

    def total_disk_gb(self) -> int:
        """Sum of the sizes of all attached disks, in GB."""
        return sum(disk.size_gb for disk in self.disks)


def instance_to_row(instance: Instance) -> list[str]:
    """Row with an icon-decorated status: name, status, zone, IPs, id."""
    text = _state_text(instance.state)
    if instance.state == InstanceState.RUNNING:
        status = "🟢 " + text
    elif instance.state == InstanceState.STOPPED:
        status = "🔴 " + text
    elif instance.state == InstanceState.TERMINATED:
        status = "🔴 STOP"
    elif instance.state in _TRANSITIONAL:
        status = "🔄 " + text
    else:
        status = "⚪ " + text
    return [
        instance.name,
        status,
        instance.zone,
        instance.internal_ip,
        instance.external_ip,
        instance.id,
    ]


def gce_columns() -> list[tuple[str, int]]:
    """Column titles and widths of the instance table."""
    return [
        ("VM Name", 30),
        ("VM STATE", 20),
        ("GCP Zone", 15),
        ("Int. IP", 15),
        ("Ext. IP", 15),
        ("ID", 20),
    ]


def table_row(instance: Instance) -> list[str]:
    """Plain row for the list view; TERMINATED is shown as STOPPED."""
    status = _state_text(instance.state)
    if status in ("STOPPED", "TERMINATED"):
        status = "STOPPED"
    return [
        instance.name,
        status,
        instance.zone,
        instance.internal_ip,
        instance.external_ip,
        instance.id,
    ]


def filter_instances(instances: Iterable[Instance], query: str) -> list[Instance]:
    """Instances whose name, zone or IPs contain the query, ignoring case."""
    instances = list(instances)
    if not query:
        return instances
    needle = query.lower()
    return [
        inst
        for inst in instances
        if any(
            needle in value.lower()
            for value in (inst.name, inst.zone, inst.internal_ip, inst.external_ip)
        )
    ]


def age_text(created: datetime, now: datetime | None = None) -> str:
    """Human age such as '3 days ago', or hours when under a day."""
    if now is None:
        now = datetime.now(created.tzinfo)
    hours = (now - created).total_seconds() / 3600
    days = int(hours / 24)
    if days == 0:
        return f"{int(hours)} hours ago"
    return f"{days} days ago"