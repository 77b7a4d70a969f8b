"""Compute Engine REST client and VM actions."""

from __future__ import annotations

import subprocess
from datetime import datetime
from typing import Any

import requests

from .gce_models import Disk, Instance, InstanceState

COMPUTE_API = "https://compute.googleapis.com/compute/v1"
_TIMEOUT = 30


class SshError(RuntimeError):
    """Raised when an SSH session or tmux split cannot be started."""


def _last_segment(path: str) -> str:
    return path.split("/")[-1]


def _parse_time(text: str) -> datetime | None:
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_state(status: str) -> InstanceState | str:
    try:
        return InstanceState(status)
    except ValueError:
        return status


def _parse_disk(data: dict[str, Any]) -> Disk:
    disk_type = "pd-standard"
    params = data.get("initializeParams") or {}
    if params.get("diskType"):
        disk_type = _last_segment(params["diskType"])
    return Disk(
        name=data.get("deviceName", ""),
        size_gb=int(data.get("diskSizeGb", 0) or 0),
        type=disk_type,
    )


def _os_image(disks: list[dict[str, Any]]) -> str:
    boot = next((d for d in disks if d.get("boot")), None)
    if boot is None:
        return "Unknown"
    params = boot.get("initializeParams") or {}
    if params.get("sourceImage"):
        return _last_segment(params["sourceImage"])
    licenses = boot.get("licenses") or []
    if licenses:
        return _last_segment(licenses[0])
    return "Unknown"


def parse_instance(data: dict[str, Any], zone: str) -> Instance:
    """Build an Instance from a Compute API instance resource."""
    internal_ip = external_ip = ""
    interfaces = data.get("networkInterfaces") or []
    if interfaces:
        internal_ip = interfaces[0].get("networkIP", "")
        configs = interfaces[0].get("accessConfigs") or []
        if configs:
            external_ip = configs[0].get("natIP", "")

    raw_disks = data.get("disks") or []
    return Instance(
        id=str(data.get("id", 0)),
        name=data.get("name", ""),
        zone=zone,
        state=_parse_state(data.get("status", "")),
        machine_type=_last_segment(data.get("machineType", "")),
        internal_ip=internal_ip,
        external_ip=external_ip,
        creation_time=_parse_time(data.get("creationTimestamp", "")),
        tags=list((data.get("tags") or {}).get("items") or []),
        disks=[_parse_disk(d) for d in raw_disks],
        os_image=_os_image(raw_disks),
    )


class GceClient:
    """Thin client over the Compute Engine instances API."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    def list_instances(self, project_id: str) -> list[Instance]:
        """All instances of the project across every zone."""
        url = f"{COMPUTE_API}/projects/{project_id}/aggregated/instances"
        instances: list[Instance] = []
        page_token = ""
        while True:
            params = {"pageToken": page_token} if page_token else {}
            response = self.session.get(url, params=params, timeout=_TIMEOUT)
            response.raise_for_status()
            page = response.json()
            for scope, items in (page.get("items") or {}).items():
                zone = scope.removeprefix("zones/")
                for data in items.get("instances") or []:
                    instances.append(parse_instance(data, zone))
            page_token = page.get("nextPageToken", "")
            if not page_token:
                return instances

    def _instance_action(self, project_id: str, zone: str, name: str, action: str) -> None:
        url = f"{COMPUTE_API}/projects/{project_id}/zones/{zone}/instances/{name}/{action}"
        response = self.session.post(url, timeout=_TIMEOUT)
        response.raise_for_status()

    def start_instance(self, project_id: str, zone: str, instance_name: str) -> None:
        """Ask the API to start a stopped instance."""
        self._instance_action(project_id, zone, instance_name, "start")

    def stop_instance(self, project_id: str, zone: str, instance_name: str) -> None:
        """Ask the API to stop a running instance."""
        self._instance_action(project_id, zone, instance_name, "stop")


def ssh_args(instance: Instance, project_id: str) -> list[str]:
    """gcloud arguments for SSH; IAP tunnelling when there is no external IP."""
    args = [
        "compute",
        "ssh",
        instance.name,
        "--zone",
        instance.zone,
        "--project",
        project_id,
    ]
    if not instance.external_ip:
        args.append("--tunnel-through-iap")
    return args


def run_ssh(instance: Instance, project_id: str, use_tmux: bool = False) -> str:
    """Open an SSH session, in a new tmux pane if asked; returns a status message."""
    args = ssh_args(instance, project_id)
    if use_tmux:
        full_cmd = "gcloud " + " ".join(args)
        try:
            subprocess.run(["tmux", "split-window", "-h", full_cmd], check=True)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise SshError(f"Tmux split failed: {exc}") from exc
        return "Opened SSH in new pane"

    try:
        subprocess.run(["gcloud", *args], check=True)
    except (subprocess.CalledProcessError, OSError) as exc:
        raise SshError(f"SSH failed: {exc}") from exc
    return "SSH session ended"