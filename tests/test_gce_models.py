from datetime import datetime, timedelta, timezone

import pytest

from cloudpeek.gce_models import (
    Disk,
    Instance,
    InstanceState,
    age_text,
    filter_instances,
    gce_columns,
    instance_to_row,
    table_row,
)


def _inst(name="vm-a", state=InstanceState.RUNNING, **kw):
    return Instance(
        id="42",
        name=name,
        zone=kw.get("zone", "us-central1-a"),
        state=state,
        internal_ip=kw.get("internal_ip", "10.0.0.2"),
        external_ip=kw.get("external_ip", ""),
        disks=kw.get("disks", []),
    )


def test_total_disk_gb_sums_disks():
    disks = [Disk("a", 10, "pd-ssd"), Disk("b", 25, "pd-standard")]
    inst = _inst(disks=disks)
    assert inst.total_disk_gb() == disks[0].size_gb + disks[1].size_gb


def test_total_disk_gb_empty():
    assert _inst().total_disk_gb() == 0


def test_instance_to_row_running_icon():
    row = instance_to_row(_inst())
    assert row[1].startswith("🟢 ")
    assert row[1].endswith("RUNNING")
    assert row[0] == "vm-a"
    assert row[5] == "42"


def test_instance_to_row_terminated():
    row = instance_to_row(_inst(state=InstanceState.TERMINATED))
    assert row[1] == "🔴 STOP"


@pytest.mark.parametrize(
    "state",
    [InstanceState.PROVISIONING, InstanceState.STAGING, InstanceState.STOPPING],
)
def test_instance_to_row_transitional(state):
    row = instance_to_row(_inst(state=state))
    assert row[1] == "🔄 " + state.value


def test_instance_to_row_unknown_string_state():
    row = instance_to_row(_inst(state="HIBERNATED"))
    assert row[1] == "⚪ HIBERNATED"


def test_columns_order_and_count():
    cols = gce_columns()
    assert [title for title, _ in cols] == [
        "VM Name",
        "VM STATE",
        "GCP Zone",
        "Int. IP",
        "Ext. IP",
        "ID",
    ]
    assert len(cols) == len(instance_to_row(_inst()))


def test_table_row_terminated_shown_stopped():
    assert table_row(_inst(state=InstanceState.TERMINATED))[1] == "STOPPED"
    assert table_row(_inst(state=InstanceState.RUNNING))[1] == "RUNNING"
    assert table_row(_inst(state="SUSPENDED"))[1] == "SUSPENDED"


def test_filter_empty_query_keeps_all():
    items = [_inst("a"), _inst("b")]
    assert filter_instances(items, "") == items


def test_filter_matches_case_insensitive_on_fields():
    a = _inst("web-Front", zone="europe-west1-b")
    b = _inst("db", zone="us-east1-c", external_ip="34.1.1.1")
    assert filter_instances([a, b], "FRONT") == [a]
    assert filter_instances([a, b], "europe") == [a]
    assert filter_instances([a, b], "34.1") == [b]
    assert filter_instances([a, b], "nothing") == []


def test_age_text_days():
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    now = created + timedelta(days=3, hours=5)
    assert age_text(created, now) == "3 days ago"


def test_age_text_hours_when_under_a_day():
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    now = created + timedelta(hours=7, minutes=30)
    assert age_text(created, now) == "7 hours ago"