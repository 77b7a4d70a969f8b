# cloudpeek

A small library for looking at what lives in a Google Cloud project. It
talks to the Google Cloud REST APIs through an authorised `requests`
session you supply, and turns the responses into plain dataclasses plus
ready-made table rows, filters and text summaries.

## Installation

```
pip install cloudpeek
```

For running the tests:

```
pip install "cloudpeek[test]"
pytest
```

## Authentication

Every client takes a `requests.Session` that already carries credentials,
for example a session whose `Authorization` header holds a bearer token.
If no session is given, a plain `requests.Session()` is used.

```python
import requests

session = requests.Session()
session.headers["Authorization"] = "Bearer token"
```

## What is covered

| Module | Client | Models and helpers |
| --- | --- | --- |
| `cloudpeek.gce_models` | – | `InstanceState`, `Disk`, `Instance` (`total_disk_gb()`), `instance_to_row`, `gce_columns`, `table_row`, `filter_instances`, `age_text` |
| `cloudpeek.gce_api` | `GceClient` | `parse_instance`, `ssh_args`, `run_ssh`, `SshError` |
| `cloudpeek.gcs` | `GcsClient` | `Bucket`, `StorageObject`, `parent_prefix`, `format_size`, `bucket_row`, `object_row`, `filter_buckets`, `filter_objects` |
| `cloudpeek.gke` | `GkeClient` | `Cluster`, `NodePool`, `AutoscalingConfig`, `cluster_mode`, `cluster_from_api`, `node_pools_from_api`, `cluster_row`, `filter_clusters`, `node_pool_lines`, `k9s_context`, `launch_k9s`, `K9sError` |
| `cloudpeek.iam` | `IamClient` | `ServiceAccount`, `PolicyMember`, `account_status`, `account_row`, `IamError` |
| `cloudpeek.net` | `NetClient` | `Network`, `Subnet`, `Firewall`, `network_mode`, `extract_region`, `truncate_list`, `firewall_from_api` |
| `cloudpeek.firestore` | `FirestoreClient` | `Database` (`is_datastore_mode()`), `Kind`, `Namespace`, `clean_type`, `database_details`, `FirestoreError` |
| `cloudpeek.overview_models` | – | `BillingInfo`, `Recommendation`, `ResourceInventory`, `SpendLimit`, `InsightCategory`, `readable_category`, `category_key`, `summarize_recommendations`, `insight_lines`, `budget_lines` |
| `cloudpeek.overview_api` | `OverviewClient` | `format_budget_amount`, `recommendation_from_api` |

The `filter_*` helpers match a query as a case-insensitive substring of
the listed fields; an empty query returns everything.

## Errors

HTTP failures surface as `requests.HTTPError` from `raise_for_status()`,
except where a module wraps them: `IamClient.list_service_accounts`
raises `IamError`, and `FirestoreClient.list_namespaces` /
`list_kinds` raise `FirestoreError`. `OverviewClient.get_recommendations`
skips recommenders that fail, and `OverviewClient.get_global_inventory`
leaves a count at zero when its lookup fails.

## Examples

List VMs:

```python
from cloudpeek.gce_api import GceClient
from cloudpeek.gce_models import table_row, filter_instances

client = GceClient(session)
instances = client.list_instances("my-project")
for inst in filter_instances(instances, "us-central1"):
    print(table_row(inst), inst.total_disk_gb(), "GB")
```

Browse a bucket one folder level at a time:

```python
from cloudpeek.gcs import GcsClient, object_row, parent_prefix

gcs = GcsClient(session)
for obj in gcs.list_objects("my-bucket", "logs/2024/"):
    print(object_row(obj))
print(parent_prefix("logs/2024/"))  # "logs/"
```

Summarise cost recommendations and the project inventory:

```python
from cloudpeek.overview_api import OverviewClient
from cloudpeek.overview_models import insight_lines

overview = OverviewClient(session)
recs = overview.get_recommendations("my-project", "")
print("\n".join(insight_lines(recs)))
print(overview.get_global_inventory("my-project"))
```

Opening an SSH session (`run_ssh`, optionally in a new tmux pane) or k9s
(`launch_k9s`, which falls back to fetching cluster credentials with
`gcloud` through `bash`) starts the `gcloud`, `tmux`, `k9s` or `bash`
programs, which must be on your `PATH`.

## What this package does not do

- There is no command-line program and no interactive terminal screen;
  the package is a library of clients and formatting helpers.
- There is no cache; each client call goes to the API.
- There is no price estimate for VMs or disks.
- It does not obtain credentials itself; you supply an authorised session.