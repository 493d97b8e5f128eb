# keptnkit

A Python client library for the Keptn control plane, built on `requests`.

## What is in it

- **Data models**
  - `keptnkit.models`: dataclasses for projects, stages, services,
    approvals, resources, secrets, log entries, evaluations, metadata and API
    errors. Every model derives from `JSONModel`, which offers `to_dict`,
    `from_dict`, `to_json` and `from_json`; empty optional fields are left out
    of the JSON.
  - `keptnkit.cloudevent`: `KeptnContextExtendedCE` (with `validate()` and
    `data_as(target)`) and the paged `Events` list.
  - `keptnkit.integration`: `Integration`, its metadata and subscription
    models, and `IntegrationID`, whose `hash()` returns a SHA-1 hex digest.
- **API handlers** (`keptnkit.api`), all subclasses of
  `keptnkit.api.base.APIClient`:
  - `client.APIHandler`: send events, trigger evaluations, create, update and
    delete projects and services, read the installation's metadata.
  - `auth.AuthHandler`: check that credentials are accepted.
  - `projects.ProjectHandler`, `stages.StageHandler`,
    `services.ServiceHandler`: manage projects, stages and services; the
    `get_all_*` methods follow the server's paging.
  - `events.EventHandler` with `events.EventFilter`: query stored events,
    optionally retrying until one matches.
  - `shipyard.ShipyardControllerHandler`: list open triggered events.
  - `sequence.SequenceControlHandler`: pause, resume or abort a sequence.
  - `secrets.SecretHandler`: create, update, delete and list secrets.
  - `logs.LogHandler`: buffer integration log entries and send them in batches,
    by hand with `flush()` or from a background thread with `start(stop_event)`.

  Each handler has an `authenticated(base_url, auth_token, auth_header,
  session, scheme)` class method; most also have `create(base_url)` for an
  unauthenticated plain-HTTP client. TLS certificate verification is turned off
  for the sessions they create (`StageHandler.create` excepted). Failed calls
  raise `keptnkit.api.base.APIError`, which carries the server's `message` and
  `code`.
- **Event watching**: `keptnkit.api.eventwatch.EventWatcher` polls an event
  source and yields batches of events newer than the last one seen;
  `sort_by_time` sorts events oldest first.
- **Utilities**
  - `keptnkit.retry.retry`: call a function until it succeeds, with a delay
    and an optional `threading.Event` to cancel; raises `RetryError`.
  - `keptnkit.timeutils`: `get_keptn_timestamp`, `parse_duration` (`"5m"`,
    `"1h30m"`, …) and `get_start_end_time` for evaluation time frames.
  - `keptnkit.httputils`: `Downloader`, `download_from_url`, `is_valid_url`,
    `trim_http_scheme`.
  - `keptnkit.fileutils`: read files and check for them, expanding a leading
    `~`.
  - `keptnkit.osutils`: environment variable lookups with defaults.
  - `keptnkit.sliceutils.contains_str`.
  - `keptnkit.sleep`: `ConfigurableSleeper` and a no-op `FakeSleeper`.
  - `keptnkit.health`: `create_health_server(host, port)` and
    `run_health_endpoint(port)`, answering `GET /health` with
    `{"status":"OK"}`.

## Installation

```
pip install keptnkit
```

## Examples

Create a project through the API gateway:

```python
from keptnkit.api.client import APIHandler
from keptnkit.models import CreateProject

api = APIHandler.authenticated(
    "keptn.example.com/api", "token", "x-token", None, "https"
)
api.create_project(CreateProject(name="podtato", shipyard="c2hpcHlhcmQ="))
```

List the stages of a project:

```python
from keptnkit.api.stages import StageHandler

stages = StageHandler.create("http://localhost:8080")
for stage in stages.get_all_stages("podtato"):
    print(stage.stage_name)
```

Watch for new events in a Keptn context:

```python
from keptnkit.api.events import EventFilter, EventHandler
from keptnkit.api.eventwatch import EventWatcher

handler = EventHandler.create("http://localhost:8080")
watcher = EventWatcher(
    handler, EventFilter(keptn_context="my-context"), None, 5.0, 60.0
)
for batch in watcher.watch():
    for event in batch:
        print(event.type, event.id)
```

`watcher.cancel()` ends the loop after the current batch.

Send logs every minute from a background thread:

```python
import threading
from keptnkit.api.logs import LogHandler
from keptnkit.models import LogEntry

logs = LogHandler.create("http://localhost:8080")
stop = threading.Event()
logs.start(stop)
logs.log([LogEntry(integration_id="my-id", message="hello")])
# ...
stop.set()
logs.flush()
```

Retry an operation:

```python
from keptnkit.retry import retry, RetryError

try:
    retry(lambda: do_something(), number_of_retries=5, delay_between_retries=1.0)
except RetryError as err:
    print(err)
```

Compute an evaluation time frame:

```python
from keptnkit.timeutils import GetStartEndTimeParams, get_start_end_time

start, end = get_start_end_time(GetStartEndTimeParams(timeframe="10m"))
```

## What it does not do

- There is no handler for reading or writing configuration resources
  (files stored per project, stage or service). The `Resource` and
  `Resources` models exist, but nothing sends them.
- There is no handler for registering or unregistering integrations; the
  `keptnkit.integration` models can be built and serialised, but not sent.
- There is no command-line program. The health endpoint is started from
  Python with `run_health_endpoint(port)`.

## Running the tests

```
pip install -e ".[test]"
pytest
```