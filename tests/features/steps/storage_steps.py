"""
Step definitions for block storage attachments.

These steps implement the Gherkin scenarios defined in storage_attachments.feature.

Note: Steps are synchronous because pytest-bdd doesn't natively support async steps.
We use Starlette's TestClient for synchronous ASGI app testing.
"""

from pytest_bdd import given, parsers, scenarios, then, when
from starlette.testclient import TestClient

from faux_packet.api.app import create_app

# Load all scenarios from the feature file
scenarios("../storage_attachments.feature")

PROJECT = "bdd-project"


# =============================================================================
# Given Steps (Preconditions)
# =============================================================================


@given("the API server is running")
def api_server_running(context: dict, client: TestClient) -> None:
    """Ensure the FastAPI app is available."""
    context["client"] = client
    context["response"] = None
    context["devices"] = {}
    context["volume"] = None
    context["attachment"] = None


@given(parsers.parse('a facility "{name}" with code "{code}" exists'))
def facility_exists(context: dict, name: str, code: str) -> None:
    """Create a facility through the API."""
    response = context["client"].post("/facilities", json={"name": name, "code": code})
    assert response.status_code == 201


@given(parsers.parse('a device "{hostname}" exists in facility "{code}"'))
def device_exists(context: dict, hostname: str, code: str) -> None:
    """Create a device through the API."""
    response = context["client"].post(
        f"/projects/{PROJECT}/devices",
        json={"hostname": hostname, "facility": code},
    )
    assert response.status_code == 201
    context["devices"][hostname] = response.json()


@given(parsers.parse("a volume of size {size:d} exists"))
def volume_exists(context: dict, size: int) -> None:
    """Create a volume through the API."""
    response = context["client"].post(f"/projects/{PROJECT}/storage", json={"size": size})
    assert response.status_code == 201
    context["volume"] = response.json()


@given(parsers.parse('the volume is attached to device "{hostname}"'))
def volume_attached(context: dict, hostname: str) -> None:
    """Attach the current volume as a precondition."""
    _attach(context, context["volume"]["id"], hostname)
    assert context["response"].status_code == 200


# =============================================================================
# When Steps (Actions)
# =============================================================================


@when(parsers.parse('I attach the volume to device "{hostname}"'))
def attach_volume(context: dict, hostname: str) -> None:
    """Attach the current volume to a device."""
    _attach(context, context["volume"]["id"], hostname)


@when(parsers.parse('I attach volume "{volume_id}" to device "{hostname}"'))
def attach_volume_by_id(context: dict, volume_id: str, hostname: str) -> None:
    """Attach a volume given by id."""
    _attach(context, volume_id, hostname)


def _attach(context: dict, volume_id: str, hostname: str) -> None:
    response = context["client"].post(
        f"/storage/{volume_id}/attachments",
        json={"device_id": context["devices"][hostname]["id"]},
    )
    context["response"] = response
    if response.status_code == 200:
        context["attachment"] = response.json()


@when("I detach the attachment")
def detach_attachment(context: dict) -> None:
    """Detach the most recent attachment."""
    context["response"] = context["client"].delete(
        f"/storage/attachments/{context['attachment']['id']}"
    )


@when(parsers.parse('device "{hostname}" reads its metadata'))
def read_metadata(context: dict, hostname: str, store) -> None:
    """Read /metadata from an app configured for the device."""
    device_id = context["devices"][hostname]["id"]
    with TestClient(create_app(store=store, metadata_device=device_id)) as client:
        context["response"] = client.get("/metadata")


# =============================================================================
# Then Steps (Assertions)
# =============================================================================


@then(parsers.parse("the response status should be {status_code:d}"))
def check_status(context: dict, status_code: int) -> None:
    """Verify the last response status."""
    assert context["response"].status_code == status_code


@then(parsers.parse('device "{hostname}" should have {count:d} volume'))
@then(parsers.parse('device "{hostname}" should have {count:d} volumes'))
def device_volume_count(context: dict, hostname: str, count: int) -> None:
    """Verify how many volumes a device lists."""
    device_id = context["devices"][hostname]["id"]
    device = context["client"].get(f"/devices/{device_id}").json()
    assert len(device["volumes"]) == count


@then(parsers.parse("the volume should have {count:d} attachment"))
@then(parsers.parse("the volume should have {count:d} attachments"))
def volume_attachment_count(context: dict, count: int) -> None:
    """Verify how many attachments the current volume lists."""
    volume = context["client"].get(f"/storage/{context['volume']['id']}").json()
    assert len(volume["attachments"]) == count


@then(parsers.parse('the metadata should list {count:d} volume of size "{size}"'))
def metadata_volumes(context: dict, count: int, size: str) -> None:
    """Verify the metadata volume list."""
    volumes = context["response"].json()["volumes"]
    assert len(volumes) == count
    assert all(v["capacity"]["size"] == size for v in volumes)
