"""Tests for the /api/patients routes."""

from conftest import FHIR, searchset


def test_requires_session(client, backend):
    response = client.get("/api/patients")
    assert response.status_code == 401
    assert response.json() == {"error": "No access token found"}
    assert backend.requests == []


def test_search_forwards_whitelisted_params(authed_client, backend):
    backend.add("GET", f"{FHIR}/Patient", json_body=searchset({"resourceType": "Patient", "id": "1"}))

    response = authed_client.get(
        "/api/patients", params={"family": "Doe", "gender": "male", "sort": "x"}
    )

    assert response.status_code == 200
    assert response.json()["total"] == 1
    request = backend.last
    assert dict(request.url.params) == {"family": "Doe", "gender": "male"}
    assert request.headers["authorization"] == "Bearer user-token"
    assert request.headers["x-api-key"] == "test-api-key"
    assert request.headers["accept"] == "application/fhir+json"


def test_search_upstream_failure(authed_client, backend):
    backend.add("GET", f"{FHIR}/Patient", status=503)

    response = authed_client.get("/api/patients")

    assert response.status_code == 500
    assert response.json() == {
        "message": "Error fetching patients",
        "error": "API request failed with status: 503",
    }


def test_create_patient(authed_client, backend):
    backend.add("POST", f"{FHIR}/Patient", status=201, json_body={"resourceType": "Patient", "id": "9"})

    response = authed_client.post(
        "/api/patients",
        json={
            "name": [{"family": "Doe", "given": ["John"]}],
            "gender": "male",
            "race": {"text": "White"},
        },
        headers={"Content-Flag": "merge"},
    )

    assert response.status_code == 201
    assert response.json()["id"] == "9"
    sent = backend.last_json()
    assert sent["resourceType"] == "Patient"
    assert sent["extension"][0]["valueCodeableConcept"] == {"text": "White"}
    assert "race" not in sent
    assert backend.last.headers["content-flag"] == "merge"
    assert backend.last.headers["content-type"] == "application/fhir+json"


def test_update_by_body_requires_id(authed_client, backend):
    response = authed_client.put("/api/patients", json={"gender": "female"})

    assert response.status_code == 400
    assert response.json() == {"error": "Patient ID is required for update"}
    assert backend.requests == []


def test_update_by_body(authed_client, backend):
    backend.add("PUT", f"{FHIR}/Patient/5", json_body={"resourceType": "Patient", "id": "5"})

    response = authed_client.put("/api/patients", json={"id": "5", "active": False})

    assert response.status_code == 200
    assert backend.last_json() == {"resourceType": "Patient", "id": "5", "active": False}


def test_get_patient(authed_client, backend):
    backend.add("GET", f"{FHIR}/Patient/5", json_body={"resourceType": "Patient", "id": "5"})

    response = authed_client.get("/api/patients/5")

    assert response.json() == {"resourceType": "Patient", "id": "5"}


def test_update_from_form(authed_client, backend):
    backend.add("PUT", f"{FHIR}/Patient/5", json_body={"resourceType": "Patient", "id": "5"})

    response = authed_client.put(
        "/api/patients/5",
        json={"name": {"family": "Doe", "given": "Jo"}, "status": "active", "phone": "555"},
    )

    assert response.status_code == 200
    sent = backend.last_json()
    assert sent["name"] == [{"family": "Doe", "given": ["Jo"]}]
    assert sent["active"] is True
    assert sent["telecom"] == [{"system": "phone", "value": "555", "use": "mobile"}]
    assert sent["contact"] == []


def test_update_from_form_passes_upstream_status(authed_client, backend):
    backend.add(
        "PUT",
        f"{FHIR}/Patient/5",
        status=422,
        json_body={"resourceType": "OperationOutcome", "issue": []},
    )

    response = authed_client.put("/api/patients/5", json={"dob": "1990-01-01"})

    assert response.status_code == 422
    assert response.json()["resourceType"] == "OperationOutcome"


def _null_paths(value, path=""):
    if value is None:
        return [path]
    if isinstance(value, dict):
        return [p for k, v in value.items() for p in _null_paths(v, f"{path}.{k}")]
    if isinstance(value, list):
        return [p for i, v in enumerate(value) for p in _null_paths(v, f"{path}[{i}]")]
    return []


def test_update_from_partial_form_sends_no_nulls(authed_client, backend):
    backend.add("PUT", f"{FHIR}/Patient/5", json_body={"resourceType": "Patient", "id": "5"})

    response = authed_client.put(
        "/api/patients/5",
        json={
            "name": {"family": "Doe"},
            "address": {"line": "1 Main St", "city": "Austin"},
            "emergencyContact": {"given": "Ann", "phone": "555"},
        },
    )

    assert response.status_code == 200
    sent = backend.last_json()
    assert _null_paths(sent) == []
    assert sent["name"] == [{"family": "Doe"}]
    assert sent["address"] == [{"line": ["1 Main St"], "city": "Austin"}]
    assert sent["contact"] == [
        {
            "name": {"given": ["Ann"]},
            "telecom": [{"system": "phone", "value": "555"}],
        }
    ]
