"""Tests for the request body to FHIR resource builders."""

from datetime import datetime, timezone

import pytest

from practiceboard.ehr.errors import InvalidResourceError
from practiceboard.ehr.mappings import US_CORE_ETHNICITY_URL, US_CORE_RACE_URL
from practiceboard.ehr.resources import (
    build_allergy,
    build_appointment,
    build_appointment_update,
    build_charge_item,
    build_condition,
    build_condition_update,
    build_medication_statement,
    build_medication_update,
    build_patient,
    build_patient_from_form,
    build_patient_update,
    build_practitioner,
)

# =============================================================================
# Patient
# =============================================================================


def test_patient_copies_only_set_fields():
    resource = build_patient(
        {
            "name": [{"family": "Doe", "given": ["John"]}],
            "gender": "male",
            "birthDate": "",
            "telecom": None,
        }
    )
    assert resource == {
        "resourceType": "Patient",
        "name": [{"family": "Doe", "given": ["John"]}],
        "gender": "male",
    }


def test_patient_keeps_false_flags():
    resource = build_patient({"active": False, "deceasedBoolean": False})
    assert resource["active"] is False
    assert resource["deceasedBoolean"] is False


def test_patient_race_and_ethnicity_become_extensions():
    race = {"text": "Asian"}
    ethnicity = {"text": "Not Hispanic or Latino"}
    resource = build_patient({"race": race, "ethnicity": ethnicity})
    assert resource["extension"] == [
        {"url": US_CORE_RACE_URL, "valueCodeableConcept": race},
        {"url": US_CORE_ETHNICITY_URL, "valueCodeableConcept": ethnicity},
    ]
    assert "race" not in resource


def test_patient_update_requires_id():
    with pytest.raises(InvalidResourceError) as exc:
        build_patient_update({"gender": "female"})
    assert exc.value.to_dict() == {"error": "Patient ID is required for update"}


def test_patient_from_form():
    resource = build_patient_from_form(
        "p-1",
        {
            "name": {"family": "Smith", "given": "Jane"},
            "dob": "1985-11-20",
            "phone": "555-987-6543",
            "email": "jane@example.com",
            "status": "inactive",
            "address": {"line": "456 Oak Ave", "city": "Anytown", "state": "CA"},
            "emergencyContact": {
                "family": "Smith",
                "given": "Joe",
                "phone": "555-000-1111",
                "relationship": "Spouse",
            },
        },
    )
    assert resource["id"] == "p-1"
    assert resource["name"] == [{"family": "Smith", "given": ["Jane"]}]
    assert resource["birthDate"] == "1985-11-20"
    assert resource["active"] is False
    assert resource["address"][0]["line"] == ["456 Oak Ave"]
    assert resource["telecom"] == [
        {"system": "phone", "value": "555-987-6543", "use": "mobile"},
        {"system": "email", "value": "jane@example.com"},
    ]
    assert resource["contact"][0]["relationship"] == [{"text": "Spouse"}]


def test_patient_from_empty_form_clears_telecom_and_contact():
    resource = build_patient_from_form("p-1", {})
    assert resource == {
        "resourceType": "Patient",
        "id": "p-1",
        "telecom": [],
        "contact": [],
    }


# =============================================================================
# AllergyIntolerance
# =============================================================================


def test_allergy_reaction_is_coded():
    resource = build_allergy(
        {
            "code": {"text": "Penicillin"},
            "patient": {"reference": "Patient/1"},
            "reaction": [{"severity": "moderate to severe", "manifestation": "Rash"}],
        }
    )
    reaction = resource["reaction"][0]
    assert reaction["severity"] == "moderate"
    assert reaction["manifestation"] == [
        {
            "coding": [
                {"system": "http://snomed.info/sct", "code": "162415008", "display": "Rash"}
            ]
        }
    ]


def test_allergy_unspecified_severity_is_dropped():
    resource = build_allergy({"reaction": [{"severity": "unspecified", "note": "x"}]})
    assert resource["reaction"] == [{"note": "x"}]


def test_allergy_coded_manifestation_passes_through():
    coded = [{"coding": [{"code": "126485001"}]}]
    resource = build_allergy({"reaction": [{"manifestation": coded}]})
    assert resource["reaction"][0]["manifestation"] == coded


def test_allergy_with_id():
    resource = build_allergy({"code": {"text": "Latex"}}, "a-9")
    assert resource["id"] == "a-9"
    assert resource["resourceType"] == "AllergyIntolerance"


# =============================================================================
# Condition
# =============================================================================


def test_condition_string_category_is_coded():
    resource = build_condition({"category": "Symptom", "code": {"text": "Cough"}})
    assert resource["category"] == [
        {
            "coding": [
                {
                    "system": "http://terminology.hl7.org/CodeSystem/condition-category",
                    "code": "symptom",
                    "display": "Symptom",
                }
            ]
        }
    ]


def test_condition_coded_category_passes_through():
    category = [{"coding": [{"code": "problem-list-item"}]}]
    assert build_condition({"category": category})["category"] == category


def test_condition_update_requires_id():
    with pytest.raises(InvalidResourceError):
        build_condition_update({"category": "Problem"})


# =============================================================================
# Appointment
# =============================================================================


def _appointment(**overrides):
    body = {
        "participant": [{"reference": "Patient/1"}, {"reference": "Practitioner/7"}],
        "start": "2025-02-01T09:00:00Z",
        "minutesDuration": 30,
    }
    body.update(overrides)
    return body


def test_appointment_defaults():
    resource = build_appointment(_appointment())
    assert resource["status"] == "pending"
    assert resource["participant"] == [
        {"actor": {"reference": "Patient/1"}, "status": "accepted"},
        {"actor": {"reference": "Practitioner/7"}, "status": "accepted"},
    ]
    assert resource["minutesDuration"] == 30
    assert "end" not in resource


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"participant": []}, "Missing required field"),
        ({"participant": [{"status": "accepted"}]}, "Invalid participant"),
        ({"participant": [{"reference": 5}]}, "Invalid participant"),
        ({"participant": [{"reference": "Device/1"}]}, "Invalid participant type"),
        ({"start": None}, "Missing required field"),
        ({"minutesDuration": None}, "Missing required field"),
    ],
)
def test_appointment_validation(overrides, error):
    with pytest.raises(InvalidResourceError) as exc:
        build_appointment(_appointment(**overrides))
    assert exc.value.error == error


def test_appointment_end_satisfies_duration_requirement():
    resource = build_appointment(
        _appointment(minutesDuration=None, end="2025-02-01T09:30:00Z")
    )
    assert resource["end"] == "2025-02-01T09:30:00Z"


def test_appointment_update_sends_only_given_fields():
    resource = build_appointment_update("ap-1", {"status": "cancelled"})
    assert resource == {"resourceType": "Appointment", "id": "ap-1", "status": "cancelled"}


# =============================================================================
# Medication
# =============================================================================


def test_medication_statement_defaults_to_active():
    resource = build_medication_statement(
        {
            "subject": {"reference": "Patient/1"},
            "medicationCodeableConcept": {"text": "Lisinopril 10mg"},
        }
    )
    assert resource["resourceType"] == "MedicationStatement"
    assert resource["status"] == "active"


def test_medication_statement_requires_subject():
    with pytest.raises(InvalidResourceError) as exc:
        build_medication_statement({"medicationCodeableConcept": {"text": "x"}})
    assert exc.value.message == "subject (patient reference) is required"


def test_medication_update_rejects_immutable_fields():
    with pytest.raises(InvalidResourceError) as exc:
        build_medication_update("m-1", {"status": "stopped", "dosage": [], "note": None})
    body = exc.value.to_dict()
    assert body["error"] == "Immutable fields cannot be updated"
    assert body["immutableFields"] == ["dosage", "note"]


def test_medication_update_requires_something_to_change():
    with pytest.raises(InvalidResourceError) as exc:
        build_medication_update("m-1", {"foo": "bar"})
    assert exc.value.error == "No valid fields provided for update"


def test_medication_update():
    assert build_medication_update("m-1", {"status": "inactive"}) == {
        "resourceType": "Medication",
        "id": "m-1",
        "status": "inactive",
    }


# =============================================================================
# Practitioner / ChargeItem
# =============================================================================


def test_practitioner():
    resource = build_practitioner({"active": False, "gender": "female", "name": []})
    assert resource == {"resourceType": "Practitioner", "active": False, "gender": "female"}


def test_charge_item():
    now = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)
    resource = build_charge_item(
        {
            "patientId": "67890",
            "providerId": "7",
            "encounterId": "enc-1",
            "description": "Office Visit - Level 3",
            "code": "99213",
            "cost": 150.0,
            "currency": "USD",
        },
        now=now,
    )
    assert resource["status"] == "billable"
    assert resource["subject"] == {"reference": "Patient/67890"}
    assert resource["context"] == {"reference": "Encounter/enc-1"}
    assert resource["occurrenceDateTime"] == "2025-01-15T10:30:00Z"
    assert resource["totalCost"] == {"value": 150.0, "currency": "USD"}
    detail = resource["financialTransactionDetail"][0]
    assert detail["code"]["coding"][0] == {
        "system": "http://www.ama-assn.org/go/cpt",
        "code": "99213",
        "display": "Office Visit - Level 3",
    }
