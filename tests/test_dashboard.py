"""Tests for dashboard aggregation and charge search."""

from datetime import datetime, timezone

from practiceboard.ehr import mock
from practiceboard.ehr.dashboard import (
    bundle_resources,
    compute_stats,
    is_critical_allergy,
    search_charges,
    upcoming_appointments,
)

NOW = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)


def _appointment(appointment_id, start, status="booked", patient="Jane Smith"):
    return {
        "resourceType": "Appointment",
        "id": appointment_id,
        "status": status,
        "start": start,
        "appointmentType": {"coding": [{"display": "Follow-up"}]},
        "participant": [
            {"actor": {"reference": "Patient/1", "display": patient}},
            {"actor": {"reference": "Practitioner/7", "display": "Dr. Who"}},
        ],
    }


def test_bundle_resources():
    bundle = {"entry": [{"resource": {"id": "1"}}, {"fullUrl": "x"}, {"resource": {"id": "2"}}]}
    assert bundle_resources(bundle) == [{"id": "1"}, {"id": "2"}]
    assert bundle_resources([{"id": "3"}, "junk"]) == [{"id": "3"}]
    assert bundle_resources({"resourceType": "Bundle"}) == []
    assert bundle_resources(None) == []


def test_is_critical_allergy():
    assert is_critical_allergy({"reaction": [{"severity": "mild"}, {"severity": "Severe"}]})
    assert not is_critical_allergy({"reaction": [{"severity": "moderate"}]})
    assert not is_critical_allergy({})


def test_upcoming_appointments_sorted_and_limited():
    appointments = [
        _appointment(str(i), f"2025-03-{11 + i:02d}T09:30:00Z") for i in range(6, -1, -1)
    ]
    appointments.append(_appointment("past", "2025-03-09T09:30:00Z"))

    rows = upcoming_appointments(appointments, NOW)

    assert [row["id"] for row in rows] == ["0", "1", "2", "3", "4"]
    assert rows[0] == {
        "id": "0",
        "time": "09:30",
        "patient": "Jane Smith",
        "type": "Follow-up",
        "status": "booked",
        "priority": "normal",
        "date": "2025-03-11T09:30:00Z",
    }


def test_upcoming_appointments_skips_undated():
    assert upcoming_appointments([{"id": "x"}, {"id": "y", "start": "soon"}], NOW) == []


def test_compute_stats():
    appointments = [
        _appointment("a", "2025-03-10T14:00:00Z", status="confirmed"),
        _appointment("b", "2025-03-10T15:00:00Z", status="cancelled"),
        _appointment("c", "2025-03-12T09:00:00Z", status="pending"),
    ]
    allergies = [
        {"reaction": [{"severity": "severe"}]},
        {"reaction": [{"severity": "mild"}]},
    ]

    stats = compute_stats([{"id": "p1"}, {"id": "p2"}], appointments, allergies, NOW)

    assert stats["total_patients"] == 2
    assert stats["todays_appointments"] == 2
    assert stats["critical_allergies"] == 1
    assert stats["active_cases"] == 2
    assert [row["id"] for row in stats["upcoming_appointments"]] == ["a", "b", "c"]


def test_compute_stats_empty():
    stats = compute_stats([], [], [], NOW)
    assert stats == {
        "total_patients": 0,
        "todays_appointments": 0,
        "critical_allergies": 0,
        "active_cases": 0,
        "upcoming_appointments": [],
    }


def test_search_charges_by_patient_name():
    result = search_charges(mock.charge_bundle(), "jane")
    assert result["total"] == 1
    assert result["entry"][0]["resource"]["id"] == "charge-003"


def test_search_charges_by_line_description():
    result = search_charges(mock.charge_bundle(), "CBC")
    assert [e["resource"]["id"] for e in result["entry"]] == ["charge-002"]


def test_search_charges_blank_term_returns_bundle():
    bundle = mock.charge_bundle()
    assert search_charges(bundle, "  ") is bundle


def test_mock_items_carry_requested_id():
    assert mock.charge_item("abc")["id"] == "abc"
    assert mock.inbound_charge_item("xyz")["status"] == "inbound"
    assert mock.inbound_charge_bundle()["total"] == 2
