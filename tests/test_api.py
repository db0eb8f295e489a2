"""
HTTP tests through FastAPI's TestClient: status codes, error bodies and payload shape.
"""

import csv
from decimal import Decimal
from io import StringIO

import pytest


@pytest.fixture
def seeded(client):
    """D1 (09:00-17:00) and S1 (30 minutes) created through the API."""
    doctor = client.post(
        "/doctors",
        json={"name": "Dr. House", "specialization": "Diagnostics", "workHours": "09:00-17:00"},
    )
    service = client.post(
        "/medical-services", json={"name": "Consultation", "price": 50, "duration": 30}
    )
    assert doctor.status_code == 201
    assert service.status_code == 201
    return {"doctor": doctor.json(), "service": service.json()}


def _book(client, seeded, date_time, patient="Alice"):
    return client.post(
        "/appointments",
        json={
            "patientName": patient,
            "doctorId": seeded["doctor"]["id"],
            "serviceId": seeded["service"]["id"],
            "dateTime": date_time,
        },
    )


class TestHealth:
    def test_root_and_health(self, client):
        assert client.get("/").json() == {"message": "MedCare API is running"}
        assert client.get("/health").json() == {"status": "healthy"}

    def test_security_headers(self, client):
        response = client.get("/doctors")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"


class TestDirectoryApi:
    def test_doctor_payload(self, seeded):
        assert seeded["doctor"]["workHours"] == "09:00-17:00"
        assert Decimal(seeded["service"]["price"]) == Decimal("50")
        assert seeded["service"]["duration"] == 30

    def test_malformed_working_hours(self, client):
        response = client.post(
            "/doctors", json={"name": "Dr. X", "specialization": "GP", "workHours": "17:00-09:00"}
        )

        assert response.status_code == 422

    def test_doctor_by_specialization(self, client, seeded):
        response = client.get("/doctors/specialization/Diagnostics")

        assert [d["id"] for d in response.json()] == [seeded["doctor"]["id"]]

    def test_unknown_doctor(self, client):
        response = client.get("/doctors/999")

        assert response.status_code == 404
        assert response.json() == {"detail": "Doctor not found: 999", "error": "not_found"}

    def test_non_positive_service_duration(self, client):
        response = client.post(
            "/medical-services", json={"name": "Nothing", "price": 1, "duration": 0}
        )

        assert response.status_code == 422

    def test_update_and_delete_doctor(self, client, seeded):
        doctor_id = seeded["doctor"]["id"]

        updated = client.put(f"/doctors/{doctor_id}", json={"workHours": "08:00-12:00"})
        assert updated.json()["workHours"] == "08:00-12:00"
        assert updated.json()["name"] == "Dr. House"

        assert client.delete(f"/doctors/{doctor_id}").status_code == 204
        assert client.get(f"/doctors/{doctor_id}").status_code == 404

    def test_delete_referenced_service(self, client, seeded):
        _book(client, seeded, "2024-01-15T10:00:00")

        response = client.delete(f"/medical-services/{seeded['service']['id']}")

        assert response.status_code == 422
        assert response.json()["error"] == "validation_failure"


class TestAvailabilityApi:
    def test_availability_endpoint(self, client, seeded):
        _book(client, seeded, "2024-01-15T10:00:00")
        doctor_id = seeded["doctor"]["id"]

        busy = client.get(
            f"/doctors/{doctor_id}/availability",
            params={"dateTime": "2024-01-15T10:15:00", "duration": 30},
        )
        free = client.get(
            f"/doctors/{doctor_id}/availability",
            params={"dateTime": "2024-01-15T10:30:00", "duration": 30},
        )

        assert busy.status_code == 200
        assert busy.json()["available"] is False
        assert free.json()["available"] is True
        assert free.json()["doctorId"] == doctor_id

    def test_non_positive_duration(self, client, seeded):
        response = client.get(
            f"/doctors/{seeded['doctor']['id']}/availability",
            params={"dateTime": "2024-01-15T10:00:00", "duration": 0},
        )

        assert response.status_code == 422

    def test_unknown_doctor(self, client):
        response = client.get(
            "/doctors/999/availability",
            params={"dateTime": "2024-01-15T10:00:00", "duration": 30},
        )

        assert response.status_code == 404


class TestAppointmentsApi:
    def test_booking_payload(self, client, seeded):
        response = _book(client, seeded, "2024-01-15T10:00:00")

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "NEW"
        assert body["dateTime"] == "2024-01-15T10:00:00"
        assert body["endTime"] == "2024-01-15T10:30:00"
        assert body["doctor"]["id"] == seeded["doctor"]["id"]
        assert body["service"]["name"] == "Consultation"

    def test_conflict(self, client, seeded):
        first = _book(client, seeded, "2024-01-15T10:00:00").json()

        response = _book(client, seeded, "2024-01-15T10:15:00", patient="Bob")

        assert response.status_code == 409
        assert response.json()["error"] == "slot_conflict"
        assert response.json()["conflictingAppointments"] == [first["id"]]

    def test_outside_working_hours(self, client, seeded):
        response = _book(client, seeded, "2024-01-15T08:30:00")

        assert response.status_code == 409
        assert response.json()["conflictingAppointments"] == []

    def test_timezone_offset_rejected(self, client, seeded):
        response = _book(client, seeded, "2024-01-15T10:00:00+02:00")

        assert response.status_code == 422

    def test_stored_name_survives_resubmission(self, client, seeded):
        created = _book(client, seeded, "2024-01-15T10:00:00", patient="O'Brien & Co").json()
        url = f"/appointments/{created['id']}"
        fetched = client.get(url).json()["patientName"]

        updated = client.put(url, json={"patientName": fetched})

        assert updated.status_code == 200
        assert updated.json()["patientName"] == created["patientName"]
        assert client.get(url).json()["patientName"] == created["patientName"]

    def test_patient_name_too_long_once_escaped(self, client, seeded):
        response = _book(client, seeded, "2024-01-15T10:00:00", patient="<" * 100)

        assert response.status_code == 422

    def test_empty_patient_name(self, client, seeded):
        response = _book(client, seeded, "2024-01-15T10:00:00", patient="   ")

        assert response.status_code == 422

    def test_unknown_service(self, client, seeded):
        response = client.post(
            "/appointments",
            json={
                "patientName": "Alice",
                "doctorId": seeded["doctor"]["id"],
                "serviceId": 999,
                "dateTime": "2024-01-15T10:00:00",
            },
        )

        assert response.status_code == 404

    def test_reschedule(self, client, seeded):
        appointment = _book(client, seeded, "2024-01-15T10:00:00").json()
        _book(client, seeded, "2024-01-15T11:00:00", patient="Bob")

        conflict = client.put(
            f"/appointments/{appointment['id']}", json={"dateTime": "2024-01-15T11:15:00"}
        )
        moved = client.put(
            f"/appointments/{appointment['id']}", json={"dateTime": "2024-01-15T10:15:00"}
        )

        assert conflict.status_code == 409
        assert moved.status_code == 200
        assert moved.json()["dateTime"] == "2024-01-15T10:15:00"

    def test_status_workflow(self, client, seeded):
        appointment = _book(client, seeded, "2024-01-15T10:00:00").json()
        url = f"/appointments/{appointment['id']}/status"

        assert client.patch(url, json={"status": "CANCELLED"}).json()["status"] == "CANCELLED"

        illegal = client.patch(url, json={"status": "NEW"})
        assert illegal.status_code == 422
        assert illegal.json()["error"] == "invalid_transition"

        unknown = client.patch(url, json={"status": "ARCHIVED"})
        assert unknown.status_code == 422

        # The released slot can be booked again
        assert _book(client, seeded, "2024-01-15T10:00:00", patient="Bob").status_code == 201

    def test_date_range(self, client, seeded):
        _book(client, seeded, "2024-01-15T10:00:00")
        _book(client, seeded, "2024-01-16T10:00:00", patient="Bob")

        response = client.get(
            "/appointments/date-range",
            params={"start": "2024-01-16T00:00:00", "end": "2024-01-16T23:59:59"},
        )

        assert [a["patientName"] for a in response.json()] == ["Bob"]

    def test_delete(self, client, seeded):
        appointment = _book(client, seeded, "2024-01-15T10:00:00").json()

        assert client.delete(f"/appointments/{appointment['id']}").status_code == 204
        assert client.get(f"/appointments/{appointment['id']}").status_code == 404
        assert client.delete(f"/appointments/{appointment['id']}").status_code == 404


class TestReportsApi:
    @pytest.fixture
    def booked(self, client, seeded):
        second = client.post(
            "/doctors",
            json={"name": "Dr. Grey", "specialization": "Surgery", "workHours": "09:00-17:00"},
        ).json()
        _book(client, seeded, "2024-01-15T09:00:00")
        for hour in (10, 11, 12):
            client.post(
                "/appointments",
                json={
                    "patientName": f"Patient {hour}",
                    "doctorId": second["id"],
                    "serviceId": seeded["service"]["id"],
                    "dateTime": f"2024-01-15T{hour}:00:00",
                },
            )
        return second

    def test_most_requested_doctors(self, client, booked, seeded):
        rows = client.get("/reports/doctors/most-requested").json()

        assert [(r["doctor"]["id"], r["count"]) for r in rows] == [
            (booked["id"], 3),
            (seeded["doctor"]["id"], 1),
        ]

    def test_most_requested_services(self, client, booked, seeded):
        rows = client.get("/reports/services/most-requested").json()

        assert [(r["service"]["id"], r["count"]) for r in rows] == [(seeded["service"]["id"], 4)]

    def test_report(self, client, booked):
        response = client.get(
            "/reports",
            params={"startDate": "2024-01-15T00:00:00", "endDate": "2024-01-15T23:59:00"},
        )

        body = response.json()
        assert len(body["appointments"]) == 4
        assert body["doctorStatistics"][0]["count"] == 3

    def test_csv_export(self, client, booked):
        response = client.get(
            "/reports/export/csv",
            params={"startDate": "2024-01-15T00:00:00", "endDate": "2024-01-15T23:59:00"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "report.csv" in response.headers["content-disposition"]
        rows = list(csv.reader(StringIO(response.text)))
        assert rows[0][0] == "ID"
        assert len([r for r in rows[1:] if r and r[0].isdigit()]) == 4

    def test_xml_export(self, client, booked):
        response = client.get(
            "/reports/export/xml",
            params={"startDate": "2024-01-15T00:00:00", "endDate": "2024-01-15T23:59:00"},
        )

        assert response.status_code == 200
        assert "report.xml" in response.headers["content-disposition"]
        assert b"<statisticsReport>" in response.content

    def test_inverted_period(self, client):
        response = client.get(
            "/reports",
            params={"startDate": "2024-02-01T00:00:00", "endDate": "2024-01-01T00:00:00"},
        )

        assert response.status_code == 422
