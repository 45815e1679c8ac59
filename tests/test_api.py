from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from mcaid.database import get_db
from mcaid.main import app
from mcaid.notifications.events import EventKind
from mcaid.shared.recipients import get_dispatcher


@pytest.fixture
def mock_dispatcher():
    return MagicMock()


@pytest.fixture
def client(db_engine, mock_dispatcher):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dispatcher] = lambda: mock_dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


def _register(client, role, email, phone="+254712345678", first="Test", last="User"):
    response = client.post(
        "/users",
        json={"firstName": first, "lastName": last, "email": email, "phone": phone, "role": role},
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


def test_root(client):
    assert client.get("/").json() == {"message": "MCaid API is running"}


def test_register_normalizes_phone_and_email(client):
    response = client.post(
        "/users",
        json={"firstName": "Amina", "lastName": "Otieno", "email": "Amina@Example.com", "phone": "+254 712 345 678"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "amina@example.com"
    assert body["phone"] == "+254712345678"


def test_register_rejects_phone_without_country_code(client):
    response = client.post(
        "/users",
        json={"firstName": "Amina", "lastName": "Otieno", "email": "a@example.com", "phone": "0712345678"},
    )
    assert response.status_code == 422


def test_missing_user_header_is_401(client):
    assert client.get("/appointments").status_code == 401


def test_medical_creates_appointment_and_mother_is_notified(client, mock_dispatcher):
    doctor_id = _register(client, "medical", "doc@example.com", first="Jane", last="Doe")
    mother_id = _register(client, "mother", "mom@example.com")

    response = client.post(
        "/appointments",
        headers={"X-User-Id": str(doctor_id)},
        json={"motherId": mother_id, "appointmentDate": "2024-03-01", "appointmentTime": "10:00"},
    )

    assert response.status_code == 201, response.text
    assert response.json()["status"] == "scheduled"
    event = mock_dispatcher.notify.call_args.args[0]
    assert event.kind == EventKind.APPOINTMENT_CREATED.value
    assert event.recipient.user_id == str(mother_id)


def test_mother_cannot_use_medical_endpoint(client, mock_dispatcher):
    mother_id = _register(client, "mother", "mom@example.com")
    mock_dispatcher.reset_mock()
    response = client.post(
        "/appointments",
        headers={"X-User-Id": str(mother_id)},
        json={"motherId": mother_id, "appointmentDate": "2024-03-01", "appointmentTime": "10:00"},
    )
    assert response.status_code == 403
    mock_dispatcher.notify.assert_not_called()


def test_health_note_with_alert_type_is_created(client, mock_dispatcher):
    doctor_id = _register(client, "medical", "doc@example.com")
    mother_id = _register(client, "mother", "mom@example.com")

    response = client.post(
        f"/patients/{mother_id}/notes",
        headers={"X-User-Id": str(doctor_id)},
        json={"content": "Iron levels are low.", "alertType": "Low Iron"},
    )
    assert response.status_code == 201
    assert response.json()["alertType"] == "Low Iron"
    assert mock_dispatcher.notify.call_args.args[0].kind == EventKind.HEALTH_ALERT.value


def test_preferences_round_trip(client):
    mother_id = _register(client, "mother", "mom@example.com")
    headers = {"X-User-Id": str(mother_id)}

    assert client.get("/users/me/notification-preferences", headers=headers).json() == {
        "email": True,
        "sms": True,
        "push": True,
        "phone": "+254712345678",
        "pushToken": None,
    }

    response = client.put(
        "/users/me/notification-preferences",
        headers=headers,
        json={"sms": False, "pushToken": "player-9"},
    )
    assert response.status_code == 200
    assert response.json()["sms"] is False
    assert response.json()["email"] is True
    assert response.json()["pushToken"] == "player-9"


def test_store_updates_order_status(client, mock_dispatcher):
    mother_id = _register(client, "mother", "mom@example.com")
    store_id = _register(client, "store", "store@example.com")

    order = client.post(
        "/orders", headers={"X-User-Id": str(mother_id)}, json={"storeId": store_id, "totalAmount": 12.5}
    ).json()

    response = client.put(
        f"/orders/{order['id']}/status",
        headers={"X-User-Id": str(store_id)},
        json={"status": "out-for-delivery"},
    )
    assert response.status_code == 200
    assert response.json()["trackingNumber"]
    event = mock_dispatcher.notify.call_args.args[0]
    assert event.payload.status == "out-for-delivery"


def test_registration_sends_welcome_email(client, mock_dispatcher):
    user_id = _register(client, "mother", "mom@example.com", first="Amina")

    event = mock_dispatcher.notify.call_args.args[0]
    assert event.kind == EventKind.USER_REGISTERED.value
    assert event.recipient.user_id == str(user_id)
    assert event.payload.first_name == "Amina"


def test_medical_views_patient_with_appointment(client, mock_dispatcher):
    doctor_id = _register(client, "medical", "doc@example.com", first="Jane", last="Doe")
    mother_id = _register(client, "mother", "mom@example.com", first="Amina", last="Otieno")
    client.post(
        "/appointments",
        headers={"X-User-Id": str(doctor_id)},
        json={"motherId": mother_id, "appointmentDate": "2024-03-01", "appointmentTime": "10:00"},
    )

    response = client.get(f"/patients/{mother_id}", headers={"X-User-Id": str(doctor_id)})

    assert response.status_code == 200, response.text
    assert response.json()["firstName"] == "Amina"
    event = mock_dispatcher.notify.call_args.args[0]
    assert event.kind == EventKind.PATIENT_RECORD_VIEWED.value
    assert event.payload.reviewer_name == "Jane Doe"


def test_medical_without_appointment_cannot_view_patient(client, mock_dispatcher):
    doctor_id = _register(client, "medical", "doc@example.com")
    mother_id = _register(client, "mother", "mom@example.com")
    mock_dispatcher.reset_mock()

    response = client.get(f"/patients/{mother_id}", headers={"X-User-Id": str(doctor_id)})

    assert response.status_code == 403
    mock_dispatcher.notify.assert_not_called()
