from conftest import FUTURE_DAY, login

DAY = FUTURE_DAY.isoformat()


def book(api, headers, staff_id=1, start="10:00:00", service_id=1, phone="600111222"):
    return api.post(
        "/appointments",
        json={"service_id": service_id, "staff_id": staff_id, "date": DAY, "time": start, "client_phone": phone},
        headers=headers,
    )


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


def test_login_rejects_bad_password(api):
    response = api.post("/auth/login", data={"username": "andres@cliente.com", "password": "wrong-pass"})
    assert response.status_code == 401


def test_requests_without_token_are_rejected(api):
    assert api.get("/me").status_code == 401
    assert api.get("/me", headers={"Authorization": "Bearer not-a-token"}).status_code == 401


def test_signup_and_me(api):
    response = api.post("/users", json={"name": "Nuevo", "email": "nuevo@cliente.com", "password": "secret-pass"})
    assert response.status_code == 201
    assert response.json()["role"] == "client"
    assert "password_hash" not in response.json()

    again = api.post("/users", json={"name": "Nuevo", "email": "nuevo@cliente.com", "password": "secret-pass"})
    assert again.status_code == 409

    headers = login(api, "nuevo@cliente.com", "secret-pass")
    assert api.get("/me", headers=headers).json()["email"] == "nuevo@cliente.com"


def test_catalog(api):
    services = api.get("/services").json()
    assert [s["duration"] for s in services] == [30, 45, 30, 75]

    barbers = api.get("/barbers").json()
    assert [b["id"] for b in barbers] == [1, 2, 3]


def test_client_books_and_slot_disappears(api):
    headers = login(api, "andres@cliente.com")

    before = api.get("/barbers/1/availability", params={"date": DAY, "service_id": 2}).json()
    assert "10:00" in before["available_starts"]
    assert before["duration"] == 45

    response = book(api, headers, service_id=2)
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["status"] == "pending"
    assert body["client_id"] == 101
    assert body["client_name"] == "Andrés Cliente"
    assert body["service"]["duration"] == 45

    after = api.get("/barbers/1/availability", params={"date": DAY, "service_id": 2}).json()
    assert "10:00" not in after["available_starts"]
    assert "09:30" not in after["available_starts"]
    assert "10:45" in after["available_starts"]


def test_overlapping_booking_conflicts(api):
    headers = login(api, "andres@cliente.com")
    assert book(api, headers, staff_id=2, start="14:00:00").status_code == 201

    # a 45-minute shave at 13:30 would run into the 14:00 haircut
    response = book(api, headers, staff_id=2, start="13:30:00", service_id=2)
    assert response.status_code == 409


def test_booking_start_must_be_an_offered_slot(api):
    headers = login(api, "andres@cliente.com")
    assert book(api, headers, start="09:07:00").status_code == 422
    assert book(api, headers, start="10:15:00").status_code == 422

    # the end of an existing booking is offered, so it can be booked
    assert book(api, headers, start="10:00:00", service_id=2).status_code == 201
    after = book(api, headers, start="10:45:00")
    assert after.status_code == 201, after.text


def test_invalid_bookings(api):
    headers = login(api, "andres@cliente.com")
    assert book(api, headers, service_id=42).status_code == 422
    assert book(api, headers, staff_id=42).status_code == 422
    assert book(api, headers, start="17:45:00").status_code == 422
    assert book(api, headers, phone="").status_code == 422

    barber = login(api, "javier@barbastore.com")
    assert book(api, barber).status_code == 403


def test_availability_errors(api):
    assert api.get("/barbers/42/availability", params={"date": DAY, "service_id": 1}).status_code == 404
    assert api.get("/barbers/1/availability", params={"date": DAY, "service_id": 42}).status_code == 422


def test_barber_confirms_then_client_cancels(api):
    client = login(api, "andres@cliente.com")
    javier = login(api, "javier@barbastore.com")
    carlos = login(api, "carlos@barbastore.com")
    appt_id = book(api, client).json()["id"]

    assert api.put(f"/appointments/{appt_id}/status", json={"status": "confirmed"}, headers=carlos).status_code == 403
    assert api.put(f"/appointments/{appt_id}/status", json={"status": "confirmed"}, headers=client).status_code == 403

    confirmed = api.put(f"/appointments/{appt_id}/status", json={"status": "confirmed"}, headers=javier)
    assert confirmed.json()["status"] == "confirmed"

    back = api.put(f"/appointments/{appt_id}/status", json={"status": "pending"}, headers=javier)
    assert back.status_code == 409

    cancelled = api.put(f"/appointments/{appt_id}/status", json={"status": "cancelled"}, headers=client)
    assert cancelled.json()["status"] == "cancelled"

    # the cancelled slot is free again
    assert book(api, client).status_code == 201


def test_status_update_errors(api):
    admin = login(api, "admin@barbastore.com", "admin123")
    assert api.put("/appointments/apt-missing/status", json={"status": "confirmed"}, headers=admin).status_code == 404

    client = login(api, "andres@cliente.com")
    appt_id = book(api, client).json()["id"]
    response = api.put(f"/appointments/{appt_id}/status", json={"status": "booked"}, headers=admin)
    assert response.status_code == 422

    rejected = api.put(f"/appointments/{appt_id}/status", json={"status": "rejected"}, headers=admin)
    assert rejected.json()["status"] == "rejected"
    again = api.put(f"/appointments/{appt_id}/status", json={"status": "confirmed"}, headers=admin)
    assert again.status_code == 409


def test_listings(api):
    client = login(api, "andres@cliente.com")
    javier = login(api, "javier@barbastore.com")
    late = book(api, client, start="15:00:00").json()
    early = book(api, client, start="09:00:00").json()

    by_staff = api.get("/barbers/1/appointments", headers=client).json()
    assert [a["id"] for a in by_staff] == [early["id"], late["id"]]

    mine = api.get("/clients/101/appointments", headers=client).json()
    assert mine == by_staff
    assert api.get("/clients/101/appointments", headers=javier).status_code == 200

    api.post("/users", json={"name": "Otra", "email": "otra@cliente.com", "password": "secret-pass"})
    other = login(api, "otra@cliente.com", "secret-pass")
    assert api.get("/clients/101/appointments", headers=other).status_code == 403


def test_admin_manages_barbers(api):
    admin = login(api, "admin@barbastore.com", "admin123")
    client = login(api, "andres@cliente.com")
    payload = {
        "name": "Pedro 'El Rapido' Soto",
        "email": "pedro@barbastore.com",
        "password": "password123",
        "specialty": "Degradados",
    }

    assert api.post("/barbers", json=payload, headers=client).status_code == 403

    created = api.post("/barbers", json=payload, headers=admin)
    assert created.status_code == 201
    staff_id = created.json()["id"]
    assert staff_id in [b["id"] for b in api.get("/barbers").json()]
    assert api.post("/barbers", json=payload, headers=admin).status_code == 409

    # the new barber can sign in and manage their own agenda
    pedro = login(api, "pedro@barbastore.com")
    appt_id = book(api, client, staff_id=staff_id).json()["id"]
    confirmed = api.put(f"/appointments/{appt_id}/status", json={"status": "confirmed"}, headers=pedro)
    assert confirmed.json()["status"] == "confirmed"

    assert api.delete(f"/barbers/{staff_id}", headers=admin).status_code == 204
    assert api.delete(f"/barbers/{staff_id}", headers=admin).status_code == 404
    assert staff_id not in [b["id"] for b in api.get("/barbers").json()]
    # their appointments stay on record
    assert len(api.get(f"/barbers/{staff_id}/appointments", headers=client).json()) == 1
