from datetime import datetime


def test_booking_adds_client_with_no_visits(client, admin_headers, barber, make_booking):
    make_booking()

    response = client.get(f"/api/barbers/{barber.id}/clients", headers=admin_headers)

    assert response.status_code == 200
    clients = response.json()
    assert len(clients) == 1
    assert clients[0]["phone"] == "0888123456"
    assert clients[0]["total_visits"] == 0
    assert clients[0]["last_visit"] is None


def test_repeat_booking_does_not_duplicate_client(client, admin_headers, barber, make_booking):
    make_booking(when=datetime(2025, 6, 1, 10, 0))
    make_booking(when=datetime(2025, 6, 2, 10, 0))

    response = client.get(f"/api/barbers/{barber.id}/clients", headers=admin_headers)

    assert len(response.json()) == 1


def test_clients_most_recent_visit_first(client, admin_headers, barber, make_booking):
    make_booking(when=datetime(2025, 6, 1, 9, 0), phone="0899 000 001", name="Never Came")
    visited = make_booking(when=datetime(2025, 6, 1, 10, 0), phone="0899 000 002", name="Regular")
    client.patch(f"/api/owner/bookings/{visited.id}/status", json={"status": "completed"}, headers=admin_headers)

    response = client.get(f"/api/barbers/{barber.id}/clients", headers=admin_headers)

    assert [c["name"] for c in response.json()] == ["Regular", "Never Came"]


def test_create_client_201(client, admin_headers, barber):
    response = client.post(f"/api/barbers/{barber.id}/clients", headers=admin_headers,
                           json={"name": "Walk-in", "phone": "0899 111 222", "notes": "Likes short sides"})

    assert response.status_code == 201
    assert response.json()["phone"] == "0899111222"
    assert response.json()["total_visits"] == 0


def test_create_client_duplicate_phone_409(client, admin_headers, barber):
    client.post(f"/api/barbers/{barber.id}/clients", headers=admin_headers,
                json={"name": "Walk-in", "phone": "0899111222"})

    response = client.post(f"/api/barbers/{barber.id}/clients", headers=admin_headers,
                           json={"name": "Walk-in again", "phone": "0899 111 222"})

    assert response.status_code == 409


def test_create_client_unknown_barber_404(client, admin_headers):
    response = client.post("/api/barbers/999/clients", headers=admin_headers,
                           json={"name": "Walk-in", "phone": "0899111222"})

    assert response.status_code == 404


def test_clients_require_admin(client, barber):
    response = client.get(f"/api/barbers/{barber.id}/clients")

    assert response.status_code == 401
