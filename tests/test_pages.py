from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

from sqlalchemy.exc import OperationalError

from majestic_haven.models import Booking, BookingStatus


def booking_form(check_in="2024-06-01", check_out="2024-06-03", **overrides):
    data = {
        "guest_name": "Alice Smith",
        "guest_email": "alice@example.com",
        "guest_phone": "555-0101",
        "check_in_date": check_in,
        "check_out_date": check_out,
        "number_of_guests": "1",
    }
    data.update(overrides)
    return data


def test_home_lists_featured_rooms(client, make_room):
    for i, price in enumerate(["90", "120", "150", "400"]):
        make_room(name=f"Room {i}", price=Decimal(price))

    r = client.get("/")
    assert r.status_code == 200
    assert r.text.count('class="room-card') == 3
    assert "Room 3" not in r.text
    assert 'action="/rooms"' in r.text


def test_room_list_with_filters(client, make_room, make_booking):
    busy = make_room(name="Busy Suite", capacity=4)
    make_room(name="Quiet Double", capacity=2, price=Decimal("140"))
    make_booking(busy, date(2024, 6, 1), date(2024, 6, 5))

    r = client.get("/rooms", params={"check_in": "2024-06-02", "check_out": "2024-06-03", "guests": "2", "max_price": ""})
    assert r.status_code == 200
    assert "Quiet Double" in r.text
    assert "Busy Suite" not in r.text
    assert "Found 1 available rooms" in r.text
    assert "Active Filters" in r.text

    r = client.get("/rooms", params={"check_in": "2024-06-02", "check_out": "2024-06-03", "guests": "6"})
    assert "No rooms available with the selected criteria" in r.text


def test_room_list_invalid_dates(client, make_room):
    make_room(name="Any Room")
    r = client.get("/rooms", params={"check_in": "junk", "check_out": "2024-06-03"})
    assert r.status_code == 200
    assert "Error checking availability" in r.text
    assert "Any Room" in r.text

    r = client.get("/rooms", params={"check_in": "2024-06-05", "check_out": "2024-06-03"})
    assert "Check-out date must be after check-in date" in r.text


def test_room_detail(client, make_room):
    room = make_room(name="Harbour Deluxe", amenities=["Harbour view", "Rain shower", "Minibar"])
    r = client.get(f"/rooms/{room.id}")
    assert r.status_code == 200
    text = r.text
    assert text.index("Harbour view") < text.index("Rain shower") < text.index("Minibar")
    assert f'action="/booking/{room.id}"' in text

    assert client.get("/rooms/does-not-exist").status_code == 404


def test_booking_form_prefills_and_previews_total(client, make_room):
    room = make_room(price=Decimal("100.00"), capacity=3)
    r = client.get(f"/booking/{room.id}", params={"check_in": "2024-06-01", "check_out": "2024-06-04", "guests": "2"})
    assert r.status_code == 200
    assert 'value="2024-06-01"' in r.text
    assert "$300.00" in r.text
    assert '<option value="2" selected>' in r.text


def test_booking_form_unknown_room_redirects(client):
    r = client.get("/booking/missing", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/rooms"
    assert "Failed to load room details" in client.get("/rooms").text


def test_submit_booking_and_view_confirmation(client, db, make_room):
    room = make_room(name="Harbour Deluxe", price=Decimal("100.00"))

    with mock.patch("majestic_haven.routers.bookings_views.send_booking_confirmation") as send:
        r = client.post(f"/booking/{room.id}", data=booking_form(), follow_redirects=False)
    assert r.status_code == 303
    booking = db.query(Booking).one()
    assert r.headers["location"] == f"/booking/confirmation/{booking.id}"
    assert booking.total_price == Decimal("200.00")
    send.assert_called_once()
    assert send.call_args.args[1] == "alice@example.com"

    page = client.get(r.headers["location"])
    assert page.status_code == 200
    assert "Booking created successfully!" in page.text
    assert booking.reference in page.text
    assert "$200.00" in page.text
    assert "Jun 01, 2024" in page.text


def test_submit_overlapping_booking_shows_error(client, make_room, make_booking):
    room = make_room()
    make_booking(room, date(2024, 6, 1), date(2024, 6, 3))

    r = client.post(f"/booking/{room.id}", data=booking_form(), follow_redirects=False)
    assert r.status_code == 409
    assert "Room is not available for the selected dates" in r.text
    assert 'value="Alice Smith"' in r.text


def test_submit_booking_with_bad_dates(client, make_room):
    room = make_room()
    r = client.post(f"/booking/{room.id}", data=booking_form(check_in="2024-06-03", check_out="2024-06-01"))
    assert r.status_code == 400
    assert "Check-out date must be after check-in date" in r.text


def test_confirmation_for_unknown_booking(client):
    r = client.get("/booking/confirmation/unknown")
    assert r.status_code == 404
    assert "Booking not found" in r.text


def test_manage_and_cancel_bookings(client, db, make_room, make_booking):
    room = make_room()
    future = date.today() + timedelta(days=30)
    mine = make_booking(room, future, future + timedelta(days=2), guest_email="ada@example.com")
    make_booking(room, future + timedelta(days=5), future + timedelta(days=6), guest_email="bob@example.com")

    r = client.get("/bookings", params={"email": "ADA@example.com"})
    assert r.status_code == 200
    assert "Found 1 booking(s)" in r.text
    assert r.text.count('class="booking-card') == 1
    assert "Cancel Booking" in r.text

    r = client.post(f"/bookings/{mine.id}/cancel", data={"email": "ada@example.com"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/bookings?email=ada%40example.com"

    db.expire_all()
    assert db.get(Booking, mine.id).status == BookingStatus.CANCELED

    page = client.get(r.headers["location"])
    assert "Booking successfully canceled" in page.text
    assert "Canceled" in page.text
    assert "Cancel Booking" not in page.text

    r = client.get("/bookings", params={"email": "nobody@example.com"})
    assert "No bookings found for this email" in r.text


def test_manage_page_completes_past_stays(client, db, make_room, make_booking):
    booking = make_booking(make_room(), date(2024, 6, 1), date(2024, 6, 3))
    r = client.get("/bookings")
    assert r.status_code == 200
    assert "Completed" in r.text
    db.expire_all()
    assert db.get(Booking, booking.id).status == BookingStatus.COMPLETED


def test_unknown_path_renders_not_found_page(client):
    r = client.get("/no/such/page")
    assert r.status_code == 404
    assert "Page Not Found" in r.text

    r = client.get("/api/v1/no-such-endpoint")
    assert r.status_code == 404
    assert r.json() == {"detail": "Not Found"}


def db_down():
    return OperationalError("SELECT", {}, Exception("database is locked"))


def test_room_list_rejects_non_finite_price(client, make_room):
    make_room(name="Any Room")
    for value in ("nan", "inf", "-Infinity"):
        r = client.get("/rooms", params={"max_price": value})
        assert r.status_code == 200
        assert "Error checking availability" in r.text
        assert "Any Room" in r.text


def test_room_list_database_error_shows_notification(client, make_room):
    make_room(name="Any Room")
    with mock.patch("majestic_haven.services.room_service.search_rooms", side_effect=db_down()):
        r = client.get("/rooms", params={"check_in": "2024-06-02", "check_out": "2024-06-03"})
    assert r.status_code == 200
    assert "Failed to load rooms" in r.text
    assert "Any Room" not in r.text


def test_submit_booking_database_error_keeps_form(client, db, make_room):
    room = make_room()
    with mock.patch("majestic_haven.services.booking_service.check_availability", side_effect=db_down()):
        r = client.post(f"/booking/{room.id}", data=booking_form(), follow_redirects=False)
    assert r.status_code == 500
    assert "Failed to create booking. Please try again." in r.text
    assert 'value="Alice Smith"' in r.text
    assert db.query(Booking).count() == 0

    with mock.patch("majestic_haven.routers.bookings_views.send_booking_confirmation"):
        r = client.post(f"/booking/{room.id}", data=booking_form(), follow_redirects=False)
    assert r.status_code == 303


def test_submit_booking_validates_email_and_guest_count(client, db, make_room):
    room = make_room()

    r = client.post(f"/booking/{room.id}", data=booking_form(guest_email="not-an-email"))
    assert r.status_code == 400
    assert "Please enter a valid email address" in r.text

    r = client.post(f"/booking/{room.id}", data=booking_form(number_of_guests="two"))
    assert r.status_code == 400
    assert "Please choose a valid number of guests" in r.text

    assert db.query(Booking).count() == 0
