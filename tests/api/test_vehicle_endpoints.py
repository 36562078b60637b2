# This file tests vehicle endpoints end to end through the in-memory store.
# It exists to validate round trips, search, pagination metadata, and tenant isolation.
# The tests also confirm that deleting a vehicle removes its maintenance records.
# Every cross-tenant access is expected to look exactly like a missing row.

from __future__ import annotations

from tests.api.support import api_test_client, auth_headers, create_vehicle, register_user


def test_register_login_create_and_page_past_single_vehicle() -> None:
    with api_test_client() as client:
        register_user(client, "a@x.com")
        login = client.post("/api/auth/login", json={"email": "a@x.com", "password": "Passw0rd"})
        headers = {"Authorization": f"Bearer {login.json()['data']['token']}"}

        created = client.post("/api/vehicles", json={"name": "Civic"}, headers=headers)
        listing = client.get("/api/vehicles?limit=1&page=2", headers=headers)

    assert created.status_code == 201
    assert created.json()["data"]["id"] > 0
    assert listing.status_code == 200
    payload = listing.json()
    assert payload["data"] == []
    assert payload["pagination"] == {
        "currentPage": 2,
        "totalPages": 1,
        "totalItems": 1,
        "limit": 1,
    }


def test_create_then_fetch_returns_same_fields() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "owner@x.com")
        created = create_vehicle(client, headers, name="  Corolla  ", license_plate="ABC-123")
        fetched = client.get(f"/api/vehicles/{created['id']}", headers=headers)

    assert fetched.status_code == 200
    data = fetched.json()["data"]
    assert data["name"] == "Corolla"
    assert data["license_plate"] == "ABC-123"
    assert data["id"] == created["id"]
    assert data["user_id"] == created["user_id"]
    assert data["created_at"]


def test_blank_license_plate_is_stored_as_null() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "plate@x.com")
        created = create_vehicle(client, headers, name="Golf", license_plate="   ")

    assert created["license_plate"] is None


def test_invalid_vehicle_body_lists_every_violation() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "bad@x.com")
        response = client.post(
            "/api/vehicles",
            json={"name": "x" * 101, "license_plate": "P" * 21},
            headers=headers,
        )
        listing = client.get("/api/vehicles", headers=headers)

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"name", "license_plate"}
    assert listing.json()["pagination"]["totalItems"] == 0


def test_list_orders_newest_first() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "order@x.com")
        first = create_vehicle(client, headers, name="First")
        second = create_vehicle(client, headers, name="Second")
        listing = client.get("/api/vehicles", headers=headers)

    ids = [item["id"] for item in listing.json()["data"]]
    assert ids == [second["id"], first["id"]]


def test_search_filters_by_name_or_plate_case_insensitively() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "search@x.com")
        create_vehicle(client, headers, name="Honda Civic", license_plate="AAA-111")
        create_vehicle(client, headers, name="Ford Focus", license_plate="CIV-999")
        create_vehicle(client, headers, name="Tesla Model 3")

        by_term = client.get("/api/vehicles?search=civ", headers=headers)
        empty_term = client.get("/api/vehicles?search=", headers=headers)
        no_match = client.get("/api/vehicles?search=zzz", headers=headers)

    assert {item["name"] for item in by_term.json()["data"]} == {"Honda Civic", "Ford Focus"}
    assert empty_term.json()["pagination"]["totalItems"] == 3
    assert no_match.json()["data"] == []
    assert no_match.json()["pagination"]["totalItems"] == 0
    assert no_match.json()["pagination"]["totalPages"] == 0


def test_search_treats_wildcards_literally() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "wild@x.com")
        create_vehicle(client, headers, name="Plain")
        create_vehicle(client, headers, name="100% Electric")
        response = client.get("/api/vehicles", params={"search": "%"}, headers=headers)

    assert [item["name"] for item in response.json()["data"]] == ["100% Electric"]


def test_pages_cover_all_vehicles_without_gaps_or_duplicates() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "pages@x.com")
        created_ids = {create_vehicle(client, headers, name=f"Car {index}")["id"] for index in range(7)}

        seen: list[int] = []
        first = client.get("/api/vehicles?limit=3&page=1", headers=headers).json()
        total_pages = first["pagination"]["totalPages"]
        for page in range(1, total_pages + 1):
            payload = client.get(f"/api/vehicles?limit=3&page={page}", headers=headers).json()
            seen.extend(item["id"] for item in payload["data"])

    assert total_pages == 3
    assert len(seen) == 7
    assert set(seen) == created_ids


def test_invalid_pagination_params_return_400() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "params@x.com")
        bad_page = client.get("/api/vehicles?page=0", headers=headers)
        bad_limit = client.get("/api/vehicles?limit=101", headers=headers)
        not_a_number = client.get("/api/vehicles?page=abc", headers=headers)

    assert bad_page.status_code == 400
    assert bad_page.json()["errors"] == [
        {"field": "page", "message": "Page must be a positive integer", "location": "query"}
    ]
    assert bad_limit.status_code == 400
    assert bad_limit.json()["errors"][0]["field"] == "limit"
    assert not_a_number.status_code == 400
    assert not_a_number.json()["errors"][0]["field"] == "page"


def test_update_replaces_mutable_fields() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "upd@x.com")
        created = create_vehicle(client, headers, name="Old", license_plate="OLD-1")
        response = client.patch(
            f"/api/vehicles/{created['id']}",
            json={"name": "New"},
            headers=headers,
        )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "New"
    assert data["license_plate"] is None


def test_other_users_vehicle_is_not_found() -> None:
    with api_test_client() as client:
        owner = auth_headers(client, "owner@x.com")
        intruder = auth_headers(client, "intruder@x.com")
        vehicle = create_vehicle(client, owner)

        read = client.get(f"/api/vehicles/{vehicle['id']}", headers=intruder)
        update = client.patch(f"/api/vehicles/{vehicle['id']}", json={"name": "Mine"}, headers=intruder)
        delete = client.delete(f"/api/vehicles/{vehicle['id']}", headers=intruder)
        missing = client.get("/api/vehicles/9999", headers=intruder)
        intruder_list = client.get("/api/vehicles", headers=intruder)
        still_there = client.get(f"/api/vehicles/{vehicle['id']}", headers=owner)

    for response in (read, update, delete):
        assert response.status_code == 404
        assert response.json()["message"] == missing.json()["message"]
    assert missing.json() == {
        "status": "error",
        "message": "Vehicle not found or you do not have permission to access it",
    }
    assert intruder_list.json()["data"] == []
    assert still_there.json()["data"]["name"] == "Civic"


def test_delete_vehicle_cascades_to_records() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "cascade@x.com")
        vehicle = create_vehicle(client, headers)
        oil = client.post(
            f"/api/vehicles/{vehicle['id']}/oil-changes",
            json={"change_date": "2024-01-15", "mileage": 1000},
            headers=headers,
        ).json()["data"]
        fuel = client.post(
            f"/api/vehicles/{vehicle['id']}/fuel-records",
            json={"fill_date": "2024-01-16", "price_per_liter": 1.5, "liters_filled": 40},
            headers=headers,
        ).json()["data"]

        deleted = client.delete(f"/api/vehicles/{vehicle['id']}", headers=headers)
        vehicle_after = client.get(f"/api/vehicles/{vehicle['id']}", headers=headers)
        oil_after = client.get(f"/api/oil-changes/{oil['id']}", headers=headers)
        fuel_after = client.get(f"/api/fuel-records/{fuel['id']}", headers=headers)

    assert deleted.status_code == 200
    assert deleted.json() == {"status": "success", "data": {"message": "Vehicle deleted successfully"}}
    assert vehicle_after.status_code == 404
    assert oil_after.status_code == 404
    assert fuel_after.status_code == 404


def test_non_positive_vehicle_id_is_a_validation_error() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "ids@x.com")
        response = client.get("/api/vehicles/0", headers=headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "vehicle_id"


def test_vehicle_id_beyond_integer_range_is_a_validation_error() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "bigid@x.com")
        response = client.get("/api/vehicles/9999999999", headers=headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "vehicle_id"


def test_huge_page_number_returns_empty_page() -> None:
    with api_test_client() as client:
        headers = auth_headers(client, "farpage@x.com")
        create_vehicle(client, headers, name="Only")
        response = client.get("/api/vehicles?page=9223372036854775807", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"] == []
    assert response.json()["pagination"]["totalItems"] == 1
    assert response.json()["pagination"]["currentPage"] == 9223372036854775807
