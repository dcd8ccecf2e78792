"""
End-to-end tests for the HTTP surface, backed by in-memory SQLite.
"""

from datetime import timedelta

import pytest

from conftest import registration_payload

PASSENGER = "/api/v1/passenger"
ADMIN = "/api/v1/admin/passenger"


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _login(client, email="alice@example.com", password="secret123"):
    return client.post(f"{PASSENGER}/login", json={"email": email, "password": password})


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "message": "E-Season Backend is running"}

    def test_unknown_route_uses_envelope(self, client):
        response = client.get("/nowhere")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert "message" in body


class TestRegistration:
    def test_register_returns_token(self, client, token_module):
        response = client.post(f"{PASSENGER}/register", json=registration_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Passenger registered successfully"
        assert "error" not in body
        data = body["data"]
        assert data["passenger_id"] > 0
        assert "verify your phone number" in data["message"]
        assert token_module.validate(data["token"]).passenger_id == data["passenger_id"]

    def test_duplicate_email_conflict(self, client, auth_headers):
        _, headers = auth_headers

        response = client.post(f"{PASSENGER}/register", json=registration_payload())

        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "Email already registered"}
        listing = client.get(f"{ADMIN}/all", headers=headers).json()["data"]
        assert listing["total_count"] == 1

    def test_trailing_slash_redirects_instead_of_401(self, client):
        response = client.post(
            f"{PASSENGER}/register/", json=registration_payload(), follow_redirects=False
        )

        assert response.status_code == 307
        assert response.headers["location"].endswith(f"{PASSENGER}/register")

    def test_password_mismatch(self, client):
        response = client.post(
            f"{PASSENGER}/register",
            json=registration_payload(confirm_password="secret124"),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Passwords do not match"

    @pytest.mark.parametrize("travel_date", ["2025/03/15", "2025-02-30", "soon"])
    def test_invalid_travel_date(self, client, travel_date):
        response = client.post(
            f"{PASSENGER}/register", json=registration_payload(travel_date=travel_date)
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid travel date format. Use YYYY-MM-DD"

    @pytest.mark.parametrize(
        "overrides",
        [{"email": "not-an-email"}, {"password": "short", "confirm_password": "short"}],
    )
    def test_invalid_body_is_400(self, client, overrides):
        response = client.post(f"{PASSENGER}/register", json=registration_payload(**overrides))
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Invalid request data"
        assert body["error"]

    def test_missing_field_is_400(self, client):
        payload = registration_payload()
        del payload["full_name"]
        response = client.post(f"{PASSENGER}/register", json=payload)
        assert response.status_code == 400


class TestLogin:
    def test_login_success(self, client, register, token_module):
        registered = register()

        response = _login(client)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        data = body["data"]
        assert token_module.validate(data["token"]).passenger_id == registered["passenger_id"]
        passenger = data["passenger"]
        assert passenger["email"] == "alice@example.com"
        assert passenger["travel_date"] == "2025-03-15"
        assert passenger["phone_verification_status"] == "Unverified"
        assert passenger["admin_verification_status"] == "Unverified"
        assert "password" not in passenger

    def test_wrong_password_and_unknown_email_identical(self, client, register):
        register()

        wrong = _login(client, password="wrong-password")
        unknown = _login(client, email="ghost@example.com")

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {
            "success": False,
            "message": "Invalid email or password",
        }


class TestAuthentication:
    def test_missing_header(self, client):
        response = client.get(f"{PASSENGER}/profile/1")
        assert response.status_code == 401
        assert response.json()["message"] == "Authorization header required"

    def test_invalid_token(self, client):
        response = client.get(f"{PASSENGER}/profile/1", headers=_bearer("garbage"))
        assert response.status_code == 401
        body = response.json()
        assert body["message"] == "Invalid token"
        assert body["error"]

    def test_expired_token(self, client, register, token_module):
        data = register()
        expired = token_module.issue(
            data["passenger_id"], "alice@example.com", expires_delta=timedelta(seconds=-5)
        )

        response = client.get(f"{PASSENGER}/profile", headers=_bearer(expired))

        assert response.status_code == 401
        assert response.json()["error"] == "Token has expired"

    def test_token_without_bearer_prefix(self, client, register):
        data = register()
        response = client.get(f"{PASSENGER}/profile", headers={"Authorization": data["token"]})
        assert response.status_code == 200

    def test_admin_requires_auth(self, client):
        assert client.get(f"{ADMIN}/all").status_code == 401

    def test_public_paths_need_no_token(self, client):
        assert _login(client).status_code == 401
        assert _login(client).json()["message"] == "Invalid email or password"


class TestProfile:
    def test_own_profile(self, client, auth_headers):
        passenger_id, headers = auth_headers

        response = client.get(f"{PASSENGER}/profile", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile retrieved successfully"
        assert body["data"]["passenger_id"] == passenger_id
        assert "password" not in body["data"]

    def test_profile_by_id(self, client, auth_headers):
        passenger_id, headers = auth_headers
        response = client.get(f"{PASSENGER}/profile/{passenger_id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["full_name"] == "Alice Bandara Perera"

    @pytest.mark.parametrize(
        "raw_id,message",
        [
            ("abc", "Invalid passenger ID format. Must be a valid number"),
            ("0", "Passenger ID must be a positive number"),
            ("-4", "Passenger ID must be a positive number"),
        ],
    )
    def test_bad_id(self, client, auth_headers, raw_id, message):
        _, headers = auth_headers
        response = client.get(f"{PASSENGER}/profile/{raw_id}", headers=headers)
        assert response.status_code == 400
        assert response.json()["message"] == message

    def test_missing_passenger(self, client, auth_headers):
        _, headers = auth_headers
        response = client.get(f"{PASSENGER}/profile/999", headers=headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Passenger not found with the provided ID"

    @pytest.mark.parametrize("raw_id", ["2147483648", "99999999999999999999"])
    def test_id_beyond_key_range_not_found(self, client, auth_headers, raw_id):
        _, headers = auth_headers

        fetched = client.get(f"{PASSENGER}/profile/{raw_id}", headers=headers)
        verified = client.post(
            f"{PASSENGER}/verify-phone/{raw_id}",
            json={"phone_number": "0771234567", "otp": "123456"},
            headers=headers,
        )

        assert fetched.status_code == 404
        assert verified.status_code == 404

    def test_update_profile(self, client, auth_headers):
        passenger_id, headers = auth_headers
        update = registration_payload(
            email="mallory@example.com",
            full_name="Alice B. Perera-Silva",
            to_station="Galle",
            travel_date="2025-04-01",
        )

        response = client.put(f"{PASSENGER}/profile/{passenger_id}", json=update, headers=headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Profile updated successfully"}
        profile = client.get(f"{PASSENGER}/profile", headers=headers).json()["data"]
        assert profile["full_name"] == "Alice B. Perera-Silva"
        assert profile["to_station"] == "Galle"
        assert profile["travel_date"] == "2025-04-01"
        assert profile["email"] == "alice@example.com"

    def test_update_profile_bad_date_changes_nothing(self, client, auth_headers):
        passenger_id, headers = auth_headers
        update = registration_payload(full_name="Changed", travel_date="01-04-2025")

        response = client.put(f"{PASSENGER}/profile/{passenger_id}", json=update, headers=headers)

        assert response.status_code == 400
        profile = client.get(f"{PASSENGER}/profile", headers=headers).json()["data"]
        assert profile["full_name"] == "Alice Bandara Perera"

    def test_update_missing_passenger(self, client, auth_headers):
        _, headers = auth_headers
        response = client.put(
            f"{PASSENGER}/profile/999", json=registration_payload(), headers=headers
        )
        assert response.status_code == 404


class TestVerifyPhone:
    def test_verify_phone(self, client, auth_headers):
        passenger_id, headers = auth_headers

        response = client.post(
            f"{PASSENGER}/verify-phone/{passenger_id}",
            json={"phone_number": "0771234567", "otp": "123456"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Phone verified successfully"
        profile = client.get(f"{PASSENGER}/profile", headers=headers).json()["data"]
        assert profile["phone_verification_status"] == "Verified"
        assert profile["admin_verification_status"] == "Unverified"

    def test_verify_phone_missing_passenger(self, client, auth_headers):
        _, headers = auth_headers
        response = client.post(
            f"{PASSENGER}/verify-phone/999",
            json={"phone_number": "0771234567", "otp": "123456"},
            headers=headers,
        )
        assert response.status_code == 404


class TestChangePassword:
    def _change(self, client, headers, current="secret123", new="newpass99", confirm=None):
        return client.post(
            f"{PASSENGER}/change-password",
            json={
                "current_password": current,
                "new_password": new,
                "confirm_password": confirm if confirm is not None else new,
            },
            headers=headers,
        )

    def test_mismatch(self, client, auth_headers):
        _, headers = auth_headers
        response = self._change(client, headers, confirm="newpass98")
        assert response.status_code == 400
        assert response.json()["message"] == "New passwords do not match"

    def test_wrong_current_password_keeps_old(self, client, auth_headers):
        _, headers = auth_headers

        response = self._change(client, headers, current="not-my-password")

        assert response.status_code == 401
        assert response.json()["message"] == "Current password is incorrect"
        assert _login(client).status_code == 200
        assert _login(client, password="newpass99").status_code == 401

    def test_success(self, client, auth_headers):
        _, headers = auth_headers

        response = self._change(client, headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Password changed successfully"
        assert _login(client).status_code == 401
        assert _login(client, password="newpass99").status_code == 200


class TestAdminListing:
    @pytest.fixture
    def headers(self, register):
        tokens = [register(f"user{i}@example.com")["token"] for i in range(3)]
        return _bearer(tokens[0])

    def test_list_newest_first(self, client, headers):
        response = client.get(f"{ADMIN}/all", headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total_count"] == 3
        assert data["current_page"] == 1
        assert data["limit"] == 10
        assert data["total_pages"] == 1
        ids = [p["passenger_id"] for p in data["passengers"]]
        assert ids == sorted(ids, reverse=True)
        assert all("password" not in p for p in data["passengers"])

    def test_pagination(self, client, headers):
        data = client.get(f"{ADMIN}/all?page=2&limit=2", headers=headers).json()["data"]
        assert data["total_pages"] == 2
        assert len(data["passengers"]) == 1

    @pytest.mark.parametrize(
        "query,page,limit",
        [
            ("limit=0", 1, 10),
            ("limit=1000", 1, 10),
            ("page=-3", 1, 10),
            ("page=abc&limit=xyz", 1, 10),
            ("limit=100", 1, 100),
            ("page=99999999999999999999", 1_000_000, 10),
            ("page=99999999999999999999&limit=100", 1_000_000, 100),
        ],
    )
    def test_out_of_range_values_clamped(self, client, headers, query, page, limit):
        response = client.get(f"{ADMIN}/all?{query}", headers=headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert (data["current_page"], data["limit"]) == (page, limit)

    def test_page_far_past_the_end_is_empty(self, client, headers):
        response = client.get(f"{ADMIN}/all?page=99999999999999999999", headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["passengers"] == []
        assert data["total_count"] == 3

    def test_get_single_passenger(self, client, headers):
        first = client.get(f"{ADMIN}/all", headers=headers).json()["data"]["passengers"][0]
        response = client.get(f"{ADMIN}/{first['passenger_id']}", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["email"] == first["email"]


class TestAdminSearch:
    @pytest.fixture
    def headers(self, client, register):
        first = register("alice@example.com", from_station="Colombo Fort")
        register("bob@sample.org", from_station="Galle", phone_number="0719999999")
        client.post(
            f"{PASSENGER}/verify-phone/{first['passenger_id']}",
            json={"phone_number": "0771234567", "otp": "000000"},
            headers=_bearer(first["token"]),
        )
        return _bearer(first["token"])

    def test_requires_a_parameter(self, client, headers):
        response = client.get(f"{ADMIN}/search", headers=headers)
        assert response.status_code == 400
        assert response.json()["message"] == "At least one search parameter is required"

    def test_email_substring(self, client, headers):
        response = client.get(f"{ADMIN}/search?email=sample", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Passengers search completed"
        data = body["data"]
        assert data["total_count"] == 1
        assert data["passengers"][0]["email"] == "bob@sample.org"
        assert data["search_criteria"]["email"] == "sample"

    def test_station_and_phone_filters_combine(self, client, headers):
        data = client.get(
            f"{ADMIN}/search?from_station=Galle&phone_number=0719", headers=headers
        ).json()["data"]
        assert [p["email"] for p in data["passengers"]] == ["bob@sample.org"]

        data = client.get(
            f"{ADMIN}/search?from_station=Galle&phone_number=0771", headers=headers
        ).json()["data"]
        assert data["total_count"] == 0

    def test_phone_verified_status(self, client, headers):
        data = client.get(
            f"{ADMIN}/search?verification_status=phone_verified", headers=headers
        ).json()["data"]
        assert [p["email"] for p in data["passengers"]] == ["alice@example.com"]

    def test_admin_verified_status(self, client, headers):
        data = client.get(
            f"{ADMIN}/search?verification_status=admin_verified", headers=headers
        ).json()["data"]
        assert data["total_count"] == 0

    def test_wildcards_match_literally(self, client, headers):
        data = client.get(f"{ADMIN}/search?email=%25", headers=headers).json()["data"]
        assert data["total_count"] == 0

    def test_huge_page_clamped(self, client, headers):
        response = client.get(
            f"{ADMIN}/search?email=a&page=99999999999999999999", headers=headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["current_page"] == 1_000_000

    def test_limit_bound_is_lower_than_listing(self, client, headers):
        data = client.get(f"{ADMIN}/search?email=a&limit=80", headers=headers).json()["data"]
        assert data["limit"] == 10


class TestAdminMultiple:
    def test_partition(self, client, auth_headers):
        passenger_id, headers = auth_headers

        response = client.post(
            f"{ADMIN}/multiple", json={"passenger_ids": [passenger_id, 999]}, headers=headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Passengers data retrieved"
        data = body["data"]
        assert [p["passenger_id"] for p in data["passengers"]] == [passenger_id]
        assert data["not_found_ids"] == [999]
        assert data["total_found"] == 1
        assert data["total_requested"] == 2

    def test_ids_beyond_key_range_not_found(self, client, auth_headers):
        passenger_id, headers = auth_headers
        huge = 99999999999999999999

        response = client.post(
            f"{ADMIN}/multiple", json={"passenger_ids": [passenger_id, huge]}, headers=headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["not_found_ids"] == [huge]
        assert data["total_found"] == 1

    def test_all_found_lists_empty_not_found(self, client, auth_headers):
        passenger_id, headers = auth_headers
        data = client.post(
            f"{ADMIN}/multiple", json={"passenger_ids": [passenger_id]}, headers=headers
        ).json()["data"]
        assert data["not_found_ids"] == []

    @pytest.mark.parametrize(
        "ids", [[], [0], [1, -2], list(range(1, 52)), [True], ["1"], [1.5]]
    )
    def test_invalid_id_lists(self, client, auth_headers, ids):
        _, headers = auth_headers
        response = client.post(f"{ADMIN}/multiple", json={"passenger_ids": ids}, headers=headers)
        assert response.status_code == 400
        assert response.json()["success"] is False
