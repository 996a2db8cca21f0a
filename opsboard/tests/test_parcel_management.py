"""
Parcel API tests: CRUD, owner isolation and carrier refresh over HTTP.
"""

import pytest


async def _create_parcel(client, headers, **fields):
    payload = {"tracking_number": "EE001040482TH", "destination": "Germany", "recipient_name": "Anna"}
    payload.update(fields)
    response = await client.post("/v1/parcels", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.asyncio
async def test_create_then_list_has_empty_tracking_fields(client, owner):
    headers, user_id = owner

    response = await client.post("/v1/parcels", json={"tracking_number": "EE001040482TH"}, headers=headers)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["id"] is not None

    response = await client.get("/v1/parcels", headers=headers)
    assert response.status_code == 200
    parcels = response.json()
    assert len(parcels) == 1
    parcel = parcels[0]
    assert parcel["tracking_number"] == "EE001040482TH"
    assert parcel["user_id"] == user_id
    assert parcel["current_status"] is None
    assert parcel["last_updated"] is None
    assert parcel["is_delivered"] is False


@pytest.mark.asyncio
async def test_tracking_number_is_trimmed_and_required(client, owner):
    headers, _ = owner

    response = await client.post("/v1/parcels", json={"tracking_number": "   "}, headers=headers)
    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"

    parcel_id = await _create_parcel(client, headers, tracking_number="  RR123456789TH ")
    response = await client.get(f"/v1/parcels/{parcel_id}", headers=headers)
    assert response.json()["tracking_number"] == "RR123456789TH"


@pytest.mark.asyncio
async def test_update_rejects_blank_tracking_number(client, owner):
    headers, _ = owner
    parcel_id = await _create_parcel(client, headers)

    response = await client.patch(f"/v1/parcels/{parcel_id}", json={"tracking_number": "   "}, headers=headers)
    assert response.status_code == 422

    response = await client.patch(
        f"/v1/parcels/{parcel_id}", json={"tracking_number": " RR123456789TH "}, headers=headers
    )
    assert response.status_code == 200

    parcel = (await client.get(f"/v1/parcels/{parcel_id}", headers=headers)).json()
    assert parcel["tracking_number"] == "RR123456789TH"


@pytest.mark.asyncio
async def test_list_is_newest_first(client, owner):
    headers, _ = owner
    first = await _create_parcel(client, headers, tracking_number="EE000000001TH")
    second = await _create_parcel(client, headers, tracking_number="EE000000002TH")

    response = await client.get("/v1/parcels", headers=headers)
    assert [p["id"] for p in response.json()] == [second, first]


@pytest.mark.asyncio
async def test_get_missing_parcel_returns_null(client, owner):
    headers, _ = owner
    response = await client.get("/v1/parcels/999", headers=headers)
    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_update_only_touches_given_fields(client, owner):
    headers, _ = owner
    parcel_id = await _create_parcel(client, headers)

    response = await client.patch(f"/v1/parcels/{parcel_id}", json={"note": "fragile"}, headers=headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "id": parcel_id}

    parcel = (await client.get(f"/v1/parcels/{parcel_id}", headers=headers)).json()
    assert parcel["note"] == "fragile"
    assert parcel["destination"] == "Germany"
    assert parcel["recipient_name"] == "Anna"


@pytest.mark.asyncio
async def test_update_and_delete_missing_parcel_is_404(client, owner):
    headers, _ = owner

    response = await client.patch("/v1/parcels/999", json={"note": "x"}, headers=headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"

    response = await client.delete("/v1/parcels/999", headers=headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_removes_parcel(client, owner):
    headers, _ = owner
    parcel_id = await _create_parcel(client, headers)

    response = await client.delete(f"/v1/parcels/{parcel_id}", headers=headers)
    assert response.status_code == 200

    response = await client.get("/v1/parcels", headers=headers)
    assert response.json() == []


@pytest.mark.asyncio
async def test_owners_cannot_see_or_change_each_others_parcels(client, owner, other_owner):
    headers, _ = owner
    other_headers, _ = other_owner
    parcel_id = await _create_parcel(client, headers)

    assert (await client.get("/v1/parcels", headers=other_headers)).json() == []
    assert (await client.get(f"/v1/parcels/{parcel_id}", headers=other_headers)).json() is None

    response = await client.patch(f"/v1/parcels/{parcel_id}", json={"note": "mine now"}, headers=other_headers)
    assert response.status_code == 404
    response = await client.delete(f"/v1/parcels/{parcel_id}", headers=other_headers)
    assert response.status_code == 404
    response = await client.post(f"/v1/parcels/{parcel_id}/refresh-status", headers=other_headers)
    assert response.status_code == 404

    parcel = (await client.get(f"/v1/parcels/{parcel_id}", headers=headers)).json()
    assert parcel["note"] is None


@pytest.mark.asyncio
async def test_parcels_require_authentication(client):
    response = await client.get("/v1/parcels")
    assert response.status_code in (401, 403)

    response = await client.get("/v1/parcels", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_status_updates_parcel(client, owner, carrier_api, make_event):
    headers, _ = owner
    parcel_id = await _create_parcel(client, headers)
    carrier_api.items["EE001040482TH"] = [
        make_event(status="103", description="Hand over to carrier"),
        make_event(status="501", description="Delivered to recipient", location="Berlin",
                   date="20/07/2562 09:30:00+07:00", delivery_status="S"),
    ]

    response = await client.post(f"/v1/parcels/{parcel_id}/refresh-status", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["updated"] is True
    assert [e["status"] for e in body["tracking_items"]] == ["103", "501"]

    parcel = (await client.get(f"/v1/parcels/{parcel_id}", headers=headers)).json()
    assert parcel["current_status"] == "501"
    assert parcel["current_location"] == "Berlin"
    assert parcel["delivery_status"] == "S"
    assert parcel["is_delivered"] is True
    assert parcel["last_updated"].startswith("2019-07-20T09:30:00")


@pytest.mark.asyncio
async def test_refresh_with_no_events_succeeds_without_changes(client, owner, carrier_api):
    headers, _ = owner
    parcel_id = await _create_parcel(client, headers)

    response = await client.post(f"/v1/parcels/{parcel_id}/refresh-status", headers=headers)

    assert response.status_code == 200
    assert response.json()["updated"] is False
    assert response.json()["tracking_items"] == []


@pytest.mark.asyncio
async def test_refresh_missing_parcel_is_404_without_carrier_call(client, owner, carrier_api):
    headers, _ = owner
    response = await client.post("/v1/parcels/999/refresh-status", headers=headers)
    assert response.status_code == 404
    assert carrier_api.requests == []


@pytest.mark.asyncio
async def test_refresh_carrier_failure_is_502(client, owner, carrier_api):
    headers, _ = owner
    parcel_id = await _create_parcel(client, headers)
    carrier_api.status_code = 503
    carrier_api.body = b"Service Unavailable"

    response = await client.post(f"/v1/parcels/{parcel_id}/refresh-status", headers=headers)

    assert response.status_code == 502
    body = response.json()
    assert body["error_code"] == "ERR_CARRIER_001"
    assert body["details"]["kind"] == "http_status"

    parcel = (await client.get(f"/v1/parcels/{parcel_id}", headers=headers)).json()
    assert parcel["current_status"] is None


@pytest.mark.asyncio
async def test_tracking_history_returns_all_events(client, owner, carrier_api, make_event):
    headers, _ = owner
    carrier_api.items["RR123456789TH"] = [
        make_event(barcode="RR123456789TH", status="103"),
        make_event(barcode="RR123456789TH", status="201"),
    ]

    response = await client.get(
        "/v1/parcels/tracking-history",
        params={"tracking_number": "RR123456789TH"},
        headers=headers,
    )

    assert response.status_code == 200
    assert [e["status"] for e in response.json()] == ["103", "201"]
    assert carrier_api.last_request_json["barcode"] == ["RR123456789TH"]


@pytest.mark.asyncio
async def test_tracking_history_uses_saved_carrier_token(client, owner, carrier_api):
    headers, _ = owner
    await client.put("/v1/settings", json={"carrier_api_token": "my-own-token"}, headers=headers)

    await client.get(
        "/v1/parcels/tracking-history",
        params={"tracking_number": "EE001040482TH"},
        headers=headers,
    )

    assert carrier_api.requests[-1].headers["Authorization"] == "Token my-own-token"
