import pytest

from spotbnb.models import Review, SpotImage


def test_list_spots_empty(client):
    r = client.get("/spots")
    assert r.status_code == 200, r.text
    assert r.json() == {"Spots": []}


def test_create_spot_returns_created_spot(client, register, create_spot):
    owner_id, headers = register("owner")
    body = create_spot(headers)

    assert body["ownerId"] == owner_id
    assert body["name"] == "App Academy"
    assert body["price"] == 123
    assert body["lat"] == pytest.approx(37.7645358)
    assert "createdAt" in body and "updatedAt" in body


def test_create_spot_requires_auth(client, spot_payload):
    r = client.post("/spots", json=spot_payload)
    assert r.status_code == 401


def test_create_spot_validation_messages(client, register):
    _, headers = register("owner")
    r = client.post("/spots", json={"name": "x" * 51, "lat": "north", "price": 0}, headers=headers)
    assert r.status_code == 400, r.text
    body = r.json()
    assert body["message"] == "Bad Request"
    assert body["statusCode"] == 400
    assert body["errors"] == {
        "address": "Street address is required",
        "city": "City is required",
        "state": "State is required",
        "country": "Country is required",
        "lat": "Latitude is not valid",
        "lng": "Longitude is not valid",
        "name": "Name must be less than 50 characters",
        "description": "Description is required",
        "price": "Price per day is required and cannot be zero",
    }


@pytest.mark.parametrize("price, ok", [(0, False), (-3, False), (1.5, False), ("abc", False), (1, True), ("7", True)])
def test_create_spot_price_rule(client, register, spot_payload, price, ok):
    _, headers = register("owner")
    r = client.post("/spots", json={**spot_payload, "price": price}, headers=headers)
    if ok:
        assert r.status_code == 201, r.text
        assert r.json()["price"] == int(price)
    else:
        assert r.status_code == 400
        assert r.json()["errors"] == {"price": "Price per day is required and cannot be zero"}


def test_create_spot_accepts_decimal_strings_for_coordinates(client, register, spot_payload):
    _, headers = register("owner")
    r = client.post("/spots", json={**spot_payload, "lat": "12.5", "lng": "-45.25"}, headers=headers)
    assert r.status_code == 201, r.text
    assert r.json()["lat"] == 12.5
    assert r.json()["lng"] == -45.25


def test_list_spots_with_rating_and_preview(client, db, register, create_spot):
    owner_id, owner = register("owner")
    spot = create_spot(owner)
    bare = create_spot(owner, name="No reviews yet")

    r = client.post(f"/spots/{spot['id']}/images", json={"url": "https://img/1.jpg", "preview": True}, headers=owner)
    assert r.status_code == 201, r.text

    u1, _ = register("guestone")
    u2, _ = register("guesttwo")
    db.add_all(
        [
            Review(user_id=u1, spot_id=spot["id"], review="ok", stars=3),
            Review(user_id=u2, spot_id=spot["id"], review="great", stars=5),
        ]
    )
    db.commit()

    body = client.get("/spots").json()
    by_id = {s["id"]: s for s in body["Spots"]}
    assert [s["id"] for s in body["Spots"]] == [spot["id"], bare["id"]]

    assert by_id[spot["id"]]["avgRating"] == 4.0
    assert by_id[spot["id"]]["previewImage"] == "https://img/1.jpg"

    # No reviews and no preview are explicit nulls, never 0 or NaN.
    assert by_id[bare["id"]]["avgRating"] is None
    assert by_id[bare["id"]]["previewImage"] is None


def test_current_spots_matches_owner_filter_of_all_spots(client, register, create_spot):
    a_id, a = register("alice")
    _, b = register("bobby")
    create_spot(a, name="A1")
    create_spot(b, name="B1")
    create_spot(a, name="A2")

    all_spots = client.get("/spots").json()["Spots"]
    mine = client.get("/spots/current", headers=a).json()["Spots"]

    assert mine == [s for s in all_spots if s["ownerId"] == a_id]
    assert [s["name"] for s in mine] == ["A1", "A2"]


def test_spot_detail(client, db, register, create_spot):
    owner_id, owner = register("owner", first_name="Olive", last_name="Owner")
    spot = create_spot(owner)
    client.post(f"/spots/{spot['id']}/images", json={"url": "https://img/a.jpg", "preview": True}, headers=owner)
    client.post(f"/spots/{spot['id']}/images", json={"url": "https://img/b.jpg"}, headers=owner)

    u1, _ = register("guestone")
    u2, _ = register("guesttwo")
    db.add_all(
        [
            Review(user_id=u1, spot_id=spot["id"], review="meh", stars=3),
            Review(user_id=u2, spot_id=spot["id"], review="wow", stars=5),
        ]
    )
    db.commit()

    r = client.get(f"/spots/{spot['id']}")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["numReviews"] == 2
    assert body["avgStarRating"] == 4.0
    assert body["Owner"] == {"id": owner_id, "firstName": "Olive", "lastName": "Owner"}
    assert [(i["url"], i["preview"]) for i in body["SpotImages"]] == [
        ("https://img/a.jpg", True),
        ("https://img/b.jpg", False),
    ]


def test_spot_detail_without_reviews(client, register, create_spot):
    _, owner = register("owner")
    spot = create_spot(owner)
    body = client.get(f"/spots/{spot['id']}").json()
    assert body["numReviews"] == 0
    assert body["avgStarRating"] is None
    assert body["SpotImages"] == []


def test_spot_detail_not_found(client):
    r = client.get("/spots/999")
    assert r.status_code == 404
    assert r.json() == {"message": "Spot couldn't be found", "statusCode": 404}


def test_update_spot_partial(client, register, create_spot):
    _, owner = register("owner")
    spot = create_spot(owner)

    r = client.put(f"/spots/{spot['id']}", json={"name": "Renamed", "price": 200, "city": None}, headers=owner)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["name"] == "Renamed"
    assert body["price"] == 200
    assert body["city"] == spot["city"]
    assert body["address"] == spot["address"]


def test_update_spot_empty_body_leaves_spot_unchanged(client, register, create_spot):
    _, owner = register("owner")
    spot = create_spot(owner)

    r = client.put(f"/spots/{spot['id']}", json={}, headers=owner)
    assert r.status_code == 200, r.text
    assert r.json() == spot


def test_update_spot_rejects_invalid_present_values(client, register, create_spot):
    _, owner = register("owner")
    spot = create_spot(owner)

    r = client.put(f"/spots/{spot['id']}", json={"price": 0, "address": ""}, headers=owner)
    assert r.status_code == 400
    assert r.json()["errors"] == {
        "address": "Street address is required",
        "price": "Price per day is required and cannot be zero",
    }


def test_update_spot_of_other_user_is_not_found(client, register, create_spot):
    _, owner = register("owner")
    _, other = register("intruder")
    spot = create_spot(owner)

    r = client.put(f"/spots/{spot['id']}", json={"name": "Mine now"}, headers=other)
    assert r.status_code == 404
    assert r.json()["message"] == "Spot couldn't be found"

    r2 = client.put("/spots/999", json={"name": "Nope"}, headers=owner)
    assert r2.status_code == 404


def test_delete_spot(client, register, create_spot):
    _, owner = register("owner")
    _, other = register("intruder")
    spot = create_spot(owner)

    assert client.delete(f"/spots/{spot['id']}", headers=other).status_code == 404

    r = client.delete(f"/spots/{spot['id']}", headers=owner)
    assert r.status_code == 200
    assert r.json() == {"message": "Successfully deleted", "statusCode": 200}
    assert client.get(f"/spots/{spot['id']}").status_code == 404


def test_add_image_requires_ownership(client, register, create_spot):
    _, owner = register("owner")
    _, other = register("intruder")
    spot = create_spot(owner)

    r = client.post(f"/spots/{spot['id']}/images", json={"url": "https://img/x.jpg", "preview": True}, headers=other)
    assert r.status_code == 404
    assert r.json()["message"] == "Spot couldn't be found"

    r2 = client.post("/spots/999/images", json={"url": "https://img/x.jpg"}, headers=owner)
    assert r2.status_code == 404


def test_new_preview_image_replaces_previous_preview(client, db, register, create_spot):
    _, owner = register("owner")
    spot = create_spot(owner)

    first = client.post(f"/spots/{spot['id']}/images", json={"url": "https://img/1.jpg", "preview": True}, headers=owner)
    second = client.post(f"/spots/{spot['id']}/images", json={"url": "https://img/2.jpg", "preview": True}, headers=owner)
    assert first.status_code == second.status_code == 201

    previews = db.query(SpotImage).filter(SpotImage.spot_id == spot["id"], SpotImage.preview.is_(True)).all()
    assert [p.url for p in previews] == ["https://img/2.jpg"]

    listed = client.get("/spots").json()["Spots"][0]
    assert listed["previewImage"] == "https://img/2.jpg"


@pytest.mark.parametrize("spot_id", ["abc", "0", "-1", "1.5", str(2**63), str(10**20)])
def test_spot_ids_that_cannot_exist_are_not_found(client, register, spot_id):
    _, owner = register("owner")
    expected = {"message": "Spot couldn't be found", "statusCode": 404}

    assert client.get(f"/spots/{spot_id}").json() == expected
    assert client.get(f"/spots/{spot_id}/reviews").status_code == 404
    r = client.put(f"/spots/{spot_id}", json={"name": "x"}, headers=owner)
    assert r.status_code == 404
    assert r.json() == expected
    r2 = client.post(f"/spots/{spot_id}/images", json={"url": "https://img/x.jpg"}, headers=owner)
    assert r2.status_code == 404


@pytest.mark.parametrize("price", [2**31, 10**20])
def test_create_spot_price_too_large(client, register, spot_payload, price):
    _, headers = register("owner")
    r = client.post("/spots", json={**spot_payload, "price": price}, headers=headers)
    assert r.status_code == 400
    assert r.json()["errors"] == {"price": "Price per day is required and cannot be zero"}


def test_update_spot_price_too_large(client, register, create_spot):
    _, owner = register("owner")
    spot = create_spot(owner)
    r = client.put(f"/spots/{spot['id']}", json={"price": 10**20}, headers=owner)
    assert r.status_code == 400
    assert client.get(f"/spots/{spot['id']}").json()["price"] == spot["price"]


@pytest.mark.parametrize("url", ["", "   ", None])
def test_blank_image_url_is_rejected(client, register, create_spot, url):
    _, owner = register("owner")
    spot = create_spot(owner)

    r = client.post(f"/spots/{spot['id']}/images", json={"url": url, "preview": True}, headers=owner)
    assert r.status_code == 400
    assert r.json()["errors"] == {"url": "Image url is required"}
    assert client.get("/spots").json()["Spots"][0]["previewImage"] is None
