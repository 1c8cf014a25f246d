import pytest


@pytest.mark.integration
class TestComments:
    def test_post_and_list_newest_first(self, client, make_place):
        place = make_place()
        first = client.post("/api/comments", json={"place_id": place["id"], "content": "Nice", "rating": 4})
        second = client.post("/api/comments", json={"place_id": place["id"], "content": "Great", "rating": 5})

        assert first.status_code == 201
        listing = client.get(f"/api/comments?place_id={place['id']}").get_json()
        assert [c["id"] for c in listing] == [second.get_json()["id"], first.get_json()["id"]]
        assert listing[0]["content"] == "Great"
        assert listing[0]["username"] is None

    def test_authenticated_comment_awards_points(self, client, user_headers, make_place, points):
        place = make_place()
        response = client.post(
            "/api/comments",
            json={"place_id": place["id"], "content": "Lovely view", "rating": 5},
            headers=user_headers,
        )

        assert response.get_json()["username"] == "alice"
        assert points(user_headers) == 10

    def test_anonymous_comment_awards_nothing(self, client, user_headers, make_place, points):
        place = make_place()
        client.post("/api/comments", json={"place_id": place["id"], "content": "Ok", "rating": 3})

        assert points(user_headers) == 0

    def test_failed_award_rolls_back_comment(self, app, client, user_headers, make_place, monkeypatch):
        from maplas.services import rewards

        place = make_place()

        def broken_award(db, user_id, amount):
            raise RuntimeError("award failed")

        monkeypatch.setattr(rewards, "award_points", broken_award)
        app.config["PROPAGATE_EXCEPTIONS"] = False
        response = client.post(
            "/api/comments",
            json={"place_id": place["id"], "content": "Lovely", "rating": 5},
            headers=user_headers,
        )

        assert response.status_code == 500
        assert client.get(f"/api/comments?place_id={place['id']}").get_json() == []

    def test_unknown_place(self, client):
        response = client.post("/api/comments", json={"place_id": 999, "content": "Hmm", "rating": 3})

        assert response.status_code == 404

    @pytest.mark.parametrize(
        "payload",
        [
            {"content": "x", "rating": 0},
            {"content": "x", "rating": 6},
            {"content": "x", "rating": "five"},
            {"content": "x", "rating": 4.5},
            {"content": "x"},
            {"content": "   ", "rating": 3},
            {"rating": 3},
        ],
    )
    def test_invalid_comment(self, client, make_place, payload):
        place = make_place()
        payload = dict(payload, place_id=place["id"])
        response = client.post("/api/comments", json=payload)

        assert response.status_code == 400
        assert client.get(f"/api/comments?place_id={place['id']}").get_json() == []

    def test_listing_requires_place_id(self, client):
        assert client.get("/api/comments").status_code == 400

    def test_comments_follow_place_deletion(self, client, admin_headers, make_place):
        place = make_place()
        client.post("/api/comments", json={"place_id": place["id"], "content": "Bye", "rating": 2})
        client.post("/api/admin?action=reject", json={"id": place["id"]}, headers=admin_headers)

        assert client.get(f"/api/comments?place_id={place['id']}").get_json() == []


@pytest.mark.integration
class TestFavorites:
    def test_add_twice_keeps_one(self, app, client, user_headers, make_place):
        place = make_place()
        first = client.post("/api/favorites", json={"place_id": place["id"]}, headers=user_headers)
        second = client.post("/api/favorites", json={"place_id": place["id"]}, headers=user_headers)

        assert first.status_code == 201
        assert first.get_json()["added"] is True
        assert second.status_code == 201
        assert second.get_json()["added"] is False
        favorites = client.get("/api/favorites", headers=user_headers).get_json()
        assert [p["id"] for p in favorites] == [place["id"]]

    def test_remove_missing_favorite(self, client, user_headers):
        response = client.delete("/api/favorites?place_id=123", headers=user_headers)

        assert response.status_code == 200
        assert response.get_json()["removed"] is False

    def test_remove_favorite(self, client, user_headers, make_place):
        place = make_place()
        client.post("/api/favorites", json={"place_id": place["id"]}, headers=user_headers)
        response = client.delete(f"/api/favorites?place_id={place['id']}", headers=user_headers)

        assert response.get_json()["removed"] is True
        assert client.get("/api/favorites", headers=user_headers).get_json() == []

    def test_list_includes_pending_places(self, client, user_headers, make_place):
        place = make_place()
        client.post("/api/favorites", json={"place_id": place["id"]}, headers=user_headers)

        favorites = client.get("/api/favorites", headers=user_headers).get_json()
        assert favorites[0]["status"] == "pending"
        assert favorites[0]["is_favorite"] is True

    def test_favorites_are_per_user(self, client, login_headers, make_place):
        alice = login_headers("alice")
        bob = login_headers("bob")
        place = make_place()
        client.post("/api/favorites", json={"place_id": place["id"]}, headers=alice)

        assert client.get("/api/favorites", headers=bob).get_json() == []

    def test_unknown_place(self, client, user_headers):
        response = client.post("/api/favorites", json={"place_id": 999}, headers=user_headers)

        assert response.status_code == 404

    def test_requires_login(self, client):
        assert client.get("/api/favorites").status_code == 401
        assert client.post("/api/favorites", json={"place_id": 1}).status_code == 401
        assert client.delete("/api/favorites?place_id=1").status_code == 401

    def test_bad_place_id(self, client, user_headers):
        assert client.delete("/api/favorites?place_id=abc", headers=user_headers).status_code == 400
