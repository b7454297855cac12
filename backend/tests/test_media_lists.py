def _headers(client, email="fay@example.com", username="fay"):
    response = client.post(
        "/api/v1/users/register",
        json={"username": username, "email": email, "password": "secret123"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _media(media_id, media_type="movie"):
    return {
        "media_id": media_id,
        "media_title": f"Title {media_id}",
        "poster_path": f"/posters/{media_id}.jpg",
        "media_type": media_type,
    }


def test_watchlist_add_check_and_remove(client, outbox):
    headers = _headers(client)

    added = client.post("/api/v1/watchlist", json=_media("550"), headers=headers)
    assert added.status_code == 201
    assert added.json()["data"]["media_id"] == "550"

    duplicate = client.post("/api/v1/watchlist", json=_media("550"), headers=headers)
    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == "Movie already in watchlist"

    assert client.get("/api/v1/watchlist/550", headers=headers).json()["in_watchlist"] is True
    assert client.get("/api/v1/watchlist/count", headers=headers).json()["count"] == 1

    removed = client.delete("/api/v1/watchlist/550", headers=headers)
    assert removed.status_code == 200
    assert client.get("/api/v1/watchlist/550", headers=headers).json()["in_watchlist"] is False

    missing = client.delete("/api/v1/watchlist/550", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Media not found in watchlist"


def test_watchlist_pagination(client, outbox):
    headers = _headers(client)
    for index in range(5):
        client.post("/api/v1/watchlist", json=_media(str(index), "tv"), headers=headers)

    page = client.get("/api/v1/watchlist", params={"page": 2, "limit": 2}, headers=headers)
    assert page.status_code == 200
    body = page.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {"current": 2, "total": 3, "total_items": 5}

    last = client.get("/api/v1/watchlist", params={"page": 3, "limit": 2}, headers=headers).json()
    assert len(last["data"]) == 1


def test_watchlist_rejects_unknown_media_type(client, outbox):
    headers = _headers(client)
    response = client.post("/api/v1/watchlist", json=_media("1", "podcast"), headers=headers)
    assert response.status_code == 422
    assert response.json()["kind"] == "validation"


def test_watchlists_are_per_user(client, outbox):
    first = _headers(client)
    second = _headers(client, email="gus@example.com", username="gus")
    client.post("/api/v1/watchlist", json=_media("550"), headers=first)

    assert client.get("/api/v1/watchlist/550", headers=second).json()["in_watchlist"] is False
    assert client.post("/api/v1/watchlist", json=_media("550"), headers=second).status_code == 201


def test_like_and_unlike_movie(client, outbox):
    headers = _headers(client)

    liked = client.post("/api/v1/liked-movies", json={"movie_id": "603"}, headers=headers)
    assert liked.status_code == 200
    assert liked.json()["is_liked"] is True
    assert [like["movie_id"] for like in liked.json()["likes"]] == ["603"]

    again = client.post("/api/v1/liked-movies", json={"movie_id": "603"}, headers=headers)
    assert again.status_code == 400
    assert again.json()["message"] == "Movie already in liked list"

    assert client.get("/api/v1/liked-movies/603", headers=headers).json()["is_liked"] is True

    unliked = client.delete("/api/v1/liked-movies/603", headers=headers)
    assert unliked.status_code == 200
    assert unliked.json()["likes"] == []

    missing = client.delete("/api/v1/liked-movies/603", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Movie not found in liked list"


def test_liked_movies_list(client, outbox):
    headers = _headers(client)
    client.post("/api/v1/liked-movies", json={"movie_id": "1"}, headers=headers)
    client.post("/api/v1/liked-movies", json={"movie_id": "2"}, headers=headers)

    response = client.get("/api/v1/liked-movies", headers=headers)
    assert response.status_code == 200
    assert sorted(like["movie_id"] for like in response.json()) == ["1", "2"]


def test_media_routes_require_authentication(client):
    assert client.get("/api/v1/watchlist").status_code == 401
    assert client.get("/api/v1/liked-movies").status_code == 401
    assert client.get("/api/v1/view-history/weekly").status_code == 401
