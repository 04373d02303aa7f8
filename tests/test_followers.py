import pytest

from api.utils.exceptions import ConflictError, ValidationError
from api.v1.models.follower import Follower
from api.v1.services import follower_service


def edges(db):
    db.expire_all()
    return {(f.follower_id, f.followed_id) for f in db.query(Follower).all()}


def test_follow_creates_edge(client, db, make_user, auth_header):
    alice = make_user("alice")
    bob = make_user("bob")

    response = client.post(f"/api/v1/followers/follow/{bob.user_id}", headers=auth_header(alice))

    assert response.status_code == 201
    assert response.content == b""
    assert edges(db) == {(alice.user_id, bob.user_id)}


def test_follow_then_unfollow_restores_graph(client, db, make_user, auth_header):
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    db.add(Follower(follower_id=carol.user_id, followed_id=bob.user_id))
    db.commit()
    before = edges(db)

    client.post(f"/api/v1/followers/follow/{bob.user_id}", headers=auth_header(alice))
    response = client.delete(f"/api/v1/followers/unfollow/{bob.user_id}", headers=auth_header(alice))

    assert response.status_code == 204
    assert edges(db) == before


def test_self_follow_is_rejected(client, db, make_user, auth_header):
    alice = make_user("alice")
    response = client.post(f"/api/v1/followers/follow/{alice.user_id}", headers=auth_header(alice))
    assert response.status_code == 400
    assert edges(db) == set()


def test_self_follow_is_rejected_even_for_unknown_users(db):
    with pytest.raises(ValidationError):
        follower_service.follow_user(db, 999, 999)


def test_follow_unknown_user_is_not_found(client, make_user, auth_header):
    alice = make_user("alice")
    response = client.post("/api/v1/followers/follow/999", headers=auth_header(alice))
    assert response.status_code == 404


def test_duplicate_follow_conflicts(client, db, make_user, auth_header):
    alice = make_user("alice")
    bob = make_user("bob")
    client.post(f"/api/v1/followers/follow/{bob.user_id}", headers=auth_header(alice))

    response = client.post(f"/api/v1/followers/follow/{bob.user_id}", headers=auth_header(alice))

    assert response.status_code == 409
    assert edges(db) == {(alice.user_id, bob.user_id)}


def test_unfollow_without_edge_is_not_found(client, make_user, auth_header):
    alice = make_user("alice")
    bob = make_user("bob")
    response = client.delete(f"/api/v1/followers/unfollow/{bob.user_id}", headers=auth_header(alice))
    assert response.status_code == 404


def test_followers_and_followings_listing(client, db, make_user, auth_header):
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    db.add_all(
        [
            Follower(follower_id=carol.user_id, followed_id=alice.user_id),
            Follower(follower_id=bob.user_id, followed_id=alice.user_id),
            Follower(follower_id=alice.user_id, followed_id=carol.user_id),
        ]
    )
    db.commit()

    followers = client.get(
        f"/api/v1/followers/users/{alice.user_id}/followers", headers=auth_header(bob)
    ).json()
    followings = client.get(
        f"/api/v1/followers/users/{alice.user_id}/followings", headers=auth_header(bob)
    ).json()

    assert [f["nickname"] for f in followers["content"]] == ["bob", "carol"]
    assert followers["total_elements"] == 2
    assert followings["content"] == [{"user_id": carol.user_id, "nickname": "carol"}]


def test_followers_default_page_size_is_fifteen(client, db, make_user, auth_header):
    star = make_user("star")
    for i in range(17):
        fan = make_user(f"fan{i:02d}")
        db.add(Follower(follower_id=fan.user_id, followed_id=star.user_id))
    db.commit()

    first = client.get(
        f"/api/v1/followers/users/{star.user_id}/followers", headers=auth_header(star)
    ).json()
    second = client.get(
        f"/api/v1/followers/users/{star.user_id}/followers",
        params={"page": 1},
        headers=auth_header(star),
    ).json()

    assert first["size"] == 15
    assert len(first["content"]) == 15
    assert first["total_pages"] == 2
    assert [f["nickname"] for f in second["content"]] == ["fan15", "fan16"]


def test_negative_page_is_rejected(client, make_user, auth_header):
    alice = make_user("alice")
    response = client.get(
        f"/api/v1/followers/users/{alice.user_id}/followers",
        params={"page": -1},
        headers=auth_header(alice),
    )
    assert response.status_code == 422


def test_edge_stored_by_another_session_conflicts(db, session_factory, make_user, monkeypatch):
    alice = make_user("alice")
    bob = make_user("bob")
    other = session_factory()
    other.add(Follower(follower_id=alice.user_id, followed_id=bob.user_id))
    other.commit()
    other.close()
    # the existence check misses it, so the insert hits the primary key
    monkeypatch.setattr(follower_service, "find_edge", lambda *args: None)

    with pytest.raises(ConflictError):
        follower_service.follow_user(db, alice.user_id, bob.user_id)

    assert edges(db) == {(alice.user_id, bob.user_id)}
    carol = make_user("carol")
    follower_service.follow_user(db, carol.user_id, bob.user_id)
    assert len(edges(db)) == 2


def test_concurrent_duplicate_follow_is_conflict_over_http(client, session_factory, make_user, auth_header, monkeypatch):
    alice = make_user("alice")
    bob = make_user("bob")
    other = session_factory()
    other.add(Follower(follower_id=alice.user_id, followed_id=bob.user_id))
    other.commit()
    other.close()
    monkeypatch.setattr(follower_service, "find_edge", lambda *args: None)

    response = client.post(f"/api/v1/followers/follow/{bob.user_id}", headers=auth_header(alice))

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


def test_ids_outside_range(client, make_user, auth_header):
    alice = make_user("alice")
    headers = auth_header(alice)
    huge = 2**70

    assert client.post(f"/api/v1/followers/follow/{huge}", headers=headers).status_code == 404
    assert client.delete(f"/api/v1/followers/unfollow/{huge}", headers=headers).status_code == 404
    followers = client.get(f"/api/v1/followers/users/{huge}/followers", headers=headers)
    assert followers.status_code == 200
    assert followers.json()["content"] == []
    assert followers.json()["total_elements"] == 0
