import pytest

from api.v1.models.follower import Follower
from api.v1.models.like import QuizLike
from api.utils.pagination import MAX_PAGE, MAX_PAGE_SIZE
from api.v1.models.user import User, Role


def reload_user(db, user):
    db.expire_all()
    return db.query(User).filter(User.user_id == user.user_id).one()


def test_get_user_profile(client, db, make_user, make_quiz, auth_header):
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    quiz = make_quiz(bob, "Capitals")
    make_quiz(bob, "Hidden one", is_visible=False)
    db.add_all(
        [
            Follower(follower_id=alice.user_id, followed_id=bob.user_id),
            Follower(follower_id=carol.user_id, followed_id=bob.user_id),
            Follower(follower_id=bob.user_id, followed_id=carol.user_id),
            QuizLike(user_id=bob.user_id, quiz_id=quiz.quiz_id),
        ]
    )
    db.commit()

    response = client.get(f"/api/v1/users/{bob.user_id}/profile", headers=auth_header(alice))

    assert response.status_code == 200
    assert response.json() == {
        "user_id": bob.user_id,
        "nickname": "bob",
        "email": "bob@quizz.io",
        "followers_count": 2,
        "following_count": 1,
        "created_quizzes_count": 1,
        "liked_quizzes_count": 1,
        "is_following": True,
    }


def test_profile_is_following_is_relative_to_caller(client, make_user, auth_header):
    alice = make_user("alice")
    bob = make_user("bob")
    response = client.get(f"/api/v1/users/{bob.user_id}/profile", headers=auth_header(alice))
    assert response.json()["is_following"] is False


def test_profile_of_unknown_user_is_not_found(client, make_user, auth_header):
    alice = make_user("alice")
    response = client.get("/api/v1/users/999/profile", headers=auth_header(alice))
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_filtered_users_is_case_insensitive_and_paginated(client, make_user, auth_header):
    caller = make_user("zed")
    for name in ["Alice", "malicia", "ALIX", "bob"]:
        make_user(name)

    response = client.get(
        "/api/v1/users", params={"nickname": "ali", "size": 2}, headers=auth_header(caller)
    )
    body = response.json()

    assert response.status_code == 200
    assert body["total_elements"] == 3
    assert body["total_pages"] == 2
    assert [u["nickname"] for u in body["content"]] == ["ALIX", "Alice"]

    second = client.get(
        "/api/v1/users",
        params={"nickname": "ali", "size": 2, "page": 1},
        headers=auth_header(caller),
    ).json()
    assert [u["nickname"] for u in second["content"]] == ["malicia"]


@pytest.mark.parametrize("original_role", [Role.user, Role.admin])
def test_ban_then_unban_restores_role(client, db, make_user, auth_header, original_role):
    chief = make_user("boss", role=Role.chief)
    target = make_user("target", role=original_role)

    response = client.put(f"/api/v1/users/{target.user_id}/ban", headers=auth_header(chief))
    assert response.status_code == 200
    banned = reload_user(db, target)
    assert banned.is_banned is True
    assert banned.role == Role.user

    response = client.put(f"/api/v1/users/{target.user_id}/unban", headers=auth_header(chief))
    assert response.status_code == 200
    restored = reload_user(db, target)
    assert restored.is_banned is False
    assert restored.role == original_role
    assert restored.role_before_ban is None


def test_admin_may_ban(client, make_user, auth_header):
    admin = make_user("mod", role=Role.admin)
    target = make_user("target")
    response = client.put(f"/api/v1/users/{target.user_id}/ban", headers=auth_header(admin))
    assert response.status_code == 200
    assert response.json() == {"message": "User banned successfully"}


def test_plain_user_may_not_ban(client, make_user, auth_header):
    user = make_user("someone")
    target = make_user("target")
    response = client.put(f"/api/v1/users/{target.user_id}/ban", headers=auth_header(user))
    assert response.status_code == 403


def test_chief_cannot_be_banned(client, make_user, auth_header):
    admin = make_user("mod", role=Role.admin)
    chief = make_user("boss", role=Role.chief)
    response = client.put(f"/api/v1/users/{chief.user_id}/ban", headers=auth_header(admin))
    assert response.status_code == 400


def test_ban_twice_and_unban_unbanned_conflict(client, make_user, auth_header):
    admin = make_user("mod", role=Role.admin)
    target = make_user("target")

    client.put(f"/api/v1/users/{target.user_id}/ban", headers=auth_header(admin))
    again = client.put(f"/api/v1/users/{target.user_id}/ban", headers=auth_header(admin))
    assert again.status_code == 409

    other = make_user("other")
    response = client.put(f"/api/v1/users/{other.user_id}/unban", headers=auth_header(admin))
    assert response.status_code == 409


def test_ban_unknown_user_is_not_found(client, make_user, auth_header):
    admin = make_user("mod", role=Role.admin)
    response = client.put("/api/v1/users/999/ban", headers=auth_header(admin))
    assert response.status_code == 404


def test_role_ladder(client, db, make_user, auth_header):
    chief = make_user("boss", role=Role.chief)
    target = make_user("target")
    headers = auth_header(chief)

    assert client.put(f"/api/v1/users/{target.user_id}/promote-to-admin", headers=headers).status_code == 200
    assert reload_user(db, target).role == Role.admin

    assert client.put(f"/api/v1/users/{target.user_id}/demote-to-user", headers=headers).status_code == 200
    assert reload_user(db, target).role == Role.user

    client.put(f"/api/v1/users/{target.user_id}/promote-to-admin", headers=headers)
    assert client.put(f"/api/v1/users/{target.user_id}/promote-to-chief", headers=headers).status_code == 200
    assert reload_user(db, target).role == Role.chief


@pytest.mark.parametrize(
    "action, role",
    [
        ("promote-to-admin", Role.admin),
        ("promote-to-chief", Role.user),
        ("demote-to-user", Role.user),
        ("demote-to-user", Role.chief),
    ],
)
def test_role_transition_from_wrong_state_conflicts(client, db, make_user, auth_header, action, role):
    chief = make_user("boss", role=Role.chief)
    target = make_user("target", role=role)

    response = client.put(f"/api/v1/users/{target.user_id}/{action}", headers=auth_header(chief))

    assert response.status_code == 409
    assert reload_user(db, target).role == role


def test_admin_cannot_promote(client, make_user, auth_header):
    admin = make_user("mod", role=Role.admin)
    target = make_user("target")
    response = client.put(
        f"/api/v1/users/{target.user_id}/promote-to-admin", headers=auth_header(admin)
    )
    assert response.status_code == 403


def test_profile_id_outside_range_is_not_found(client, make_user, auth_header):
    alice = make_user("alice")
    response = client.get(f"/api/v1/users/{2**70}/profile", headers=auth_header(alice))
    assert response.status_code == 404


def test_ban_id_outside_range_is_not_found(client, make_user, auth_header):
    admin = make_user("mod", role=Role.admin)
    response = client.put(f"/api/v1/users/{2**70}/ban", headers=auth_header(admin))
    assert response.status_code == 404


def test_page_beyond_offset_range_is_rejected(client, make_user, auth_header):
    alice = make_user("alice")
    response = client.get("/api/v1/users", params={"page": 10**18}, headers=auth_header(alice))
    assert response.status_code == 422


def test_last_addressable_page_is_empty(client, make_user, auth_header):
    alice = make_user("alice")
    response = client.get(
        "/api/v1/users",
        params={"page": MAX_PAGE, "size": MAX_PAGE_SIZE},
        headers=auth_header(alice),
    )
    assert response.status_code == 200
    assert response.json()["content"] == []


def test_liked_count_ignores_hidden_quizzes(client, db, make_user, make_quiz, auth_header):
    alice = make_user("alice")
    shown = make_quiz(alice, "Shown")
    hidden = make_quiz(alice, "Hidden", is_visible=False)
    db.add_all(
        [
            QuizLike(user_id=alice.user_id, quiz_id=shown.quiz_id),
            QuizLike(user_id=alice.user_id, quiz_id=hidden.quiz_id),
        ]
    )
    db.commit()

    profile = client.get(f"/api/v1/users/{alice.user_id}/profile", headers=auth_header(alice)).json()

    assert profile["liked_quizzes_count"] == 1
    assert profile["created_quizzes_count"] == 1
