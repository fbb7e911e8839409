"""Tests for profile endpoints, image upload and account deletion."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from urllib.parse import quote

from models import db
from models.article_interaction import ArticleInteraction
from models.comment import Comment, CommentLike
from models.user import User

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _upload(client, headers, data: bytes = PNG_BYTES, filename="avatar.png", mimetype="image/png"):
    return client.patch(
        "/api/users/profile/image",
        data={"image": (BytesIO(data), filename, mimetype)},
        headers=headers,
        content_type="multipart/form-data",
    )


def test_profile_requires_token(client):
    assert client.get("/api/users/profile").status_code == 401


def test_profile_returns_current_user(client, make_user, auth_headers):
    user_id = make_user("reader@example.com", username="reader")

    response = client.get("/api/users/profile", headers=auth_headers(user_id))

    assert response.status_code == 200
    user = response.get_json()["user"]
    assert user["id"] == user_id
    assert user["displayName"] == "reader"
    assert "passwordHash" not in user


def test_edit_profile_updates_display_name_and_comments(app, client, make_user, auth_headers):
    user_id = make_user("reader@example.com", username="reader")
    headers = auth_headers(user_id)
    client.post(
        f"/api/articles/{quote('news.example.com/a', safe='')}/comments",
        json={"text": "hello"},
        headers=headers,
    )

    response = client.patch(
        "/api/users/edit-profile", json={"displayName": "Reader Two"}, headers=headers
    )

    assert response.status_code == 200
    assert response.get_json()["user"]["displayName"] == "Reader Two"
    with app.app_context():
        assert Comment.query.one().author == "Reader Two"


def test_edit_profile_rejects_taken_name(client, make_user, auth_headers):
    make_user("first@example.com", username="taken")
    headers = auth_headers(make_user("second@example.com", username="second"))

    response = client.patch(
        "/api/users/edit-profile", json={"displayName": "Taken"}, headers=headers
    )

    assert response.status_code == 400
    assert response.get_json()["message"] == "Display name is already taken."


def test_auth_profile_update_requires_a_field(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    response = client.post("/api/auth/profile", json={"unknown": 1}, headers=headers)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Nothing to update."


def test_image_upload_stores_file(app, client, make_user, auth_headers, tmp_path):
    user_id = make_user()
    headers = auth_headers(user_id)

    response = _upload(client, headers)

    assert response.status_code == 200, response.get_json()
    image_url = response.get_json()["imageUrl"]
    assert image_url.startswith("/uploads/profile_images/")
    stored = tmp_path / "uploads" / image_url[len("/uploads/"):]
    assert stored.is_file()

    served = client.get(image_url)
    assert served.status_code == 200
    assert served.data == PNG_BYTES
    served.close()

    with app.app_context():
        assert db.session.get(User, user_id).photo_url == image_url


def test_image_upload_replaces_previous_file(client, make_user, auth_headers, tmp_path):
    headers = auth_headers(make_user())

    first = _upload(client, headers).get_json()["imageUrl"]
    second = _upload(client, headers, filename="new.jpg", mimetype="image/jpeg").get_json()["imageUrl"]

    uploads = tmp_path / "uploads"
    assert first != second
    assert not (uploads / first[len("/uploads/"):]).exists()
    assert (uploads / second[len("/uploads/"):]).is_file()


def test_image_upload_rejects_non_images(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    wrong_type = _upload(client, headers, b"hello", "notes.txt", "text/plain")
    wrong_ext = _upload(client, headers, PNG_BYTES, "avatar.bmp", "image/bmp")

    assert wrong_type.status_code == 400
    assert wrong_type.get_json()["message"] == "Only image files are allowed."
    assert wrong_ext.status_code == 400


def test_image_upload_enforces_size_limit(app, client, make_user, auth_headers):
    app.config["MAX_IMAGE_SIZE"] = 16
    headers = auth_headers(make_user())

    response = _upload(client, headers)

    assert response.status_code == 400
    assert "maximum upload size" in response.get_json()["message"]


def test_image_upload_requires_file(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    response = client.patch(
        "/api/users/profile/image",
        data={},
        headers=headers,
        content_type="multipart/form-data",
    )

    assert response.status_code == 400


def test_delete_account_removes_activity(app, client, make_user, auth_headers):
    leaving_id = make_user("leaving@example.com", username="leaving")
    staying_id = make_user("staying@example.com", username="staying")
    leaving = auth_headers(leaving_id)
    staying = auth_headers(staying_id)
    article = quote("news.example.com/a", safe="")

    own = client.post(f"/api/articles/{article}/comments", json={"text": "mine"}, headers=leaving)
    theirs = client.post(f"/api/articles/{article}/comments", json={"text": "theirs"}, headers=staying)
    own_id = own.get_json()["id"]
    theirs_id = theirs.get_json()["id"]
    client.post(f"/api/comments/{own_id}/replies", json={"text": "reply"}, headers=staying)
    client.post(f"/api/comments/{theirs_id}/replies", json={"text": "reply"}, headers=leaving)
    client.post(f"/api/comments/{theirs_id}/like", headers=leaving)
    client.post(f"/api/articles/{article}/like", json={"isLiked": True}, headers=leaving)

    response = client.delete("/api/auth/account", headers=leaving)

    assert response.status_code == 200
    with app.app_context():
        assert db.session.get(User, leaving_id) is None
        assert [c.id for c in Comment.query.all()] == [theirs_id]
        survivor = db.session.get(Comment, theirs_id)
        assert survivor.like_count == 0
        assert survivor.reply_count == 0
        assert CommentLike.query.count() == 0
        assert ArticleInteraction.query.count() == 0

    after = client.get("/api/users/profile", headers=leaving)
    assert after.status_code == 401
