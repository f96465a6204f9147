import cloudinary.uploader
import pytest

from app.models.post import Post
from app.models.user import User


REGISTRATION = {
    "name": "Juan",
    "surname": "Perez",
    "email": "juan@example.com",
    "username": "juanp",
    "password": "Password1",
    "birthdate": "2000-01-15",
    "bio": "hello",
}


@pytest.fixture
def fake_cdn(monkeypatch):
    uploads = []

    def _upload(content, **options):
        uploads.append(options)
        return {"secure_url": "https://cdn.example.com/image.png", "public_id": "image"}

    monkeypatch.setattr(cloudinary.uploader, "upload", _upload)
    return uploads


class TestAuthEndpoints:
    def test_register_then_login(self, client):
        response = client.post("/auth/registro", data=REGISTRATION)
        assert response.status_code == 201
        body = response.json()
        assert body["user"]["username"] == "juanp"
        assert "password" not in body["user"]
        assert body["access_token"]

        response = client.post("/auth/login", json={"identifier": "juan@example.com", "password": "Password1"})
        assert response.status_code == 200
        assert response.json()["user"]["email"] == "juan@example.com"

    def test_register_with_profile_image(self, client, fake_cdn):
        response = client.post(
            "/auth/registro",
            data=REGISTRATION,
            files={"profile_image": ("me.png", b"\x89PNG", "image/png")},
        )
        assert response.status_code == 201
        assert response.json()["user"]["profile_image"] == "https://cdn.example.com/image.png"
        assert fake_cdn[0]["folder"] == "perfiles"

    def test_register_rejects_non_image(self, client, fake_cdn):
        response = client.post(
            "/auth/registro",
            data=REGISTRATION,
            files={"profile_image": ("notes.txt", b"hi", "text/plain")},
        )
        assert response.status_code == 400
        assert fake_cdn == []

    def test_register_duplicate(self, client, user):
        response = client.post("/auth/registro", data={**REGISTRATION, "username": "alice"})
        assert response.status_code == 409

    def test_register_duplicate_with_short_name_is_conflict(self, client, user):
        response = client.post("/auth/registro", data={**REGISTRATION, "username": "alice", "name": "J"})
        assert response.status_code == 409

    def test_register_short_name_is_bad_request(self, client):
        response = client.post("/auth/registro", data={**REGISTRATION, "name": "J"})
        assert response.status_code == 400

    def test_rejected_registration_uploads_nothing(self, client, user, fake_cdn):
        response = client.post(
            "/auth/registro",
            data={**REGISTRATION, "username": "alice"},
            files={"profile_image": ("me.png", b"\x89PNG", "image/png")},
        )
        assert response.status_code == 409
        assert fake_cdn == []

    def test_login_missing_field_is_bad_request(self, client):
        assert client.post("/auth/login", json={"identifier": "alice"}).status_code == 400

    def test_bad_credentials(self, client, user):
        wrong = client.post("/auth/login", json={"identifier": "alice", "password": "Nope12345"})
        missing = client.post("/auth/login", json={"identifier": "ghost", "password": "Nope12345"})
        assert wrong.status_code == missing.status_code == 401
        assert wrong.json() == missing.json()

    def test_authorize_and_refresh(self, client, user, auth_headers):
        response = client.post("/auth/autorizar", headers=auth_headers(user))
        assert response.status_code == 200
        assert response.json()["id"] == str(user.id)

        response = client.post("/auth/refrescar", headers=auth_headers(user))
        assert response.status_code == 200
        assert response.json()["access_token"]

    def test_missing_and_garbage_tokens(self, client):
        assert client.post("/auth/autorizar").status_code == 401
        response = client.post("/auth/autorizar", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401


class TestUserEndpoints:
    def test_me(self, client, user, auth_headers):
        response = client.get("/users/me", headers=auth_headers(user))
        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    def test_update_me(self, client, user, auth_headers, fake_cdn):
        response = client.patch(
            "/users/me",
            data={"bio": "new bio"},
            files={"profile_image": ("me.jpg", b"jpeg", "image/jpeg")},
            headers=auth_headers(user),
        )
        assert response.status_code == 200
        assert response.json()["bio"] == "new bio"
        assert User.objects(id=user.id).first().profile_image == "https://cdn.example.com/image.png"

    def test_admin_routes_forbidden_to_users(self, client, user, auth_headers):
        assert client.get("/users", headers=auth_headers(user)).status_code == 403

    def test_admin_creates_and_deactivates_user(self, client, admin, auth_headers):
        payload = {**REGISTRATION, "role": "admin"}
        response = client.post("/users", json=payload, headers=auth_headers(admin))
        assert response.status_code == 201
        created = response.json()
        assert created["role"] == "admin"

        response = client.delete(f"/users/{created['id']}", headers=auth_headers(admin))
        assert response.status_code == 200
        assert response.json()["active"] is False

        login = client.post("/auth/login", json={"identifier": "juanp", "password": "Password1"})
        assert login.status_code == 401

        response = client.post(f"/users/{created['id']}/activar", headers=auth_headers(admin))
        assert response.json()["active"] is True
        assert len(client.get("/users", headers=auth_headers(admin)).json()) == 2

    def test_admin_cannot_deactivate_self(self, client, admin, auth_headers):
        response = client.delete(f"/users/{admin.id}", headers=auth_headers(admin))
        assert response.status_code == 403

    def test_deactivate_unknown_user(self, client, admin, auth_headers):
        response = client.delete("/users/0123456789abcdef01234567", headers=auth_headers(admin))
        assert response.status_code == 404


class TestPostEndpoints:
    def _create(self, client, headers, **data):
        response = client.post("/publicaciones", data={"title": "Hi", "content": "Body", **data}, headers=headers)
        assert response.status_code == 201
        return response.json()

    def test_post_lifecycle(self, client, user, other_user, auth_headers):
        post = self._create(client, auth_headers(user))

        listing = client.get("/publicaciones", params={"ordenarPor": "likes"})
        assert [p["id"] for p in listing.json()] == [post["id"]]

        like = client.post(f"/publicaciones/{post['id']}/like", headers=auth_headers(other_user))
        assert like.json()["like_count"] == 1
        again = client.post(f"/publicaciones/{post['id']}/like", headers=auth_headers(other_user))
        assert again.status_code == 403

        comment = client.post(
            f"/publicaciones/{post['id']}/comentarios",
            json={"text": "Great"},
            headers=auth_headers(other_user),
        )
        assert comment.status_code == 201
        comment_id = comment.json()["comments"][0]["id"]

        edited = client.put(
            f"/publicaciones/{post['id']}/comentarios/{comment_id}",
            json={"text": "Great!!"},
            headers=auth_headers(other_user),
        )
        assert edited.json()["modified"] is True

        comments = client.get(f"/publicaciones/{post['id']}/comentarios").json()
        assert [c["text"] for c in comments] == ["Great!!"]

        forbidden = client.patch(
            f"/publicaciones/{post['id']}",
            json={"title": "Stolen"},
            headers=auth_headers(other_user),
        )
        assert forbidden.status_code == 403

        deleted = client.delete(f"/publicaciones/{post['id']}", headers=auth_headers(user))
        assert deleted.status_code == 200
        assert client.get(f"/publicaciones/{post['id']}").status_code == 404
        assert Post.objects(id=post["id"]).first().is_deleted is True

    def test_create_with_image(self, client, user, auth_headers, fake_cdn):
        response = client.post(
            "/publicaciones",
            data={"title": "Pic", "content": "Look"},
            files={"image": ("pic.gif", b"GIF89a", "image/gif")},
            headers=auth_headers(user),
        )
        assert response.status_code == 201
        assert response.json()["image"] == "https://cdn.example.com/image.png"
        assert fake_cdn[0]["folder"] == "publicaciones"

    def test_create_requires_auth(self, client):
        response = client.post("/publicaciones", data={"title": "Hi", "content": "Body"})
        assert response.status_code == 401

    def test_filter_by_author(self, client, user, other_user, auth_headers):
        self._create(client, auth_headers(user), title="mine")
        self._create(client, auth_headers(other_user), title="theirs")

        by_query = client.get("/publicaciones", params={"usuarioId": str(other_user.id)}).json()
        by_path = client.get(f"/publicaciones/usuario/{other_user.id}").json()
        assert [p["title"] for p in by_query] == [p["title"] for p in by_path] == ["theirs"]

    def test_unlike(self, client, user, other_user, auth_headers):
        post = self._create(client, auth_headers(user))
        url = f"/publicaciones/{post['id']}/like"

        never_liked = client.delete(url, headers=auth_headers(other_user))
        assert never_liked.status_code == 403

        client.post(url, headers=auth_headers(other_user))
        response = client.delete(url, headers=auth_headers(other_user))
        assert response.status_code == 200
        assert response.json()["like_count"] == 0

        assert client.delete(url, headers=auth_headers(other_user)).status_code == 403
        stored = Post.objects(id=post["id"]).first()
        assert stored.likes == []
        assert stored.like_count == 0

    def test_invalid_sort_key(self, client):
        assert client.get("/publicaciones", params={"ordenarPor": "random"}).status_code == 400

    def test_empty_title_is_bad_request(self, client, user, auth_headers):
        response = client.post("/publicaciones", data={"title": "", "content": "Body"}, headers=auth_headers(user))
        assert response.status_code == 400


class TestStatisticsEndpoints:
    def test_admin_only(self, client, user, admin, auth_headers):
        for path in ("publicaciones-por-usuario", "comentarios-en-el-tiempo", "comentarios-por-publicacion"):
            assert client.get(f"/estadisticas/{path}", headers=auth_headers(user)).status_code == 403
            assert client.get(f"/estadisticas/{path}", headers=auth_headers(admin)).status_code == 200


class TestServerSettings:
    def test_host_and_port_come_from_environment(self, monkeypatch):
        from app.utils.config import Settings

        monkeypatch.setenv("host", "127.0.0.1")
        monkeypatch.setenv("port", "9001")
        configured = Settings()
        assert (configured.host, configured.port) == ("127.0.0.1", 9001)
