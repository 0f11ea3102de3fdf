"""
Integration tests for token validation and media serving.
"""

from unittest.mock import MagicMock

from botocore.exceptions import ClientError

from app.core.responses import ErrorResponse
from app.core.storage import r2_storage

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def test_validate_token(client, founder, founder_headers):
    response = client.get("/api/v1/auth/validate-token", headers=founder_headers)
    assert response.status_code == 200
    assert response.json() == {
        "valid": True, "userId": founder.id, "username": "founder", "isVerified": True,
    }


def test_validate_token_without_token(client):
    response = client.get("/api/v1/auth/validate-token")
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_token_for_unknown_user(client):
    from tests.utils import auth_header

    ghost = MagicMock(id="ghost")
    response = client.get("/api/v1/auth/validate-token", headers=auth_header(ghost))
    assert response.status_code == 401
    assert response.json()["message"] == "User not found"


def test_serves_local_upload(client, local_uploads):
    (local_uploads / "post_images").mkdir(parents=True)
    (local_uploads / "post_images" / "deck.png").write_bytes(PNG)

    response = client.get("/api/v1/media/post_images/deck.png")
    assert response.status_code == 200
    assert response.content == PNG
    assert response.headers["content-type"] == "image/png"


def test_missing_media(client):
    response = client.get("/api/v1/media/post_images/nothing.png")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "File not found"}


def test_path_cannot_escape_upload_directory(client):
    assert client.get("/api/v1/media/..%2F..%2Fetc%2Fpasswd").status_code == 404


def test_serves_from_r2(client, monkeypatch):
    body = MagicMock()
    body.iter_chunks.return_value = iter([PNG])
    r2 = MagicMock()
    r2.get_object.return_value = {"Body": body, "ContentType": "image/png"}
    monkeypatch.setattr(r2_storage, "client", r2)

    response = client.get("/api/v1/media/post_images/deck.png")
    assert response.status_code == 200
    assert response.content == PNG
    r2.get_object.assert_called_once_with(Bucket=r2_storage.bucket, Key="post_images/deck.png")


def test_r2_missing_key(client, monkeypatch):
    r2 = MagicMock()
    r2.get_object.side_effect = ClientError({"Error": {"Code": "NoSuchKey"}}, "GetObject")
    monkeypatch.setattr(r2_storage, "client", r2)

    assert client.get("/api/v1/media/post_images/gone.png").status_code == 404


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/v1/nowhere")
    assert response.status_code == 404
    body = ErrorResponse.model_validate(response.json())
    assert body.success is False
    assert body.message == "Not Found"
