"""
HTTP tests for the media upload service.
"""
import os

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from apps.media.main import MAX_FILE_SIZE, stored_filename


def _upload(client, headers, name="photo.png", data=b"\x89PNG fake", mime="image/png"):
    return client.post(
        "/media/upload",
        files={"file": (name, data, mime)},
        headers=headers,
    )


def test_upload_requires_api_key(media_client):
    response = _upload(media_client, {})

    assert response.status_code == 401


def test_upload_list_delete(media_client, admin_headers):
    response = _upload(media_client, admin_headers)
    assert response.status_code == 201, response.text
    media = response.json()

    assert media["original_name"] == "photo.png"
    assert media["mime_type"] == "image/png"
    assert media["size"] == len(b"\x89PNG fake")
    assert media["url"].endswith(media["filename"])
    assert media["filename"].endswith(".png")

    files = media_client.get("/media/files", headers=admin_headers).json()
    assert [f["id"] for f in files] == [media["id"]]

    response = media_client.delete(f"/media/files/{media['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert media_client.get("/media/files", headers=admin_headers).json() == []

    response = media_client.delete(f"/media/files/{media['id']}", headers=admin_headers)
    assert response.status_code == 404


def test_delete_database_failure_keeps_record_and_file(media_client, admin_headers, monkeypatch):
    media = _upload(media_client, admin_headers, name="keep.txt", data=b"keep", mime="text/plain").json()
    path = os.path.join(os.environ["MEDIA_DIR"], media["filename"])

    def failing_commit(self):
        raise OperationalError("DELETE FROM media", {}, Exception("database is locked"))

    with monkeypatch.context() as m:
        m.setattr(Session, "commit", failing_commit)
        response = media_client.delete(f"/media/files/{media['id']}", headers=admin_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["category"] == "server_error"
    assert "Failed to delete file" in body["error"]
    assert "locked" not in body["error"]
    assert os.path.exists(path)
    files = media_client.get("/media/files", headers=admin_headers).json()
    assert [f["id"] for f in files] == [media["id"]]


def test_upload_rejects_disallowed_type(media_client, admin_headers):
    response = _upload(media_client, admin_headers, name="run.exe", mime="application/x-msdownload")

    assert response.status_code == 400
    assert "not allowed" in response.json()["error"]


def test_upload_rejects_oversized_file(media_client, admin_headers):
    response = _upload(media_client, admin_headers, data=b"0" * (MAX_FILE_SIZE + 1))

    assert response.status_code == 400


def test_uploaded_file_is_written_to_disk(media_client, admin_headers):
    media = _upload(media_client, admin_headers, name="notes.txt", data=b"hello", mime="text/plain").json()

    path = os.path.join(os.environ["MEDIA_DIR"], media["filename"])
    with open(path, "rb") as f:
        assert f.read() == b"hello"


def test_stored_filename_keeps_safe_extension():
    assert stored_filename("Photo.JPG").endswith(".jpg")
    assert "." not in stored_filename("no-extension")
    assert "/" not in stored_filename("../../etc/passwd.png")
    assert stored_filename("a.png") != stored_filename("a.png")
