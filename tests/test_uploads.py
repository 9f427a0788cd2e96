import io
import re
from pathlib import Path

from portal.uploads import find_file_by_name, sanitize_filename, stored_name_for


def upload(client, data=b"%PDF-1.4 receipt", name="receipt.pdf", mimetype="application/pdf"):
    return client.post(
        "/api/upload",
        data={"file": (io.BytesIO(data), name, mimetype)},
        content_type="multipart/form-data",
    )


def stored_files(app):
    return sorted(p.name for p in Path(app.config["UPLOAD_FOLDER"]).iterdir())


def test_upload_pdf(app, student):
    resp = upload(student.client)
    assert resp.status_code == 201
    body = resp.get_json()

    assert body["fileName"] == "receipt.pdf"
    assert body["originalName"] == "receipt.pdf"
    assert body["mimeType"] == "application/pdf"
    assert body["fileSize"] == len(b"%PDF-1.4 receipt")
    assert re.fullmatch(r"\d+-receipt\.pdf", body["fileUrl"])
    assert body["fullFileUrl"] == f"/uploads/{body['fileUrl']}"
    assert stored_files(app) == [body["fileUrl"]]


def test_unsafe_characters_are_replaced(student):
    resp = upload(student.client, name="my receipt (1).png", mimetype="image/png")
    assert resp.status_code == 201
    assert resp.get_json()["fileUrl"].endswith("-my_receipt__1_.png")


def test_rejects_unlisted_type(app, student):
    resp = upload(student.client, name="notes.txt", mimetype="text/plain")
    assert resp.status_code == 400
    assert "Invalid file type" in resp.get_json()["message"]
    assert stored_files(app) == []


def test_rejects_missing_file(student):
    resp = student.client.post("/api/upload", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No file uploaded"


def test_oversized_upload_leaves_nothing_behind(app, student, monkeypatch):
    monkeypatch.setitem(app.config, "MAX_UPLOAD_BYTES", 1024)
    resp = upload(student.client, data=b"x" * 4096)

    assert resp.status_code == 413
    assert "File too large" in resp.get_json()["message"]
    assert stored_files(app) == []


def test_upload_requires_session(client):
    assert upload(client).status_code == 401


def test_uploaded_file_is_served_publicly(client, student):
    name = upload(student.client, data=b"\x89PNG image", name="scan.png", mimetype="image/png").get_json()["fileUrl"]

    resp = client.get(f"/uploads/{name}")
    assert resp.status_code == 200
    assert resp.data == b"\x89PNG image"
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert client.get("/uploads/missing.png").status_code == 404


def test_file_lookup_by_original_name(student):
    stored = upload(student.client).get_json()["fileUrl"]

    resp = student.client.get("/api/file-lookup/receipt.pdf")
    assert resp.status_code == 200
    assert resp.get_json()["fileUrl"] == f"/uploads/{stored}"

    missing = student.client.get("/api/file-lookup/invoice.pdf")
    assert missing.status_code == 404
    assert missing.get_json()["requestedFilename"] == "invoice.pdf"


def test_find_file_by_name_ignores_paths(tmp_path):
    (tmp_path / "1700000000000-receipt.pdf").write_bytes(b"x")

    assert find_file_by_name("1700000000000-receipt.pdf", tmp_path) == "1700000000000-receipt.pdf"
    assert find_file_by_name("receipt.pdf", tmp_path) == "1700000000000-receipt.pdf"
    assert find_file_by_name("../receipt.pdf", tmp_path) is None


def test_sanitize_filename():
    assert sanitize_filename("Rechnung März.pdf") == "Rechnung_M_rz.pdf"
    assert sanitize_filename("../../etc/passwd") == "passwd"
    assert sanitize_filename("") == "file"
    assert stored_name_for("a b.pdf", now=1700000000.123) == "1700000000123-a_b.pdf"
