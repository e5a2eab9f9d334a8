"""
HTTP boundary cases: malformed payloads, large and unusual content,
custom URLs that need sanitizing or collide with served paths.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from paste_platform.storage.storage import Storage

JSON = {"Accept": "application/json"}


def test_post_non_json_body(client):
    """A body that is not JSON fails request validation."""
    response = client.post("/create", content="content=hi", headers={"Content-Type": "text/plain"})
    assert response.status_code == 422


def test_content_served_verbatim(client):
    """Markup is stored and served without escaping."""
    html = "<script>document.title='x'</script><p>ä ö ü &amp; ✓</p>"
    entry_id = client.post("/create", json={"content": html}, headers=JSON).json()["id"]
    assert client.get(f"/{entry_id}").text == html


def test_large_content(client):
    body = "<p>" + ("lorem ipsum " * 50_000) + "</p>"
    entry_id = client.post("/create", json={"content": body}, headers=JSON).json()["id"]
    assert client.get(f"/{entry_id}").text == body.strip()


def test_traversal_custom_url_stored_sanitized(client, tmp_path):
    response = client.post("/create", json={"content": "hi", "customUrl": "../../escape"}, headers=JSON)
    assert response.status_code == 200
    assert response.json()["id"] == "escape"
    assert (tmp_path / "data" / "escape.json").is_file()
    assert not (tmp_path / "escape.json").exists()
    assert client.get("/escape").text == "hi"


def test_custom_url_with_spaces(client):
    entry_id = client.post("/create", json={"content": "hi", "customUrl": "my first paste"}, headers=JSON).json()["id"]
    assert entry_id == "my_first_paste"
    assert client.get("/my_first_paste").status_code == 200


def test_rename_to_same_sanitized_id_is_not_a_collision(client):
    client.post("/create", json={"content": "hi", "customUrl": "keep", "editCode": "k"}, headers=JSON)
    response = client.post(
        "/keep/update",
        json={"content": "hi again", "editCode": "k", "newUrl": " keep "},
        headers=JSON,
    )
    assert response.status_code == 200
    assert response.json()["id"] == "keep"
    assert client.get("/keep").text == "hi again"


@pytest.mark.parametrize("custom_url", ["health", "docs", "redoc", "openapi.json", "create"])
def test_custom_url_matching_a_route_is_taken(client, custom_url):
    response = client.post("/create", json={"content": "hi", "customUrl": custom_url}, headers=JSON)
    assert response.status_code == 409
    assert response.json()["reason"] == "url_taken"
    assert client.get("/health").json()["status"] == "ok"


def test_rename_onto_a_route_is_taken(client):
    client.post("/create", json={"content": "hi", "customUrl": "keep", "editCode": "k"}, headers=JSON)
    response = client.post("/keep/update", json={"content": "x", "editCode": "k", "newUrl": "docs"}, headers=JSON)
    assert response.status_code == 409
    assert client.get("/keep").text == "hi"


def test_custom_url_matching_a_static_file_is_taken(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "error.html").write_text("<h1>Oops</h1>", encoding="utf-8")
    app = create_app(storage=Storage(), public_dir=str(public))
    with TestClient(app) as client:
        response = client.post("/create", json={"content": "hi", "customUrl": "error.html"}, headers=JSON)
        assert response.status_code == 409
