"""Tests for the gallery HTTP API."""

from fastapi.testclient import TestClient

from gallery_sorter.api.app import create_app
from tests.conftest import JPEG_BYTES, PNG_BYTES, SUNSET_METADATA, group_member


def _upload(client: TestClient, count: int = 1) -> dict:
    files = [
        ("files", (f"photo-{index}.png", PNG_BYTES, "image/png"))
        for index in range(count)
    ]
    response = client.post("/sessions", files=files)
    assert response.status_code == 201
    return response.json()


def test_health(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/health").json() == {"status": "ok"}


def test_ui_page(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/")

    assert response.status_code == 200
    assert "Gallery Sorter" in response.text


def test_upload_and_preview(container) -> None:
    client = TestClient(create_app(container))

    data = _upload(client, 2)

    assert len(data["cards"]) == 2
    card = data["cards"][0]
    assert card["status"] == "pending"
    preview = client.get(card["preview_url"])
    assert preview.status_code == 200
    assert preview.content == PNG_BYTES
    assert preview.headers["content-type"] == "image/png"


def test_sunset_metadata_reaches_rendered_card(container, model_client) -> None:
    client = TestClient(create_app(container))
    session_id = _upload(client)["session_id"]

    response = client.post(f"/sessions/{session_id}/metadata", json={"focus": "sunset"})

    assert response.status_code == 200
    data = response.json()
    card = data["cards"][0]
    assert card["description"] == SUNSET_METADATA["description"]
    assert card["categories"] == ", ".join(SUNSET_METADATA["categories"])
    assert card["dominant_colors"] == SUNSET_METADATA["dominant_colors"]
    assert card["has_people"] == "No"
    assert data["status_text"] == "Analysis complete!"
    assert 'interest: "sunset"' in model_client.calls[0].prompt


def test_failed_image_rendered_as_failed(container, model_client) -> None:
    client = TestClient(create_app(container))
    session_id = _upload(client)["session_id"]
    model_client.fail_on = lambda call: True

    data = client.post(f"/sessions/{session_id}/metadata", json={}).json()

    assert data["cards"][0]["status"] == "failed"
    assert data["cards"][0]["error"] == "Failed to analyze this image."


def test_sort_flow(container, model_client) -> None:
    client = TestClient(create_app(container))
    data = _upload(client, 2)
    session_id = data["session_id"]
    client.post(f"/sessions/{session_id}/metadata", json={})
    first_id = data["cards"][0]["image_id"]
    model_client.groups_payload = {
        "sorted_groups": [{"group_name": "Nature", "images": [group_member(first_id)]}]
    }

    response = client.post(f"/sessions/{session_id}/sort", json={"sort_by": "colors"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "sorted"
    assert body["status_text"] == "Images sorted by dominant color"
    assert [group["name"] for group in body["groups"]] == ["Nature", "Ungrouped"]
    assert body["coverage"]["missing_ids"] == [data["cards"][1]["image_id"]]


def test_sort_without_metadata(container, model_client) -> None:
    client = TestClient(create_app(container))
    session_id = _upload(client)["session_id"]

    body = client.post(
        f"/sessions/{session_id}/sort", json={"sort_by": "people"}
    ).json()

    assert body["status"] == "empty"
    assert body["message"] == "Could not sort images into groups."
    assert body["status_text"] == "No metadata available to sort."
    assert model_client.calls == []


def test_sort_rejects_unknown_dimension(container) -> None:
    client = TestClient(create_app(container))
    session_id = _upload(client)["session_id"]

    response = client.post(f"/sessions/{session_id}/sort", json={"sort_by": "size"})

    assert response.status_code == 422


def test_replace_and_close_session(container) -> None:
    client = TestClient(create_app(container))
    data = _upload(client, 2)
    session_id = data["session_id"]

    replaced = client.put(
        f"/sessions/{session_id}/images",
        files=[("files", ("new.jpg", JPEG_BYTES, "image/jpeg"))],
    )

    assert replaced.status_code == 200
    assert len(replaced.json()["cards"]) == 1
    assert client.get(data["cards"][0]["preview_url"]).status_code == 404
    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.get(f"/sessions/{session_id}").status_code == 404


def test_upload_errors_map_to_http_status(container) -> None:
    client = TestClient(create_app(container))

    unsupported = client.post(
        "/sessions", files=[("files", ("a.txt", b"hello", "text/plain"))]
    )
    too_many = client.post(
        "/sessions",
        files=[("files", (f"{i}.png", PNG_BYTES, "image/png")) for i in range(4)],
    )

    assert unsupported.status_code == 415
    assert too_many.status_code == 413


def test_oversized_upload_rejected(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/sessions", files=[("files", ("big.png", PNG_BYTES * 200, "image/png"))]
    )

    assert response.status_code == 413
    assert "too large" in response.json()["detail"]
