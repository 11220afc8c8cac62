from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

import osuwu.state
from conftest import SIMPLE_CHART
from conftest import V1_BEATMAP
from conftest import V1_USER
from conftest import make_client
from osuwu.exceptions import ParseError
from osuwu.exceptions import UnsupportedEndpointError
from osuwu.init_api import asgi_app
from osuwu.init_api import status_code_for


def osu_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path

    if path == "/osu/123":
        return httpx.Response(200, content=SIMPLE_CHART.encode())

    if path == "/osu/666":
        return httpx.Response(200, content=b"<html>not a chart</html>")

    if path == "/api/get_beatmaps":
        if request.url.params["b"] == "123":
            return httpx.Response(200, json=[V1_BEATMAP])

        return httpx.Response(200, json=[])

    if path == "/api/get_user":
        if request.url.params["u"] in ("2", "peppy"):
            return httpx.Response(200, json=[V1_USER])

        return httpx.Response(200, json=[])

    return httpx.Response(404)


@pytest.fixture
def client() -> Iterator[TestClient]:
    # startup isn't run, so the osu! client is provided directly
    osuwu.state.services.osu_client = make_client(osu_handler)

    yield TestClient(asgi_app)


def test_healthcheck(client: TestClient):
    response = client.get("/_health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_pp_for_one_accuracy(client: TestClient):
    response = client.get("/api/v1/pp", params={"b": 123, "m": "HD", "a": 98})

    assert response.status_code == 200

    body = response.json()
    assert body["status"] == 200
    assert body["message"] == "ok"

    result = body["result"]
    # metadata from the api takes precedence over the chart's own
    assert result["title"] == "DISCO PRINCE"
    assert result["difficulty"] == "Insane"
    assert result["beatmap_id"] == 123
    assert result["mods"] == "HD"
    assert result["accuracy"] == 98.0
    assert result["objects"] == {"total": 3, "circles": 1, "sliders": 1, "spinners": 1}
    assert result["combo"] == {"top": 4, "max": 4}
    assert result["pp"]["total"] > 0
    assert set(result["computed_accuracy"]) == {"n300", "n100", "n50", "nmiss"}


def test_pp_for_common_accuracies(client: TestClient):
    response = client.get("/api/v1/pp", params={"b": 123, "m": 72})

    assert response.status_code == 200

    results = response.json()["results"]
    assert [result["accuracy"] for result in results] == [100.0, 99.0, 98.0, 95.0]
    assert all(result["mods"] == "HDDT" for result in results)


def test_pp_with_unknown_mods(client: TestClient):
    response = client.get("/api/v1/pp", params={"b": 123, "m": "ZZ"})

    assert response.status_code == 400
    assert response.json()["status"] == 400


def test_pp_with_too_many_misses(client: TestClient):
    response = client.get("/api/v1/pp", params={"b": 123, "a": 90, "x": 10})

    assert response.status_code == 400


def test_pp_for_unknown_chart(client: TestClient):
    response = client.get("/api/v1/pp", params={"b": 999})

    assert response.status_code == 404
    assert response.json() == {
        "status": 404,
        "message": "999 is not the ID of a valid beatmap",
    }


def test_pp_for_malformed_chart(client: TestClient):
    response = client.get("/api/v1/pp", params={"b": 666})

    assert response.status_code == 422


def test_pp_requires_a_beatmap(client: TestClient):
    response = client.get("/api/v1/pp")

    assert response.status_code == 422


def test_get_beatmap(client: TestClient):
    response = client.get("/api/v1/beatmaps/123")

    assert response.status_code == 200

    result = response.json()["result"]
    assert result["beatmap_id"] == 123
    assert result["genre"] == "Video Game"
    assert result["pass_percentage"] == 400.0
    assert result["submission_date"].startswith("2013-05-15T11:32:26")


def test_get_unknown_beatmap(client: TestClient):
    response = client.get("/api/v1/beatmaps/999")

    assert response.status_code == 404


def test_get_user(client: TestClient):
    response = client.get("/api/v1/users/peppy")

    assert response.status_code == 200

    result = response.json()["result"]
    assert result["user_id"] == 2
    assert result["score"]["unranked"] == 400
    assert result["grades"]["ss"]["total"] == 5


def test_get_user_by_id(client: TestClient):
    response = client.get("/api/v1/users/2", params={"m": 0})

    assert response.status_code == 200


def test_get_user_with_invalid_mode(client: TestClient):
    response = client.get("/api/v1/users/2", params={"m": 4})

    assert response.status_code == 422


def test_get_unknown_user(client: TestClient):
    response = client.get("/api/v1/users/nobody")

    assert response.status_code == 404


def test_status_codes_for_library_errors():
    assert status_code_for(ParseError("bad", beatmap_id=1, line=None)) == 422
    assert status_code_for(UnsupportedEndpointError("get_match", "v2")) == 501
