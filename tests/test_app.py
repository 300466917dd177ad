class TestAppShell:
    """Health routes, CORS headers and error shape"""

    def test_health(self, client):
        assert client.get("/").get_json() == {"service": "marketplace", "status": "ok"}
        assert client.get("/health").status_code == 200

    def test_cors_headers(self, client):
        res = client.get("/listings/")
        assert res.headers["Access-Control-Allow-Origin"] == "*"
        assert "Authorization" in res.headers["Access-Control-Allow-Headers"]

    def test_unknown_route_renders_json_error(self, client):
        res = client.get("/nope")
        assert res.status_code == 404
        assert res.get_json()["error"] == "not_found"

    def test_wrong_method(self, client):
        res = client.delete("/listings/")
        assert res.status_code == 405
        assert res.get_json()["error"] == "method_not_allowed"
