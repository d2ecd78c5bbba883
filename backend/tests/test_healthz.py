def test_healthz_200(client):
    resp = client.get("/healthz")

    assert resp.status_code == 200
    assert resp.json() == {"ok": "true"}
