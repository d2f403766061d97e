# tests/test_echo.py
from fastapi.testclient import TestClient
from echo.main import create_app, SUBMIT_ACK

client = TestClient(create_app())

def test_root_echoes_url_and_method():
    r = client.get("/")
    assert r.status_code == 200
    assert r.json() == {"url": "/", "method": "GET"}

def test_root_keeps_query_string():
    assert client.get("/?q=shirts").json()["url"] == "/?q=shirts"

def test_submit_ignores_body():
    r1 = client.post("/submit", json={"anything": [1, 2, 3]})
    r2 = client.post("/submit", content=b"not json at all")
    assert r1.status_code == r2.status_code == 200
    assert r1.text == r2.text == SUBMIT_ACK == "Data submitted!"
    assert r1.headers["content-type"].startswith("text/plain")

def test_echo_has_its_own_port_setting(monkeypatch):
    import importlib
    import echo.config

    monkeypatch.delenv("ECHO_PORT", raising=False)
    assert importlib.reload(echo.config).settings.port == 3001
    monkeypatch.setenv("ECHO_PORT", "4100")
    assert importlib.reload(echo.config).settings.port == 4100
    monkeypatch.delenv("ECHO_PORT")
    importlib.reload(echo.config)
