import pytest
from frontend.web import app as flask_app


@pytest.fixture()
def client():
    return flask_app.test_client()


@pytest.mark.e2e
def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.get_json() == {"ok": True, "keywords": 35}


@pytest.mark.e2e
def test_home_page_renders(client):
    r = client.get("/")
    assert r.status_code == 200
    html = r.data.decode("utf-8", errors="ignore")
    assert "isiPython" in html and "/api/validate" in html


@pytest.mark.e2e
def test_keywords_listing(client):
    rows = client.get("/api/keywords").get_json()
    assert len(rows) == 35
    assert {"isipython": "ukuba", "python": "if", "meaning": "if / when", "category": "control"} in rows


@pytest.mark.e2e
@pytest.mark.parametrize("direction,code,expected,src,dst", [
    ("forward", "ukuba Inyaniso:", "if True:", "isipython", "python"),
    ("reverse", "if True:", "ukuba Inyaniso:", "python", "isipython"),
    ("auto", "if True:", "ukuba Inyaniso:", "python", "isipython"),
    ("auto", "x = 1", "x = 1", "unknown", "none"),
])
def test_translate(client, direction, code, expected, src, dst):
    r = client.post("/api/translate", json={"code": code, "direction": direction})
    assert r.status_code == 200
    assert r.get_json() == {"translatedCode": expected, "sourceLanguage": src, "targetLanguage": dst}


@pytest.mark.e2e
def test_translate_rejects_bad_requests(client):
    r = client.post("/api/translate", json={"code": "x", "direction": "sideways"})
    assert r.status_code == 400 and "sideways" in r.get_json()["error"]
    r = client.post("/api/translate", data="not json", content_type="text/plain")
    assert r.status_code == 400 and "error" in r.get_json()
    r = client.post("/api/translate", json={"code": 5})
    assert r.status_code == 400


@pytest.mark.e2e
def test_validate(client):
    rows = client.post("/api/validate", json={"code": "ukuba x > 5"}).get_json()
    assert rows == [{
        "line": 1, "column": 12, "endColumn": 13, "message": "Expected ':' after condition",
        "severity": "error", "code": "E101", "source": "isipython",
    }]
    assert client.post("/api/validate", json={"code": ""}).get_json() == []


@pytest.mark.e2e
def test_complete(client):
    body = {"code": "chaza add(a, b):\n    buyisela a + b\n", "line": 3, "column": 1}
    rows = client.post("/api/complete", json=body).get_json()
    assert rows[0]["label"] == "add" and rows[0]["insertText"] == "add($0)"
    for key in ("label", "kind", "insertText", "detail", "priority", "isSnippet"):
        assert key in rows[0]

    r = client.post("/api/complete", json={"code": "", "line": "one"})
    assert r.status_code == 400


@pytest.mark.e2e
def test_tokens(client):
    rows = client.post("/api/tokens", json={"code": "ukuba x:"}).get_json()
    assert rows[0]["kind"] == "keyword" and rows[0]["value"] == "ukuba"
    assert rows[0]["line"] == 1 and rows[0]["column"] == 1
