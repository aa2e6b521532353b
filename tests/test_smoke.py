from fastapi.testclient import TestClient
from startup_csv.main import app

client = TestClient(app)

def _upload(content: bytes, filename: str = "startups.csv"):
    return {"file": (filename, content, "text/csv")}

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_decode_upload():
    raw = b"Name,Stage\nAcme,Seed\n"
    r = client.post("/decode", files=_upload(raw))
    assert r.status_code == 200

    data = r.json()
    assert data["result"]["headers"] == ["Name", "Stage"]
    assert data["result"]["records"] == [
        {"id": "1", "values": {"name": "Acme", "stage": "Seed"}}
    ]
    assert data["report"]["summary"]["rows"] == 1
    assert data["report"]["warnings"] == []

def test_decode_latin1_upload():
    # Include a Latin-1 character to force non-ASCII handling
    raw = "name,city\nPaul,Montréal\n".encode("latin-1")

    r = client.post("/decode", files=_upload(raw))
    assert r.status_code == 200
    assert r.json()["result"]["records"][0]["values"]["city"] == "Montréal"

def test_decode_strips_utf8_bom():
    raw = b"\xef\xbb\xbfName,Stage\r\nAcme,Seed\r\n"
    r = client.post("/decode", files=_upload(raw))
    assert r.status_code == 200
    assert r.json()["result"]["headers"] == ["Name", "Stage"]

def test_rejects_non_csv_filename():
    r = client.post("/decode", files=_upload(b"a,b\n1,2\n", filename="startups.txt"))
    assert r.status_code == 422
    assert r.json()["detail"] == "Only CSV files are supported"

def test_collision_reported_by_default():
    r = client.post("/decode", files=_upload(b"A,A\nx,y\n"))
    assert r.status_code == 200

    data = r.json()
    assert data["result"]["records"][0]["values"] == {"a": "y"}
    assert data["report"]["warnings"][0]["issue"] == "header_key_collision"
    assert data["report"]["summary"]["strict"] is False

def test_collision_rejected_in_strict_mode():
    r = client.post("/decode", params={"strict": "true"}, files=_upload(b"A,A\nx,y\n"))
    assert r.status_code == 422
    assert "collide" in r.json()["detail"]

def test_table_view():
    raw = b'Name,Stage,Location\n"Acme, Inc",Seed\n'
    r = client.post("/table", params={"placeholder": "N/A"}, files=_upload(raw))
    assert r.status_code == 200
    assert r.json() == {
        "headers": ["Name", "Stage", "Location"],
        "rows": [["Acme, Inc", "Seed", "N/A"]],
        "placeholder": "N/A",
    }

def test_sample():
    r = client.get("/sample")
    assert r.status_code == 200

    result = r.json()["result"]
    assert result["headers"][0] == "Name"
    assert [rec["id"] for rec in result["records"]] == ["1", "2", "3"]
    assert result["records"][0]["values"]["name"] == "TechFlow AI"
    assert result["records"][0]["values"]["location"] == "San Francisco, CA"

def test_strict_default_from_config(monkeypatch):
    monkeypatch.setattr("startup_csv.main.STRICT_HEADERS", True)
    r = client.post("/decode", files=_upload(b"A,A\nx,y\n"))
    assert r.status_code == 422

def test_strict_query_param_overrides_config(monkeypatch):
    monkeypatch.setattr("startup_csv.main.STRICT_HEADERS", True)
    r = client.post("/decode", params={"strict": "false"}, files=_upload(b"A,A\nx,y\n"))
    assert r.status_code == 200

    data = r.json()
    assert data["result"]["records"][0]["values"] == {"a": "y"}
    assert data["report"]["summary"]["strict"] is False
