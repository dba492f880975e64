# ruff: noqa: ANN201
from fastapi.testclient import TestClient

from officepilot.main import app

client = TestClient(app)

REQUEST = {
    "version": "2010",
    "edition": "Professional Pro",
    "service_pack": 1,
    "license_key": "ABCDE-FGHIJ-KLMNO-PQRST-UVWXY",
    "architecture": "x86",
    "products": ["Word", "Excel"],
    "language": "en-us",
    "ensure": "Present",
    "deployment_root": "\\\\fileserver\\office",
}


def test_health():
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_list_catalog_versions():
    r = client.get("/api/catalog/versions")
    assert r.status_code == 200
    versions = {v["version"]: v for v in r.json()}
    assert set(versions) == {"2003", "2007", "2010", "2013"}
    assert versions["2010"]["version_tag"] == "14"
    assert "Professional Pro" in versions["2010"]["editions"]


def test_validate_valid_request():
    r = client.post("/api/deployments/validate", json=REQUEST)
    assert r.status_code == 200
    body = r.json()
    assert body["valid"] is True
    assert body["spec"]["setup_id"] == "ProPlus"


def test_validate_reports_every_violation():
    r = client.post("/api/deployments/validate", json={**REQUEST, "edition": "Ultimate", "license_key": "bad"})
    assert r.status_code == 200
    body = r.json()
    assert body["valid"] is False
    assert {v["code"] for v in body["violations"]} == {"InvalidEdition", "InvalidLicenseKey"}


def test_plan_request():
    r = client.post("/api/deployments/plan", json=REQUEST)
    assert r.status_code == 200
    body = r.json()
    assert [op["kind"] for op in body["operations"]] == ["InstallBase", "ApplyServicePack"]
    assert body["variant"]["installer_root"] == "\\\\fileserver\\office\\OFFICE14\\Professional Pro\\x86"


def test_plan_absent_2003():
    r = client.post(
        "/api/deployments/plan",
        json={**REQUEST, "version": "2003", "edition": "Professional", "ensure": "Absent"},
    )
    assert r.status_code == 200
    operations = r.json()["operations"]
    assert len(operations) == 1
    assert operations[0]["command"]["argv"][0] == "msiexec.exe"


def test_validate_wrongly_typed_override_is_a_violation():
    r = client.post("/api/deployments/validate", json={**REQUEST, "edition": "Bogus", "company_name": 5})
    assert r.status_code == 200
    body = r.json()
    assert body["valid"] is False
    assert {v["code"] for v in body["violations"]} == {"InvalidEdition", "InvalidOverride"}


def test_plan_wrongly_typed_override_returns_400():
    r = client.post("/api/deployments/plan", json={**REQUEST, "file_mode": 644})
    assert r.status_code == 400
    assert [v["code"] for v in r.json()["detail"]["violations"]] == ["InvalidOverride"]


def test_plan_invalid_request_returns_400():
    r = client.post("/api/deployments/plan", json={**REQUEST, "version": "2016"})
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert detail["error"] == "spec.invalid"
    assert [v["code"] for v in detail["violations"]] == ["InvalidVersion"]
