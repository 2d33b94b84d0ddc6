"""
Test the full web layout flow end-to-end without running the server.
Simulates: add factors → set controls/settings → generate → plot → export → save/load
Verifies JSON keys match frontend expectations.

Run with: PYTHONPATH=. python3 tests/test_web_layout_flow.py
"""

import io
import json
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from backend.main import app
from backend.config import SESSION_HEADER

client = TestClient(app)


def _new_session(name="Flow Test"):
    response = client.post("/api/project/new", json={"name": name})
    assert response.status_code == 200
    session_id = response.headers[SESSION_HEADER]
    assert response.json()["session_id"] == session_id
    return {SESSION_HEADER: session_id}


def _configured_session():
    headers = _new_session()
    client.post("/api/layout/factors", json={"name": "Dose", "levels_text": "10mg, 20mg"}, headers=headers)
    client.post("/api/layout/factors", json={"name": "Temp"}, headers=headers)
    client.put("/api/layout/controls", json={"text": "CTRL, Blank"}, headers=headers)
    client.put("/api/layout/settings", json={"replicates": 4, "plate_size": 24, "seed": 42}, headers=headers)
    return headers


def test_config_endpoints():
    """Config and health endpoints work without a session"""
    print("=== Testing Config Endpoints ===")

    health = client.get("/api/health")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert SESSION_HEADER not in health.headers

    formats = client.get("/api/config/plate-formats").json()
    capacities = [f["capacity"] for f in formats["plate_formats"]]
    assert capacities == [6, 24, 48, 96, 384]
    assert formats["default_plate_size"] == 96
    print(f"  Plate formats: {capacities}")

    constants = client.get("/api/config/constants").json()
    assert constants["same_plate_penalty"] == 1000
    assert constants["adjacency_penalty"] == 50
    assert constants["tie_break_fraction"] == 0.12
    assert constants["max_total_instances"] == 1536
    print("  [PASS] Config endpoints")


def test_auto_session():
    """API calls without a session get one created"""
    print("=== Testing Auto Session ===")

    response = client.get("/api/project/info")
    assert response.status_code == 200
    assert SESSION_HEADER in response.headers
    assert response.json()["has_layout"] is False
    print("  [PASS] Session created on first call")


def test_factor_management():
    """Test adding, updating, removing factors via the API"""
    print("=== Testing Factor Management ===")
    headers = _new_session()

    data = client.post("/api/layout/factors", json={"name": "Dose", "levels_text": "10mg\n20mg"},
                       headers=headers).json()
    assert data["factors"] == {"Dose": ["10mg", "20mg"]}

    data = client.post("/api/layout/factors", json={"name": "Temp", "n_levels": 3}, headers=headers).json()
    assert data["factors"]["Temp"] == ["Temp_L1", "Temp_L2", "Temp_L3"]
    assert data["total_treatments"] == 6
    print("  [PASS] Add factors")

    duplicate = client.post("/api/layout/factors", json={"name": "Dose", "levels": ["x"]}, headers=headers)
    assert duplicate.status_code == 400
    print("  [PASS] Duplicate factor rejected")

    reserved = client.post("/api/layout/factors", json={"name": "Label", "levels": ["x", "y"]}, headers=headers)
    assert reserved.status_code == 400
    assert "reserved" in reserved.json()["detail"]
    print("  [PASS] Export column name rejected")

    data = client.put("/api/layout/factors/Temp", json={"levels_text": "25C, 37C"}, headers=headers).json()
    assert data["factors"]["Temp"] == ["25C", "37C"]
    missing = client.put("/api/layout/factors/pH", json={"levels": ["7"]}, headers=headers)
    assert missing.status_code == 400
    print("  [PASS] Update factor")

    data = client.put("/api/layout/controls", json={"names": ["CTRL"]}, headers=headers).json()
    assert data["controls"] == ["CTRL"]
    assert data["total_treatments"] == 5

    data = client.delete("/api/layout/factors/Temp", headers=headers).json()
    assert list(data["factors"]) == ["Dose"]

    data = client.post("/api/layout/factors/clear", headers=headers).json()
    assert data["factors"] == {}
    assert data["total_treatments"] == 1
    print("  [PASS] Remove and clear factors")


def test_settings():
    """Test run settings validation and reseeding"""
    print("=== Testing Settings ===")
    headers = _new_session()

    data = client.put("/api/layout/settings", json={"replicates": 3, "plate_size": 96, "seed": 7},
                      headers=headers).json()
    assert data == {"replicates": 3, "plate_size": 96, "seed": 7}

    bad = client.put("/api/layout/settings", json={"replicates": 0}, headers=headers)
    assert bad.status_code == 400

    seed = client.post("/api/layout/seed", headers=headers).json()["seed"]
    assert 0 <= seed < 1_000_000
    print("  [PASS] Settings")


def test_generate_layout():
    """Generate, re-generate with the same seed, and read back the result"""
    print("=== Testing Layout Generation ===")
    headers = _configured_session()

    missing = client.get("/api/layout/result", headers=headers)
    assert missing.status_code == 400

    response = client.post("/api/layout/generate", headers=headers)
    assert response.status_code == 200
    data = response.json()

    assert data["numPlates"] == 1
    assert data["seed"] == 42
    assert data["factor_names"] == ["Dose", "Temp"]
    assert len(data["mapping"]) == 6
    assert [m["id"] for m in data["mapping"]] == ["001", "002", "003", "004", "005", "006"]
    wells = data["plates"][0]["wells"]
    assert len(wells) == 24
    assert all(w["assigned"] is not None for w in wells)
    assert {"coord", "row", "col", "assigned"} == set(wells[0])
    print(f"  Generated {data['numPlates']} plate(s)")

    again = client.post("/api/layout/generate", headers=headers).json()
    assert json.dumps(again["plates"]) == json.dumps(data["plates"])
    print("  [PASS] Same seed, same layout")

    result = client.get("/api/layout/result", headers=headers).json()
    assert result["numPlates"] == 1

    info = client.get("/api/project/info", headers=headers).json()
    assert info["has_layout"] is True
    assert info["num_plates"] == 1
    print("  [PASS] Result stored on project")


def test_generate_without_treatments():
    headers = _new_session()
    response = client.post("/api/layout/generate", headers=headers)
    assert response.status_code == 400
    assert "No treatments" in response.json()["detail"]


def test_generate_over_instance_limit():
    headers = _configured_session()
    client.put("/api/layout/settings", json={"replicates": 1000}, headers=headers)
    response = client.post("/api/layout/generate", headers=headers)
    assert response.status_code == 400
    assert "limit" in response.json()["detail"]


def test_edits_invalidate_layout():
    """Exports are refused once the inputs no longer match the generated layout"""
    print("=== Testing Layout Invalidation ===")
    headers = _configured_session()

    client.post("/api/layout/generate", headers=headers)
    assert client.get("/api/layout/export/csv", headers=headers).status_code == 200

    client.put("/api/layout/factors/Dose", json={"levels_text": "5mg"}, headers=headers)
    assert client.get("/api/layout/export/csv", headers=headers).status_code == 400
    assert client.get("/api/layout/result", headers=headers).status_code == 400
    print("  [PASS] Factor update drops layout")

    client.post("/api/layout/generate", headers=headers)
    client.delete("/api/layout/factors/Temp", headers=headers)
    assert client.get("/api/project/info", headers=headers).json()["has_layout"] is False
    print("  [PASS] Factor removal drops layout")


def test_plot_and_exports():
    """Plot and export endpoints return the expected formats"""
    print("=== Testing Plot and Export ===")
    headers = _configured_session()

    assert client.get("/api/layout/export/csv", headers=headers).status_code == 400

    client.post("/api/layout/generate", headers=headers)

    plot = client.get("/api/layout/plot/1", headers=headers).json()
    assert plot["plate_id"] == 1
    assert plot["image"].startswith("data:image/png;base64,")
    assert client.get("/api/layout/plot/5", headers=headers).status_code == 400
    print("  [PASS] Plate plot")

    csv = client.get("/api/layout/export/csv", headers=headers)
    assert csv.status_code == 200
    lines = csv.text.strip().splitlines()
    assert lines[0] == "Treatment,Label,Dose,Temp"
    assert lines[1] == "001,10mg|Temp_L1,10mg,Temp_L1"
    assert lines[-1] == "006,Blank,,"
    assert "attachment" in csv.headers["content-disposition"]
    print("  [PASS] Mapping CSV")

    wells_csv = client.get("/api/layout/export/wells-csv", headers=headers)
    assert len(wells_csv.text.strip().splitlines()) == 25
    print("  [PASS] Wells CSV")

    excel = client.get("/api/layout/export/excel", headers=headers)
    assert excel.status_code == 200
    assert excel.content[:2] == b"PK"
    import openpyxl
    wb = openpyxl.load_workbook(io.BytesIO(excel.content))
    assert wb.sheetnames == ["Mapping", "Plate Map", "Wells"]
    assert wb["Mapping"].cell(row=1, column=1).value == "Treatment"
    print("  [PASS] Excel export")

    pdf = client.get("/api/layout/export/pdf", headers=headers)
    assert pdf.status_code == 200
    assert pdf.content.startswith(b"%PDF")
    print("  [PASS] PDF export")


def test_stateless_engine_endpoints():
    """Enumerate and allocate without touching the project"""
    print("=== Testing Engine Endpoints ===")
    headers = _new_session()

    body = {
        "factors": [{"name": "A", "levels": ["a1", "a2"]}, {"name": "B", "levels": ["b1", "b2", "b3"]}],
        "controls": ["CTRL", "Blank"],
    }
    treatments = client.post("/api/layout/treatments", json=body, headers=headers).json()["treatments"]
    assert [t["id"] for t in treatments] == ["001", "002", "003", "004", "005", "006", "007", "008"]
    assert treatments[1]["label"] == "a1|b2"
    assert treatments[6] == {"id": "007", "label": "CTRL", "levels": {}}
    print("  [PASS] Treatments")

    request = {"treatments": treatments, "reps": 3, "plate_capacity": 24, "seed": 2024}
    first = client.post("/api/layout/allocate", json=request, headers=headers).json()
    second = client.post("/api/layout/allocate", json=request, headers=headers).json()
    assert first == second
    assert first["numPlates"] == 1
    filled = [w for w in first["plates"][0]["wells"] if w["assigned"]]
    assert len(filled) == 24
    print("  [PASS] Allocate")

    bad = client.post("/api/layout/allocate", json={**request, "reps": 0}, headers=headers)
    assert bad.status_code == 400
    assert "Replicates" in bad.json()["detail"]
    print("  [PASS] Invalid reps rejected")

    huge = client.post("/api/layout/allocate", json={**request, "reps": 10_000}, headers=headers)
    assert huge.status_code == 400
    assert "limit" in huge.json()["detail"]
    print("  [PASS] Oversized allocation rejected")


def test_project_save_load():
    """Saved inputs reproduce the same layout after loading"""
    print("=== Testing Project Save/Load ===")
    headers = _configured_session()
    original = client.post("/api/layout/generate", headers=headers).json()

    saved = client.get("/api/project/save", headers=headers)
    assert saved.status_code == 200
    payload = saved.json()
    assert payload["seed"] == 42
    assert payload["controls"] == ["CTRL", "Blank"]

    other = _new_session("Other")
    loaded = client.post(
        "/api/project/load",
        files={"file": ("project.json", saved.content, "application/json")},
        headers=other,
    )
    assert loaded.status_code == 200
    assert loaded.json()["factors_count"] == 2
    assert loaded.json()["has_layout"] is False

    regenerated = client.post("/api/layout/generate", headers=other).json()
    assert regenerated["plates"] == original["plates"]
    print("  [PASS] Round trip")

    bad = client.post(
        "/api/project/load",
        files={"file": ("broken.json", b"{not json", "application/json")},
        headers=other,
    )
    assert bad.status_code == 400

    not_object = client.post(
        "/api/project/load",
        files={"file": ("list.json", json.dumps(["not", "an", "object"]).encode(), "application/json")},
        headers=other,
    )
    assert not_object.status_code == 400
    assert "Invalid project file" in not_object.json()["detail"]

    reserved = client.post(
        "/api/project/load",
        files={"file": ("reserved.json", json.dumps({"factors": {"Row": ["r1"]}}).encode(), "application/json")},
        headers=other,
    )
    assert reserved.status_code == 400
    print("  [PASS] Invalid project files rejected")

    placeholders = {"factors": {"A": [], "B": ["b1", "b2"]}, "controls": ["K"], "replicates": 2}
    client.post(
        "/api/project/load",
        files={"file": ("empty_levels.json", json.dumps(placeholders).encode(), "application/json")},
        headers=other,
    )
    generated = client.post("/api/layout/generate", headers=other).json()
    assert [m["label"] for m in generated["mapping"]] == ["A_L1|b1", "A_L1|b2", "A_L2|b1", "A_L2|b2", "K"]
    print("  [PASS] Empty levels loaded as placeholders")


if __name__ == "__main__":
    print("=" * 50)
    print("Web Layout Flow Tests")
    print("=" * 50)
    passed = True

    for test_fn in [
        test_config_endpoints,
        test_auto_session,
        test_factor_management,
        test_settings,
        test_generate_layout,
        test_generate_without_treatments,
        test_generate_over_instance_limit,
        test_edits_invalidate_layout,
        test_plot_and_exports,
        test_stateless_engine_endpoints,
        test_project_save_load,
    ]:
        try:
            test_fn()
        except Exception as e:
            print(f"  [FAIL] {test_fn.__name__}: {e}")
            import traceback
            traceback.print_exc()
            passed = False

    print("=" * 50)
    if passed:
        print("ALL TESTS PASSED")
    else:
        print("SOME TESTS FAILED")
        sys.exit(1)
    print("=" * 50)
