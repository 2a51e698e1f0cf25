import json
import shutil
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from techmap.config import AppConfig
from techmap.features.associations.errors import SchemaError
from techmap.main import create_app


@pytest.fixture
def client(fixtures_dir: Path) -> TestClient:
    app = create_app(AppConfig(data_dir=fixtures_dir, wcag_version="22"))
    return TestClient(app)


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_technique_listing_groups_by_technology(client: TestClient) -> None:
    resp = client.get("/techniques")
    assert resp.status_code == 200
    groups = {g["technology"]: g for g in resp.json()["technologies"]}

    assert set(groups) == {"aria", "css", "failures", "general", "html"}
    assert groups["general"]["title"] == "General Techniques"
    general = groups["general"]["items"]
    assert [t["id"] for t in general] == ["G9", "G93", "G94", "G131", "G142", "G195"]
    counts = {t["id"]: t["association_count"] for t in general}
    assert counts["G93"] == 2
    assert counts["G195"] == 0
    g195 = next(t for t in general if t["id"] == "G195")
    assert " … " in g195["title"]


def test_technique_detail_orders_by_criterion(client: TestClient) -> None:
    resp = client.get("/techniques/G93")
    assert resp.status_code == 200
    body = resp.json()

    assert body["technique"]["title"] == "Providing open (always visible) captions"
    assert body["associations"] == [
        {
            "criterion": "captions-prerecorded",
            "type": "Sufficient",
            "hasUsageChildren": False,
            "usageParentIds": [],
            "usageParentDescription": "",
            "with": [],
        },
        {
            "criterion": "captions-live",
            "type": "Sufficient",
            "hasUsageChildren": False,
            "usageParentIds": [],
            "usageParentDescription": "",
            "with": ["G9"],
        },
    ]


def test_unregistered_technique_with_associations_is_served(client: TestClient) -> None:
    body = client.get("/techniques/SM11").json()
    assert body["technique"] is None
    assert body["associations"][0]["usageParentIds"] == ["G87"]


def test_registered_technique_without_associations(client: TestClient) -> None:
    resp = client.get("/techniques/G195")
    assert resp.status_code == 200
    assert resp.json()["associations"] == []


def test_unknown_technique_is_404(client: TestClient) -> None:
    # H93 is only referenced by 4.1.1, which is not part of WCAG 2.2.
    resp = client.get("/techniques/H93")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "technique_not_found"


def test_resolve_endpoint(client: TestClient) -> None:
    resp = client.post(
        "/associations/resolve",
        json={
            "version": "21",
            "criteria": [
                {"id": "captions-live", "name": "Captions (Live)", "num": "1.2.4"},
                {"id": "parsing", "name": "Parsing", "num": "4.1.1", "versions": ["20", "21"]},
                {"id": "new-in-22", "name": "New", "num": "2.4.11", "versions": ["22"]},
            ],
            "associations": {
                "captions-live": {"sufficient": [{"id": "G9X"}, {"and": ["G9", "G93"]}]},
                "parsing": {"sufficient": ["H93"]},
                "new-in-22": {"sufficient": ["C43"]},
            },
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["version"] == "21"
    assert set(body["techniques"]) == {"G9X", "G9", "G93", "H93"}
    assert body["techniques"]["G9"][0]["with"] == ["G93"]


def test_resolve_endpoint_can_drop_unregistered_techniques(client: TestClient) -> None:
    resp = client.post(
        "/associations/resolve",
        json={
            "registered_only": True,
            "criteria": [{"id": "captions-live", "name": "Captions (Live)", "num": "1.2.4"}],
            "associations": {"captions-live": {"sufficient": [{"id": "G9X"}, {"and": ["G9", "G93"]}]}},
        },
    )
    assert resp.status_code == 200
    assert set(resp.json()["techniques"]) == {"G9", "G93"}


def test_resolve_endpoint_rejects_string_versions(client: TestClient) -> None:
    resp = client.post(
        "/associations/resolve",
        json={
            "criteria": [{"id": "parsing", "name": "Parsing", "num": "4.1.1", "versions": "21"}],
            "associations": {"parsing": {"sufficient": ["H93"]}},
        },
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "invalid_criteria:ValueError"


def test_resolve_endpoint_reports_schema_errors(client: TestClient) -> None:
    resp = client.post(
        "/associations/resolve",
        json={
            "criteria": [{"id": "c", "name": "c", "num": "1.1.1"}],
            "associations": {"c": {"sufficient": [{"and": ["G1"], "id": "G2"}]}},
        },
    )
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["error"] == "schema_error"
    assert detail["criterion"] == "c"
    assert detail["issues"][0]["code"] == "extra_forbidden"
    assert detail["entry"] == {"and": ["G1"], "id": "G2"}


def test_resolve_endpoint_requires_both_inputs(client: TestClient) -> None:
    resp = client.post("/associations/resolve", json={"criteria": []})
    assert resp.status_code == 400


def test_malformed_corpus_fails_startup(fixtures_dir: Path, tmp_path: Path) -> None:
    for name in ("criteria.json", "techniques.json"):
        shutil.copy(fixtures_dir / name, tmp_path / name)
    (tmp_path / "associations.json").write_text(
        json.dumps({"captions-live": {"sufficient": [{"id": "G9", "usingQuantiy": "any"}]}}),
        encoding="utf-8",
    )

    with pytest.raises(SchemaError) as exc:
        create_app(AppConfig(data_dir=tmp_path))
    assert exc.value.criterion_id == "captions-live"
