"""
Saved projects: create, list, detail, PDF download.
"""

from reelquote import models


def _project_payload(quote_payload, **meta):
    payload = dict(quote_payload)
    payload["basic"] = {
        "duration_min": 3,
        "delivery_days": 14,
        "flags": {"animations": True},
        "outputs": {"portrait": True},
        "brief": "Company profile for a coffee roastery",
    }
    payload["meta"] = {"project_title": "Roastery Profile", "client_name": "Kopi Kita", **meta}
    return payload


def _create(client, payload):
    response = client.post("/api/projects", json=payload)
    assert response.status_code == 201
    return response.json()["id"]


def test_create_project_stores_pricing(client, db, quote_payload):
    project_id = _create(client, _project_payload(quote_payload))

    project = db.query(models.Project).filter(models.Project.id == project_id).first()
    assert project is not None
    assert project.type == "company_profile"
    assert project.title == "Roastery Profile"
    assert project.grand_total == 2_039_625
    assert project.client_price == 2_243_587.5
    assert project.complexity_answers == [2, 3, 2, 1, 3, 2, 1, 2, 2, 1]
    assert [line.role for line in project.crew_lines] == ["Lead", "Support"]
    assert [line.line_total for line in project.gear_lines] == [250_000]


def test_create_project_without_margin_stores_null(client, db, quote_payload):
    quote_payload["business"] = None
    project_id = _create(client, _project_payload(quote_payload))
    project = db.query(models.Project).filter(models.Project.id == project_id).first()
    assert project.client_price is None
    assert project.nett_profit is None


def test_create_requires_basic_info(client, quote_payload):
    response = client.post("/api/projects", json=quote_payload)
    assert response.status_code == 422


def test_create_rejects_bad_answers(client, db, quote_payload):
    quote_payload["complexity"]["answers"] = [1] * 11
    response = client.post("/api/projects", json=_project_payload(quote_payload))
    assert response.status_code == 400
    assert db.query(models.Project).count() == 0


def test_get_project_detail(client, quote_payload):
    project_id = _create(client, _project_payload(quote_payload))
    response = client.get(f"/api/projects/{project_id}")
    assert response.status_code == 200
    data = response.json()

    assert data["id"] == project_id
    assert data["meta"]["client_name"] == "Kopi Kita"
    assert data["basic"]["flags"]["animations"] is True
    assert data["pricing"]["base_cost"] == 1_850_000
    assert data["oop"] == {"transport": 150_000, "fnb": 50_000}
    assert data["complexity"]["multiplier"] == 1.05
    assert data["business"]["skill_level"] == "intermediate"
    assert data["crew"][1]["line_total"] == 400_000


def test_get_missing_project(client):
    response = client.get("/api/projects/does-not-exist")
    assert response.status_code == 404


def test_list_projects_newest_first(client, quote_payload):
    first = _create(client, _project_payload(quote_payload, project_title="First"))
    second = _create(client, _project_payload(quote_payload, project_title="Second"))

    items = client.get("/api/projects").json()["items"]
    assert [item["id"] for item in items] == [second, first]
    assert "crew" not in items[0]
    assert items[0]["pricing"]["grand_total"] == 2_039_625


def test_project_pdf_download(client, quote_payload):
    project_id = _create(client, _project_payload(quote_payload))
    response = client.get(f"/api/projects/{project_id}/pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "attachment" in response.headers["content-disposition"]
    assert response.content[:5] == b"%PDF-"


def test_project_pdf_missing(client):
    assert client.get("/api/projects/nope/pdf").status_code == 404
