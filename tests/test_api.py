"""
Tests for the HTTP layer: routers, error envelope and timing header.
"""

import pytest
from fastapi.testclient import TestClient

from main import app
from routers import grading_scales, report_cards

from conftest import ADMIN_ID, CLASS_CODE, OUTSIDER_ID, SCHOOL_ID


@pytest.fixture
def client(db):
    app.dependency_overrides[report_cards.get_db] = lambda: db
    app.dependency_overrides[grading_scales.get_db] = lambda: db
    # startup 이벤트(init_db)는 실행하지 않음
    yield TestClient(app)
    app.dependency_overrides.clear()


def generate_body(exam_id, created_by=ADMIN_ID, student_id="STU001"):
    return {
        "school_id": SCHOOL_ID,
        "student_id": student_id,
        "class_id": CLASS_CODE,
        "exam_id": exam_id,
        "academic_year_id": "AY2025",
        "term_id": "T1-2025",
        "created_by": created_by,
    }


class TestReportCardRoutes:
    def test_generate_and_read(self, client, marks):
        res = client.post("/v1/report-cards/generate", json=generate_body(marks))
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        report_id = body["data"]["report_id"]

        res = client.get(f"/v1/report-cards/{report_id}")
        data = res.json()["data"]
        assert data["student_id"] == "STU001"
        assert data["overall_grade"] == "1"
        assert data["position"] == 1
        assert data["status"] == "draft"

    def test_read_returns_every_stored_field(self, client, marks):
        body = generate_body(marks)
        body.update(
            class_teacher_sign="sig-ct.png",
            headmaster_sign="sig-hm.png",
            vacation_date="2025-12-12",
            reopening_date="2026-01-08",
            termly_performance='{"term1": 497, "term2": null, "term3": null}',
            promoted_to="JHS 2",
            house="Volta",
            year="2025",
        )
        report_id = client.post("/v1/report-cards/generate", json=body).json()["data"]["report_id"]
        client.post("/v1/report-cards/publish", json={
            "report_ids": [report_id], "published_by": ADMIN_ID, "published_by_role": "admin",
        })
        client.post(f"/v1/report-cards/{report_id}/review", json={
            "reviewed_by": ADMIN_ID, "reviewed_by_name": "Head Admin", "review_notes": "Signed off",
        })

        data = client.get(f"/v1/report-cards/{report_id}").json()["data"]
        assert data["class_teacher_sign"] == "sig-ct.png"
        assert data["headmaster_sign"] == "sig-hm.png"
        assert data["vacation_date"] == "2025-12-12"
        assert data["reopening_date"] == "2026-01-08"
        assert data["termly_performance"] == '{"term1": 497, "term2": null, "term3": null}'
        assert data["promoted_to"] == "JHS 2"
        assert data["house"] == "Volta"
        assert data["year"] == "2025"
        assert data["school_address"] is None
        assert data["promotion_status"] is None
        assert data["published_by_role"] == "admin"
        assert data["reviewed_by"] == ADMIN_ID
        assert data["reviewed_by_name"] == "Head Admin"
        assert data["review_notes"] == "Signed off"
        assert data["reviewed_at"] is not None
        assert data["created_by"] == ADMIN_ID

        listed = client.get("/v1/report-cards/", params={"school_id": SCHOOL_ID}).json()["data"]
        assert listed[0] == data

    def test_unpublished_by_returned(self, client, marks):
        report_id = client.post("/v1/report-cards/generate", json=generate_body(marks)).json()["data"]["report_id"]
        client.post("/v1/report-cards/publish", json={
            "report_ids": [report_id], "published_by": ADMIN_ID, "published_by_role": "admin",
        })
        client.post(f"/v1/report-cards/{report_id}/unpublish", json={
            "unpublished_by": ADMIN_ID, "unpublish_reason": "Typo in comment",
        })
        data = client.get(f"/v1/report-cards/{report_id}").json()["data"]
        assert data["unpublished_by"] == ADMIN_ID
        assert data["unpublish_reason"] == "Typo in comment"
        assert data["published_by_role"] is None

    def test_by_school_newest_first(self, client, marks):
        ids = client.post("/v1/report-cards/generate-class", json={
            "exam_id": marks, "class_id": CLASS_CODE, "created_by": ADMIN_ID,
        }).json()["data"]["report_ids"]
        res = client.get(f"/v1/report-cards/school/{SCHOOL_ID}")
        assert res.status_code == 200
        assert [r["id"] for r in res.json()["data"]] == list(reversed(ids))
        assert client.get("/v1/report-cards/school/SCH999").json()["data"] == []

    def test_unauthorized_envelope(self, client, marks):
        res = client.post("/v1/report-cards/generate", json=generate_body(marks, created_by=OUTSIDER_ID))
        assert res.status_code == 403
        error = res.json()["error"]
        assert error["code"] == "UNAUTHORIZED"
        assert error["message"].startswith("Unauthorized")

    def test_not_found(self, client, school):
        res = client.get("/v1/report-cards/999")
        assert res.status_code == 404
        assert res.json()["error"]["code"] == "NOT_FOUND"

    def test_batch_partial_success(self, client, marks, db):
        from models.student_marks import StudentMark
        db.query(StudentMark).filter_by(student_id="STU002").delete()
        db.commit()

        res = client.post("/v1/report-cards/generate-class", json={
            "exam_id": marks, "class_id": CLASS_CODE, "created_by": ADMIN_ID,
        })
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["count"] == 2
        assert data["errors"] == ["Kofi Boateng: No marks found"]

    def test_batch_total_failure_lists_errors(self, client, school):
        res = client.post("/v1/report-cards/generate-class", json={
            "exam_id": school["exam_id"], "class_id": CLASS_CODE, "created_by": ADMIN_ID,
        })
        assert res.status_code == 422
        body = res.json()
        assert body["error"]["code"] == "AGGREGATE_FAILURE"
        assert len(body["errors"]) == 3

    def test_list_and_status_filter(self, client, marks):
        client.post("/v1/report-cards/generate-class", json={
            "exam_id": marks, "class_id": CLASS_CODE, "created_by": ADMIN_ID,
        })
        res = client.get("/v1/report-cards/", params={"school_id": SCHOOL_ID})
        ids = [r["id"] for r in res.json()["data"]]
        assert len(ids) == 3

        client.post("/v1/report-cards/publish", json={
            "report_ids": ids[:1], "published_by": ADMIN_ID, "published_by_role": "admin",
        })
        res = client.get("/v1/report-cards/", params={"school_id": SCHOOL_ID, "status": "published"})
        assert [r["id"] for r in res.json()["data"]] == ids[:1]

    def test_unpublish_blank_reason(self, client, marks):
        report_id = client.post("/v1/report-cards/generate", json=generate_body(marks)).json()["data"]["report_id"]
        res = client.post(f"/v1/report-cards/{report_id}/unpublish", json={
            "unpublished_by": ADMIN_ID, "unpublish_reason": "",
        })
        assert res.status_code == 400
        assert res.json()["error"]["code"] == "INVALID_REQUEST"

    def test_delete(self, client, marks):
        report_id = client.post("/v1/report-cards/generate", json=generate_body(marks)).json()["data"]["report_id"]
        res = client.delete(f"/v1/report-cards/{report_id}", params={"deleted_by": ADMIN_ID})
        assert res.status_code == 200
        assert client.get(f"/v1/report-cards/{report_id}").status_code == 404

    def test_latency_header(self, client, school):
        res = client.get("/health")
        assert res.status_code == 200
        assert "x-latency-ms" in res.headers


class TestGradingScaleRoutes:
    def test_default_scale_lifecycle(self, client, school):
        res = client.get("/v1/grading-scales/default", params={"school_id": SCHOOL_ID})
        assert res.json()["success"] is False

        res = client.post("/v1/grading-scales/default", json={"school_id": SCHOOL_ID, "created_by": ADMIN_ID})
        assert res.status_code == 200
        scale_id = res.json()["data"]["id"]

        res = client.get("/v1/grading-scales/default", params={"school_id": SCHOOL_ID})
        assert res.json()["data"]["id"] == scale_id

    def test_create_with_camel_case_ranges(self, client, school):
        res = client.post("/v1/grading-scales/", json={
            "school_id": SCHOOL_ID,
            "scale_name": "Primary",
            "department": "primary",
            "grades": [{"grade": "A", "minPercent": 50, "maxPercent": 100, "remark": "Pass"}],
            "created_by": ADMIN_ID,
        })
        assert res.status_code == 200
        assert res.json()["data"]["department"] == "primary"

    def test_unknown_scale(self, client, school):
        res = client.get("/v1/grading-scales/42")
        assert res.status_code == 404
