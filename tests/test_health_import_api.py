"""
API tests for the health export import endpoints.

The engine itself is covered in test_health_import_parser.py; these check the
HTTP contract: response shape, error codes and the size limit.
"""
import json

import pytest

from core.config import settings

PARSE_URL = "/v1/imports/health-export/parse"
PARSE_FILE_URL = "/v1/imports/health-export/parse-file"

EXPORT = {
    "samples": [
        {"metric": "exercise.hr", "ts": 1739836800000, "value": 72},
        {"metric": "exercise.hr", "timestamp": "1739836860", "value": "74"},
        {"metric": "activity.steps", "timestamp": "2026-02-17T12:00:00Z", "value": "1532"},
    ]
}


class TestParseEndpoint:
    def test_returns_batches_and_summary(self, client):
        response = client.post(PARSE_URL, json={"payload": json.dumps(EXPORT)})

        assert response.status_code == 200
        body = response.json()
        assert body["metricCount"] == 2
        assert body["sampleCount"] == 3
        assert body["summary"] == "Parsed 3 samples across 2 metrics."
        assert body["startTs"] == 1739836800000
        assert body["endTs"] == 1771329600000
        assert body["importWindow"] == ["2025-02-18T00:00:00+00:00", "2026-02-17T12:00:00+00:00"]
        assert body["batches"][0] == {
            "metric": "exercise.hr",
            "samples": [
                {"ts": 1739836800000, "value": 72.0},
                {"ts": 1739836860000, "value": 74.0},
            ],
        }

    def test_null_values_are_returned_as_null(self, client):
        payload = json.dumps([{"metric": "vitals.spo2", "ts": 1739836800000, "value": None}])
        response = client.post(PARSE_URL, json={"payload": payload})

        assert response.status_code == 200
        assert response.json()["batches"][0]["samples"] == [{"ts": 1739836800000, "value": None}]

    @pytest.mark.parametrize(
        "payload,error_code",
        [
            ("   ", "empty_payload"),
            ("not json", "invalid_json"),
            ('{"meta": {"name": "x"}}', "no_records"),
            ('[{"metric": "exercise.hr", "value": "n/a"}]', "no_numeric_samples"),
        ],
    )
    def test_import_failures_are_422_with_code(self, client, payload, error_code):
        response = client.post(PARSE_URL, json={"payload": payload})

        assert response.status_code == 422
        assert response.json()["error_code"] == error_code
        assert response.json()["detail"]

    def test_out_of_range_timestamps_have_null_window(self, client):
        payload = json.dumps({"samples": [{"metric": "exercise.hr", "ts": 1739836800000000, "value": 72}]})
        response = client.post(PARSE_URL, json={"payload": payload})

        assert response.status_code == 200
        body = response.json()
        assert body["startTs"] == 1739836800000000
        assert body["importWindow"] is None

    def test_nan_literal_is_invalid_json(self, client):
        response = client.post(PARSE_URL, json={"payload": "[NaN]"})

        assert response.status_code == 422
        assert response.json()["error_code"] == "invalid_json"

    def test_missing_payload_field_is_rejected(self, client):
        response = client.post(PARSE_URL, json={})
        assert response.status_code == 422

    def test_payload_over_limit_is_413(self, client, monkeypatch):
        monkeypatch.setattr(settings, "IMPORT_MAX_PAYLOAD_BYTES", 1024)
        payload = json.dumps([{"ts": 1739836800 + i, "steps": i} for i in range(200)])

        response = client.post(PARSE_URL, json={"payload": payload})

        assert response.status_code == 413
        assert response.json()["error_code"] == "payload_too_large"


class TestParseFileEndpoint:
    def test_uploaded_json_file(self, client):
        files = {"file": ("export.json", json.dumps(EXPORT).encode("utf-8"), "application/json")}
        response = client.post(PARSE_FILE_URL, files=files)

        assert response.status_code == 200
        assert response.json()["sampleCount"] == 3

    def test_utf8_bom_is_accepted(self, client):
        content = b"\xef\xbb\xbf" + json.dumps([{"ts": 1739836800, "steps": 10}]).encode("utf-8")
        response = client.post(PARSE_FILE_URL, files={"file": ("export.txt", content, "text/plain")})

        assert response.status_code == 200
        assert response.json()["batches"][0]["metric"] == "activity.steps"

    def test_blank_file(self, client):
        response = client.post(PARSE_FILE_URL, files={"file": ("export.json", b"  \n", "application/json")})

        assert response.status_code == 422
        assert response.json() == {"detail": "Selected file is empty.", "error_code": "empty_file"}

    def test_binary_file(self, client):
        response = client.post(PARSE_FILE_URL, files={"file": ("export.json", b"\xff\xfe\x00\x81", "application/json")})

        assert response.status_code == 422
        assert response.json()["error_code"] == "invalid_encoding"

    def test_invalid_json_file(self, client):
        response = client.post(PARSE_FILE_URL, files={"file": ("export.json", b"{oops", "application/json")})

        assert response.status_code == 422
        assert response.json()["error_code"] == "invalid_json"

    def test_file_over_limit_is_413(self, client, monkeypatch):
        monkeypatch.setattr(settings, "IMPORT_MAX_PAYLOAD_BYTES", 1024)
        content = json.dumps([{"ts": 1739836800 + i, "steps": i} for i in range(200)]).encode("utf-8")

        response = client.post(PARSE_FILE_URL, files={"file": ("export.json", content, "application/json")})

        assert response.status_code == 413


class TestServiceEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == "1.0.0"

    def test_ping(self, client):
        response = client.get("/ping")
        assert response.json() == {"pong": True}

    def test_process_time_header(self, client):
        assert "x-process-time" in client.get("/ping").headers
