"""
Tests for the analysis API endpoints.
"""

import io
import json

import pandas as pd
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_analyze_legacy_path(test_client: AsyncClient):
    """POST /analyze is what the dashboard client calls."""
    rows = [{"a": "1", "b": "x"}, {"a": "2", "b": "y"}]

    response = await test_client.post("/analyze", json=rows)

    assert response.status_code == 200
    assert response.json() == {
        "totalRows": 2,
        "columns": ["a", "b"],
        "numericColumns": ["a"],
        "summaryStats": {"a": {"min": 1.0, "max": 2.0, "average": 1.5, "count": 2}},
    }


@pytest.mark.asyncio
async def test_analyze_legacy_path_accepts_text_plain_body(test_client: AsyncClient):
    """Browsers label an untyped JSON.stringify body as text/plain."""
    rows = [{"a": "1", "b": "x"}, {"a": "3", "b": "y"}]

    response = await test_client.post(
        "/analyze",
        content=json.dumps(rows),
        headers={"content-type": "text/plain;charset=UTF-8"},
    )

    assert response.status_code == 200
    assert response.json()["numericColumns"] == ["a"]
    assert response.json()["summaryStats"]["a"] == {
        "min": 1.0, "max": 3.0, "average": 2.0, "count": 2,
    }


@pytest.mark.asyncio
async def test_analyze_rejects_malformed_json_text(test_client: AsyncClient):
    response = await test_client.post(
        "/analyze",
        content='[{"a": ',
        headers={"content-type": "text/plain"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_analyze_versioned_path_empty_dataset(test_client: AsyncClient):
    response = await test_client.post("/api/v1/analyze", json=[])

    assert response.status_code == 200
    assert response.json() == {
        "totalRows": 0,
        "columns": [],
        "numericColumns": [],
        "summaryStats": {},
    }


@pytest.mark.asyncio
async def test_analyze_null_and_text_cells(test_client: AsyncClient):
    rows = [{"a": "1"}, {"a": None}, {"a": "abc"}]

    response = await test_client.post("/api/v1/analyze", json=rows)

    data = response.json()
    assert data["totalRows"] == 3
    assert data["numericColumns"] == ["a"]
    assert data["summaryStats"] == {"a": {"min": 1.0, "max": 1.0, "average": 1.0, "count": 1}}


@pytest.mark.asyncio
async def test_analyze_first_row_columns(test_client: AsyncClient):
    rows = [{"a": "1", "b": "2"}, {"c": "3"}]

    response = await test_client.post("/api/v1/analyze", json=rows)

    assert response.json()["columns"] == ["a", "b"]


@pytest.mark.asyncio
async def test_analyze_union_columns_when_configured(test_client: AsyncClient, override_settings):
    override_settings(COLUMN_DISCOVERY="union")
    rows = [{"a": "1", "b": "2"}, {"c": "3"}]

    response = await test_client.post("/api/v1/analyze", json=rows)

    assert response.json()["columns"] == ["a", "b", "c"]
    assert response.json()["numericColumns"] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_analyze_accepts_native_json_numbers(test_client: AsyncClient):
    rows = [{"v": 3}, {"v": 4.5}, {"v": True}, {"v": None}]

    response = await test_client.post("/api/v1/analyze", json=rows)

    stats = response.json()["summaryStats"]["v"]
    assert stats["count"] == 3
    assert stats["min"] == 1.0
    assert stats["max"] == 4.5


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"a": "1"}, [1, 2, 3], ["row"], "text"])
async def test_analyze_rejects_non_row_payloads(test_client: AsyncClient, payload):
    response = await test_client.post("/api/v1/analyze", json=payload)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_analyze_enforces_row_limit(test_client: AsyncClient, override_settings):
    override_settings(MAX_ROWS=2)

    response = await test_client.post("/api/v1/analyze", json=[{"a": "1"}] * 3)

    assert response.status_code == 413


@pytest.mark.asyncio
async def test_analyze_csv_upload(test_client: AsyncClient):
    content = b"month,revenue,comment\nJan,100,ok\nFeb,,missing\nMar,300,\n"

    response = await test_client.post(
        "/api/v1/analyze/file",
        files={"file": ("revenue.csv", content, "text/csv")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["filename"] == "revenue.csv"
    assert data["profile"]["totalRows"] == 3
    assert data["profile"]["columns"] == ["month", "revenue", "comment"]
    assert data["profile"]["numericColumns"] == ["revenue"]
    assert data["profile"]["summaryStats"]["revenue"] == {
        "min": 100.0, "max": 300.0, "average": 200.0, "count": 2,
    }
    assert data["defaultGraph"] == {"xAxis": "month", "yAxis": "revenue", "chartType": "bar"}


@pytest.mark.asyncio
async def test_analyze_xlsx_upload(test_client: AsyncClient):
    buf = io.BytesIO()
    pd.DataFrame({"item": ["bolt", "nut"], "qty": [4, 6]}).to_excel(buf, index=False)

    response = await test_client.post(
        "/api/v1/analyze/file",
        files={"file": ("stock.xlsx", buf.getvalue(), "application/octet-stream")},
    )

    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["numericColumns"] == ["qty"]
    assert profile["summaryStats"]["qty"]["average"] == 5.0


@pytest.mark.asyncio
async def test_analyze_upload_unsupported_format(test_client: AsyncClient):
    response = await test_client.post(
        "/api/v1/analyze/file",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 415


@pytest.mark.asyncio
async def test_analyze_upload_corrupt_workbook(test_client: AsyncClient):
    response = await test_client.post(
        "/api/v1/analyze/file",
        files={"file": ("broken.xlsx", b"not a workbook", "application/octet-stream")},
    )

    assert response.status_code == 400
    assert "broken.xlsx" in response.json()["detail"]


@pytest.mark.asyncio
async def test_analyze_upload_size_limit(test_client: AsyncClient, override_settings):
    override_settings(MAX_FILE_SIZE_MB=0)

    response = await test_client.post(
        "/api/v1/analyze/file",
        files={"file": ("tiny.csv", b"a\n1\n", "text/csv")},
    )

    assert response.status_code == 413
