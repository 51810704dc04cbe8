"""
ProductBridge Backend — Products API End-to-End Tests
=======================================================

What:  Drives the HTTP surface against a real (SQLite) products table.
How:   `test_client` routes requests in-process through the full middleware
       and exception-handler stack.

What we test:
    ✅ POST → GET round trip, created_at == updated_at
    ✅ PUT advances updated_at, keeps id and created_at
    ✅ DELETE removes the row
    ✅ fail=true on every write leaves the table unchanged and answers 200 "rollback"
    ✅ Malformed input → 4xx, datastore fault → 500
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from sqlalchemy import text

BASE = "/api/products"
T0 = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
T1 = T0 + timedelta(seconds=5)


def _ts(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    # SQLite hands timestamps back without an offset
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


async def _create(client, name="Widget", category="Tools"):
    response = await client.post(BASE, json={"name": name, "category": category})
    assert response.status_code == 201, response.text
    return response.json()["id"]


async def _rows(client):
    response = await client.get(BASE)
    assert response.status_code == 200
    return response.json()


class TestCrudScenarios:

    @pytest.mark.asyncio
    async def test_insert_read_delete_scenario(self, test_client):
        response = await test_client.post(BASE, json={"name": "Widget", "category": "Tools"})
        assert response.status_code == 201
        ack = response.json()
        assert ack["status"] == "executed"
        assert ack["operation"] == "insert"
        product_id = ack["id"]

        rows = await _rows(test_client)
        matching = [r for r in rows if r["id"] == product_id]
        assert len(matching) == 1
        assert matching[0]["name"] == "Widget"
        assert matching[0]["category"] == "Tools"
        assert matching[0]["created_at"] == matching[0]["updated_at"]

        response = await test_client.delete(f"{BASE}/{product_id}")
        assert response.status_code == 200
        assert response.json()["status"] == "executed"

        assert all(r["id"] != product_id for r in await _rows(test_client))

    @pytest.mark.asyncio
    async def test_update_advances_updated_at(self, test_client):
        with patch("productbridge.services.product_service.utcnow", return_value=T0):
            product_id = await _create(test_client)

        with patch("productbridge.services.product_service.utcnow", return_value=T1):
            response = await test_client.put(
                f"{BASE}/{product_id}", json={"name": "X", "category": "Y"}
            )
        assert response.status_code == 200
        assert response.json()["status"] == "executed"

        product = (await test_client.get(f"{BASE}/{product_id}")).json()
        assert product["id"] == product_id
        assert product["name"] == "X"
        assert product["category"] == "Y"
        assert _ts(product["updated_at"]) > _ts(product["created_at"])
        assert _ts(product["created_at"]) == T0

    @pytest.mark.asyncio
    async def test_values_with_quotes_are_stored_verbatim(self, test_client):
        name = "O'Brien's \"best\"; drop table products; --"
        product_id = await _create(test_client, name=name, category="Tools")

        product = (await test_client.get(f"{BASE}/{product_id}")).json()
        assert product["name"] == name
        assert len(await _rows(test_client)) == 1

    @pytest.mark.asyncio
    async def test_list_empty_table(self, test_client):
        assert await _rows(test_client) == []


class TestForcedRollback:

    @pytest.mark.asyncio
    async def test_insert_with_fail_header_lands_nothing(self, test_client):
        response = await test_client.post(
            BASE, json={"name": "Ghost", "category": "None"}, headers={"fail": "true"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "rollback"
        assert body["message"] == "forced to rollback"
        assert await _rows(test_client) == []

    @pytest.mark.asyncio
    async def test_update_with_fail_header_keeps_prior_values(self, test_client):
        product_id = await _create(test_client, name="Widget", category="Tools")
        before = (await test_client.get(f"{BASE}/{product_id}")).json()

        response = await test_client.put(
            f"{BASE}/{product_id}",
            json={"name": "X", "category": "Y"},
            headers={"fail": "true"},
        )
        assert response.status_code == 200
        assert response.json()["status"] == "rollback"

        after = (await test_client.get(f"{BASE}/{product_id}")).json()
        assert after == before

    @pytest.mark.asyncio
    async def test_delete_with_fail_query_param_keeps_row(self, test_client):
        product_id = await _create(test_client)

        response = await test_client.delete(f"{BASE}/{product_id}", params={"fail": "true"})
        assert response.status_code == 200
        assert response.json()["status"] == "rollback"

        assert [r["id"] for r in await _rows(test_client)] == [product_id]

    @pytest.mark.asyncio
    async def test_header_wins_over_query_param(self, test_client):
        product_id = await _create(test_client)

        response = await test_client.delete(
            f"{BASE}/{product_id}", params={"fail": "true"}, headers={"fail": "false"}
        )
        assert response.json()["status"] == "executed"
        assert await _rows(test_client) == []

    @pytest.mark.asyncio
    async def test_non_exact_flag_commits(self, test_client):
        response = await test_client.post(
            BASE, json={"name": "Widget", "category": "Tools"}, headers={"fail": "TRUE"}
        )
        assert response.status_code == 201
        assert response.json()["status"] == "executed"
        assert len(await _rows(test_client)) == 1

    @pytest.mark.asyncio
    async def test_flag_ignored_when_disabled(self, test_client, monkeypatch):
        from productbridge.config import settings
        monkeypatch.setattr(settings, "honor_fail_flag", False)

        response = await test_client.post(
            BASE, json={"name": "Widget", "category": "Tools"}, headers={"fail": "true"}
        )
        assert response.status_code == 201
        assert response.json()["status"] == "executed"
        assert len(await _rows(test_client)) == 1


class TestErrors:

    @pytest.mark.asyncio
    async def test_missing_field_is_client_error(self, test_client):
        response = await test_client.post(BASE, json={"name": "Widget"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_non_integer_id_is_client_error(self, test_client):
        response = await test_client.delete(f"{BASE}/abc")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_blank_name_is_bad_request(self, test_client):
        response = await test_client.post(BASE, json={"name": "  ", "category": "Tools"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "name"

    @pytest.mark.asyncio
    async def test_unknown_id_is_not_found(self, test_client):
        assert (await test_client.get(f"{BASE}/12345")).status_code == 404
        response = await test_client.put(f"{BASE}/12345", json={"name": "X", "category": "Y"})
        assert response.status_code == 404
        assert (await test_client.delete(f"{BASE}/12345")).status_code == 404

    @pytest.mark.asyncio
    async def test_datastore_fault_is_server_error(self, test_client, database):
        async with database.begin() as conn:
            await conn.execute(text("drop table products"))

        response = await test_client.get(BASE)
        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "database_error"
        assert "select" not in body["message"].lower()

        response = await test_client.post(BASE, json={"name": "Widget", "category": "Tools"})
        assert response.status_code == 500


class TestAmbientSurface:

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get(BASE, headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_openapi_document_under_base_path(self, test_client):
        response = await test_client.get("/api/api-doc")
        assert response.status_code == 200
        document = response.json()
        assert document["info"]["title"] == "Products API"
        assert "/api/products/{product_id}" in document["paths"]

    @pytest.mark.asyncio
    async def test_cors_preflight(self, test_client):
        response = await test_client.options(
            BASE,
            headers={
                "Origin": "http://frontend.test",
                "Access-Control-Request-Method": "PUT",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] in ("*", "http://frontend.test")
