import logging

from httpx import AsyncClient


async def test_request_log_carries_client_context(client: AsyncClient, auth_headers, make_employee, caplog):
    caplog.set_level(logging.INFO, logger="app")
    employee = await make_employee()
    headers = {
        **auth_headers,
        "X-Request-Id": "req-42",
        "X-Session-Id": "sess-7",
        "User-Agent": "backoffice-web/1.0",
    }

    response = await client.put(
        f"/api/v1/employees/{employee.id}/rejoin",
        json={"rejoin_date": "2024-01-01"},
        headers=headers
    )

    assert response.status_code == 422
    assert response.headers["X-Request-Id"] == "req-42"
    request_logs = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Update employee rejoin request")]
    assert len(request_logs) == 1
    assert "request_id=req-42" in request_logs[0]
    assert "session_id=sess-7" in request_logs[0]
    assert "user_agent=backoffice-web/1.0" in request_logs[0]
