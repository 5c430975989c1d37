import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.models import ApprovalSetting
from app.models.shared.enums import ApprovalModule


def invoice_payload(approvers, **overrides):
    payload = {
        "cycle_id": 4,
        "net_pay_days": 45,
        "approvals": [
            {"rank": rank, "approver_ids": [{"employee_id": e.id}]}
            for rank, e in enumerate(approvers, start=1)
        ],
    }
    payload.update(overrides)
    return payload


def url(company_id):
    return f"/api/v1/companies/{company_id}/invoice-configuration"


async def test_create_invoice_configuration(client: AsyncClient, auth_headers, session_maker, make_company, make_employee):
    company = await make_company()
    approver = await make_employee()

    response = await client.post(url(company.id), json=invoice_payload([approver]), headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["cycle_name"] == "Monthly"
    assert data["day_start_id"] is None
    assert data["net_pay_days"] == 45
    assert data["approvals"][0]["approver_ids"][0]["employee_id"] == approver.id

    async with session_maker() as s:
        setting = await s.get(ApprovalSetting, data["invoice_approval_id"])
        assert setting.approval_module == ApprovalModule.INVOICE
        assert setting.is_global is False
        assert setting.approval_count == 1


async def test_invoice_configuration_can_only_be_created_once(client: AsyncClient, auth_headers, make_company, make_employee):
    company = await make_company()
    approver = await make_employee()

    assert (await client.post(url(company.id), json=invoice_payload([approver]), headers=auth_headers)).status_code == 200
    response = await client.post(url(company.id), json=invoice_payload([approver]), headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["message"] == f"Invoice configuration already exists for client {company.reference_id}"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"cycle_id": None}, "Cycle is required"),
        ({"cycle_id": 9}, "Cycle is invalid"),
        ({"cycle_id": 1, "day_start_id": 8}, "Start day is invalid"),
        ({"net_pay_days": None}, "Net pay days are required"),
        ({"net_pay_days": -1}, "Net pay days must be between 0 and 365"),
    ],
)
async def test_invoice_fields_are_validated(client: AsyncClient, auth_headers, make_company, make_employee, overrides, message):
    company = await make_company()
    approver = await make_employee()

    response = await client.post(url(company.id), json=invoice_payload([approver], **overrides), headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["message"] == message


async def test_update_invoice_configuration(client: AsyncClient, auth_headers, session_maker, make_company, make_employee):
    company = await make_company()
    first, second = await make_employee(), await make_employee()
    created = (await client.post(url(company.id), json=invoice_payload([first]), headers=auth_headers)).json()["data"]
    level_one = created["approvals"][0]

    response = await client.put(
        url(company.id),
        json=invoice_payload(
            [],
            cycle_id=1,
            day_start_id=7,
            net_pay_days=15,
            approvals=[
                {"id": level_one["id"], "rank": 1, "approver_ids": []},
                {"rank": 2, "approver_ids": [{"employee_id": second.id}]},
            ]
        ),
        headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["invoice_configuration_id"] == created["invoice_configuration_id"]
    assert data["day_name"] == "Sunday"
    assert data["net_pay_days"] == 15
    assert [a["rank"] for a in data["approvals"]] == [1, 2]

    async with session_maker() as s:
        setting = await s.get(ApprovalSetting, data["invoice_approval_id"])
        assert setting.approval_count == 2


async def test_update_requires_existing_configuration(client: AsyncClient, auth_headers, make_company, make_employee):
    company = await make_company()
    approver = await make_employee()

    response = await client.put(url(company.id), json=invoice_payload([approver]), headers=auth_headers)

    assert response.status_code == 404
