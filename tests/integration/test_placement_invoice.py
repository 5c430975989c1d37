from datetime import date

import pytest
from httpx import AsyncClient

from app.models import ApprovalSetting, InvoiceConfiguration
from app.models.shared.enums import ApprovalModule, ConfigType
from app.services.approval.rank_order import RANK_ORDER_INVALID
from app.services.approval.sole_approver_guard import SOLE_APPROVER_MESSAGE


def url(placement_id):
    return f"/api/v1/placements/{placement_id}/invoice-configuration"


def custom_payload(*approvers, **overrides):
    payload = {
        "invoice_start_date": "2024-01-01",
        "invoice_settings_config_type": ConfigType.CUSTOM,
        "invoice_approval_config_type": ConfigType.CUSTOM,
        "cycle_id": 1,
        "day_start_id": 5,
        "net_pay_days": 45,
        "approvals": [
            {"rank": rank, "approver_ids": [{"employee_id": e.id}]}
            for rank, e in enumerate(approvers, start=1)
        ],
    }
    payload.update(overrides)
    return payload


def inherited_payload(settings_type, approval_type, **overrides):
    payload = {
        "invoice_start_date": "2024-02-01",
        "invoice_settings_config_type": settings_type,
        "invoice_approval_config_type": approval_type,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
async def approver(make_employee):
    return await make_employee()


@pytest.fixture
async def globals_(make_invoice_configuration, make_approval_setting, approver):
    configuration = await make_invoice_configuration(is_global=True)
    setting = await make_approval_setting([[approver]], approval_module=ApprovalModule.INVOICE, is_global=True)
    return configuration, setting


@pytest.fixture
async def placement(make_employee, make_company, make_placement):
    consultant = await make_employee(employment_type_id=2)
    return await make_placement(consultant, await make_company())


async def test_default_configuration(client: AsyncClient, auth_headers, placement, globals_):
    configuration, setting = globals_

    response = await client.post(
        url(placement.id),
        json=inherited_payload(ConfigType.DEFAULT, ConfigType.DEFAULT),
        headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["invoice_configuration_id"] == configuration.id
    assert data["invoice_approval_id"] == setting.id
    assert data["net_pay_days"] == 30
    assert data["invoice_start_date"] == "2024-02-01"


async def test_client_configuration_must_exist(client: AsyncClient, auth_headers, placement):
    response = await client.post(
        url(placement.id),
        json=inherited_payload(ConfigType.CLIENT, ConfigType.CLIENT),
        headers=auth_headers
    )

    assert response.status_code == 422
    assert response.json()["message"].startswith("Invoice configuration is not defined for client")


async def test_custom_configuration(client: AsyncClient, auth_headers, placement, approver, make_employee):
    second = await make_employee()

    response = await client.post(url(placement.id), json=custom_payload(approver, second), headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["cycle_name"] == "Weekly"
    assert data["day_name"] == "Friday"
    assert data["net_pay_days"] == 45
    assert [a["rank"] for a in data["approvals"]] == [1, 2]

    response = await client.get(url(placement.id), headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["invoice_approval_id"] == data["invoice_approval_id"]


async def test_custom_chain_rank_order(client: AsyncClient, auth_headers, placement, approver, make_employee):
    second = await make_employee()
    payload = custom_payload(approver, second)
    payload["approvals"][1]["rank"] = 3

    response = await client.post(url(placement.id), json=payload, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["message"] == RANK_ORDER_INVALID


async def test_configuration_can_only_be_created_once(client: AsyncClient, auth_headers, placement, approver):
    assert (await client.post(url(placement.id), json=custom_payload(approver), headers=auth_headers)).status_code == 200
    response = await client.post(url(placement.id), json=custom_payload(approver), headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["message"] == f"Invoice configuration already exists for placement {placement.reference_id}"


async def test_start_date_cannot_precede_placement(client: AsyncClient, auth_headers, placement, approver):
    response = await client.post(
        url(placement.id),
        json=custom_payload(approver, invoice_start_date="2023-12-31"),
        headers=auth_headers
    )

    assert response.status_code == 422
    assert response.json()["message"] == "Invoice start date cannot be before the placement start date 2024-01-01"


async def test_get_unconfigured_placement(client: AsyncClient, auth_headers, placement):
    response = await client.get(url(placement.id), headers=auth_headers)
    assert response.status_code == 404


# region ========== Update ==========

async def test_update_custom_in_place(client: AsyncClient, auth_headers, placement, approver, make_employee):
    created = (await client.post(url(placement.id), json=custom_payload(approver), headers=auth_headers)).json()["data"]
    level = created["approvals"][0]
    backup = await make_employee()

    response = await client.put(
        url(placement.id),
        json=custom_payload(
            net_pay_days=60,
            cycle_id=4,
            approvals=[{"id": level["id"], "rank": 1, "approver_ids": [{"employee_id": backup.id}]}],
        ),
        headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["invoice_configuration_id"] == created["invoice_configuration_id"]
    assert data["invoice_approval_id"] == created["invoice_approval_id"]
    assert data["net_pay_days"] == 60
    assert data["day_start_id"] is None
    assert [a["employee_id"] for a in data["approvals"][0]["approver_ids"]] == [approver.id, backup.id]


async def test_update_custom_to_default(client: AsyncClient, auth_headers, session_maker, placement, approver, globals_):
    configuration, setting = globals_
    created = (await client.post(url(placement.id), json=custom_payload(approver), headers=auth_headers)).json()["data"]

    response = await client.put(
        url(placement.id),
        json=inherited_payload(ConfigType.DEFAULT, ConfigType.DEFAULT),
        headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["invoice_configuration_id"] == configuration.id
    assert data["invoice_approval_id"] == setting.id

    async with session_maker() as s:
        assert (await s.get(InvoiceConfiguration, created["invoice_configuration_id"])).deleted_at is not None
        assert (await s.get(ApprovalSetting, created["invoice_approval_id"])).deleted_at is not None


async def test_update_default_to_custom(client: AsyncClient, auth_headers, placement, approver, globals_, make_employee):
    configuration, setting = globals_
    assert (await client.post(
        url(placement.id),
        json=inherited_payload(ConfigType.DEFAULT, ConfigType.DEFAULT),
        headers=auth_headers
    )).status_code == 200
    other = await make_employee()

    response = await client.put(url(placement.id), json=custom_payload(other), headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["invoice_configuration_id"] != configuration.id
    assert data["invoice_approval_id"] != setting.id
    assert data["approvals"][0]["approver_ids"][0]["employee_id"] == other.id


async def test_update_unconfigured_placement(client: AsyncClient, auth_headers, placement, approver):
    response = await client.put(url(placement.id), json=custom_payload(approver), headers=auth_headers)
    assert response.status_code == 404

# endregion


async def test_sole_approver_of_placement_invoice_cannot_leave(client: AsyncClient, auth_headers, placement, approver):
    assert (await client.post(url(placement.id), json=custom_payload(approver), headers=auth_headers)).status_code == 200

    response = await client.put(
        f"/api/v1/employees/{approver.id}/deactivate",
        json={"relieving_date": date.today().isoformat()},
        headers=auth_headers
    )

    assert response.status_code == 422
    assert response.json()["message"] == SOLE_APPROVER_MESSAGE + placement.reference_id
