from httpx import AsyncClient

URL = "/api/v1/configurations/approval"


def approval_payload(module, *approvers):
    return {
        "approval_module": module,
        "approvals": [
            {"rank": rank, "approver_ids": [{"employee_id": e.id}]}
            for rank, e in enumerate(approvers, start=1)
        ],
    }


async def test_create_and_list_global_configuration(client: AsyncClient, auth_headers, make_employee):
    first, second = await make_employee(), await make_employee()

    response = await client.post(URL, json=approval_payload(1, first, second), headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["is_global"] is True
    assert data["approval_module"] == 1
    assert [a["rank"] for a in data["approvals"]] == [1, 2]

    response = await client.get(URL, params={"approval_module": 1}, headers=auth_headers)
    assert response.status_code == 200
    assert [c["id"] for c in response.json()["data"]] == [data["id"]]

    response = await client.get(URL, params={"approval_module": 2}, headers=auth_headers)
    assert response.json()["data"] == []


async def test_one_global_configuration_per_module(client: AsyncClient, auth_headers, make_employee):
    approver = await make_employee()

    assert (await client.post(URL, json=approval_payload(1, approver), headers=auth_headers)).status_code == 200
    assert (await client.post(URL, json=approval_payload(2, approver), headers=auth_headers)).status_code == 200
    response = await client.post(URL, json=approval_payload(1, approver), headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["message"] == "Global approval configuration already exists for module 1"


async def test_unknown_module_is_rejected(client: AsyncClient, auth_headers, make_employee):
    approver = await make_employee()
    response = await client.post(URL, json=approval_payload(3, approver), headers=auth_headers)
    assert response.status_code == 422
    assert response.json()["message"].startswith("approval_module")


async def test_update_global_configuration(client: AsyncClient, auth_headers, make_employee):
    first, second = await make_employee(), await make_employee()
    created = (await client.post(URL, json=approval_payload(1, first), headers=auth_headers)).json()["data"]
    level = created["approvals"][0]

    response = await client.put(
        f"{URL}/{created['id']}",
        json={
            "approvals": [
                {"id": level["id"], "rank": 1, "approver_ids": [{"employee_id": second.id}]},
            ],
            "delete_user_ids": [level["approver_ids"][0]["id"]],
        },
        headers=auth_headers
    )

    assert response.status_code == 200
    approvers = response.json()["data"]["approvals"][0]["approver_ids"]
    assert [a["employee_id"] for a in approvers] == [second.id]


async def test_update_requires_global_setting(client: AsyncClient, auth_headers, make_employee, make_approval_setting):
    approver = await make_employee()
    client_setting = await make_approval_setting([[approver]])

    response = await client.put(
        f"{URL}/{client_setting.id}",
        json={"approvals": [{"rank": 1, "approver_ids": [{"employee_id": approver.id}]}]},
        headers=auth_headers
    )

    assert response.status_code == 404


async def test_list_requires_module(client: AsyncClient, auth_headers):
    response = await client.get(URL, headers=auth_headers)
    assert response.status_code == 422


async def test_update_rejects_repeated_level(client: AsyncClient, auth_headers, make_employee):
    first, second = await make_employee(), await make_employee()
    created = (await client.post(URL, json=approval_payload(1, first), headers=auth_headers)).json()["data"]
    level = created["approvals"][0]
    entry = {"id": level["id"], "rank": 1, "approver_ids": [{"employee_id": second.id}]}

    response = await client.put(
        f"{URL}/{created['id']}",
        json={"approvals": [entry, entry], "delete_user_ids": [level["approver_ids"][0]["id"]]},
        headers=auth_headers
    )

    assert response.status_code == 422
    assert response.json()["message"] == f"Approval level {level['id']} is repeated"
