"""
Recording, confirming and undoing settlements, and how they move balances.
"""

import pytest


@pytest.fixture
async def dinner(client, trip_setup):
    """Alice paid 900 for the three of them."""
    res = await client.post(
        f"/api/v1/trips/{trip_setup['trip_id']}/expenses",
        json={"amount": 900, "description": "Dinner"},
        headers=trip_setup["alice_h"],
    )
    assert res.status_code == 201
    return trip_setup


async def _balances(client, ctx):
    res = await client.get(f"/api/v1/trips/{ctx['trip_id']}/balances", headers=ctx["alice_h"])
    assert res.status_code == 200
    return res.json()["balances"]


async def _record(client, ctx, to_id, amount, headers):
    return await client.post(
        "/api/v1/settlements/",
        json={"trip_id": ctx["trip_id"], "to_member_id": to_id, "amount": amount},
        headers=headers,
    )


async def test_pending_settlement_does_not_move_balances(client, dinner):
    ctx = dinner
    bob = ctx["bob"]

    res = await _record(client, ctx, ctx["alice"].id, 300, ctx["bob_h"])

    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "pending"
    assert body["from_id"] == bob.id
    assert body["method"] == "upi"

    balances = await _balances(client, ctx)
    assert balances[str(bob.id)] == -300


async def test_confirmed_settlement_moves_balances(client, dinner):
    ctx = dinner
    alice, bob, carol = ctx["alice"], ctx["bob"], ctx["carol"]
    settlement_id = (await _record(client, ctx, alice.id, 300, ctx["bob_h"])).json()["id"]

    res = await client.post(f"/api/v1/settlements/{settlement_id}/confirm", headers=ctx["bob_h"])

    assert res.status_code == 200
    assert res.json()["status"] == "completed"

    balances = await _balances(client, ctx)
    assert balances == {str(alice.id): 300, str(bob.id): 0, str(carol.id): -300}

    res = await client.get(f"/api/v1/trips/{ctx['trip_id']}/balances", headers=ctx["alice_h"])
    transfers = res.json()["transfers"]
    assert [(t["from_id"], t["to_id"], t["amount"]) for t in transfers] == [(carol.id, alice.id, 300)]


async def test_only_debtor_can_confirm(client, dinner):
    ctx = dinner
    settlement_id = (await _record(client, ctx, ctx["alice"].id, 300, ctx["bob_h"])).json()["id"]

    res = await client.post(f"/api/v1/settlements/{settlement_id}/confirm", headers=ctx["alice_h"])

    assert res.status_code == 403


async def test_cannot_confirm_twice(client, dinner):
    ctx = dinner
    settlement_id = (await _record(client, ctx, ctx["alice"].id, 300, ctx["bob_h"])).json()["id"]
    await client.post(f"/api/v1/settlements/{settlement_id}/confirm", headers=ctx["bob_h"])

    res = await client.post(f"/api/v1/settlements/{settlement_id}/confirm", headers=ctx["bob_h"])

    assert res.status_code == 400


async def test_undo_restores_balances(client, dinner):
    ctx = dinner
    bob = ctx["bob"]
    settlement_id = (await _record(client, ctx, ctx["alice"].id, 300, ctx["bob_h"])).json()["id"]
    await client.post(f"/api/v1/settlements/{settlement_id}/confirm", headers=ctx["bob_h"])

    res = await client.delete(f"/api/v1/settlements/{settlement_id}", headers=ctx["alice_h"])
    assert res.status_code == 403

    res = await client.delete(f"/api/v1/settlements/{settlement_id}", headers=ctx["bob_h"])
    assert res.status_code == 200

    balances = await _balances(client, ctx)
    assert balances[str(bob.id)] == -300

    res = await client.post(f"/api/v1/settlements/{settlement_id}/confirm", headers=ctx["bob_h"])
    assert res.status_code == 404


async def test_cannot_settle_with_self(client, dinner):
    ctx = dinner

    res = await _record(client, ctx, ctx["bob"].id, 300, ctx["bob_h"])

    assert res.status_code == 400


async def test_recipient_must_be_in_group(client, dinner, make_member):
    ctx = dinner
    outsider, _ = await make_member("Mallory")

    res = await _record(client, ctx, outsider.id, 300, ctx["bob_h"])

    assert res.status_code == 400


async def test_amount_must_be_positive(client, dinner):
    ctx = dinner

    res = await _record(client, ctx, ctx["alice"].id, 0, ctx["bob_h"])

    assert res.status_code == 422


async def test_summary_lists_computed_and_recorded(client, dinner):
    ctx = dinner
    alice, bob, carol = ctx["alice"], ctx["bob"], ctx["carol"]
    pending_id = (await _record(client, ctx, alice.id, 100, ctx["carol_h"])).json()["id"]
    done_id = (await _record(client, ctx, alice.id, 300, ctx["bob_h"])).json()["id"]
    await client.post(f"/api/v1/settlements/{done_id}/confirm", headers=ctx["bob_h"])

    res = await client.get("/api/v1/settlements/", params={"trip_id": ctx["trip_id"]}, headers=ctx["carol_h"])

    assert res.status_code == 200
    body = res.json()
    assert {s["id"] for s in body["recorded"]} == {pending_id, done_id}
    assert body["balances"] == {str(alice.id): 300, str(bob.id): 0, str(carol.id): -300}
    assert [(t["from_id"], t["to_id"], t["amount"]) for t in body["computed"]] == [(carol.id, alice.id, 300)]
    assert body["computed"][0]["from_name"] == "Carol"
