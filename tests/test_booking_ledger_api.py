"""
Integration tests for the booking ledger endpoints.
"""

import uuid

import pytest
from sqlalchemy import update

from app.api.booking_ledger import service as ledger_service
from app.api.booking_ledger.models import BookingLedgerEntry

LEDGER_URL = "/api/v1/booking-ledger"


def _fields(body):
    return {err["field"] for err in body["errors"]}


async def _summary(client, booking, **params):
    response = await client.get(f"{LEDGER_URL}/client/{booking.id}", params=params)
    assert response.status_code == 200
    return response.json()["summary"]


async def _create(client, payload):
    response = await client.post(LEDGER_URL, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


# ---------- Creation ----------

async def test_create_cheque_payment(client, booking, cheque_payload):
    response = await client.post(LEDGER_URL, json=cheque_payload)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["amount"] == 50000
    assert data["demand"] == 100000
    assert data["transactionId"].startswith("TXN-")
    assert data["clientId"] == str(booking.id)
    assert data["isDeleted"] is False
    assert data["createdBy"] == "sales.manager"
    assert data["paymentDetails"]["chequeNumber"] == "000123"
    assert data["paymentDetails"]["bankName"] == "SBI"


async def test_create_appends_payment_to_booking(client, db_session, booking, cheque_payload):
    data = await _create(client, cheque_payload)

    await db_session.refresh(booking)
    assert booking.payments == [data["id"]]


async def test_create_uses_explicit_created_by(client, cheque_payload):
    cheque_payload["createdBy"] = "accounts.desk"

    data = await _create(client, cheque_payload)

    assert data["createdBy"] == "accounts.desk"


async def test_transaction_ids_are_unique_per_entry(client, make_payload):
    first = await _create(client, make_payload())
    second = await _create(client, make_payload())

    assert first["transactionId"] != second["transactionId"]


async def test_create_drops_details_unused_by_method(client, make_payload):
    payload = make_payload(method="cash")
    payload["paymentDetails"] = {"chequeNumber": "42", "notes": "counter receipt 17"}

    data = await _create(client, payload)

    assert data["paymentDetails"] == {"notes": "counter receipt 17"}


async def test_create_missing_cheque_date(client, cheque_payload):
    del cheque_payload["paymentDetails"]["chequeDate"]

    response = await client.post(LEDGER_URL, json=cheque_payload)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "paymentDetails.chequeDate" in _fields(body)
    assert "paymentDetails.chequeDate" in body["error"]


async def test_create_due_date_before_cheque_date(client, cheque_payload):
    cheque_payload["paymentDetails"]["dueDate"] = "2023-12-25"

    response = await client.post(LEDGER_URL, json=cheque_payload)

    assert response.status_code == 400
    assert _fields(response.json()) == {"paymentDetails.dueDate"}


async def test_create_cheque_reports_every_missing_field(client, cheque_payload):
    cheque_payload["paymentDetails"] = {}

    response = await client.post(LEDGER_URL, json=cheque_payload)

    assert response.status_code == 400
    assert _fields(response.json()) == {
        "paymentDetails.chequeNumber",
        "paymentDetails.bankName",
        "paymentDetails.chequeDate",
        "paymentDetails.dueDate",
    }


@pytest.mark.parametrize("method", ["upi", "online-payment"])
async def test_create_online_payment_without_transaction_id(client, make_payload, method):
    payload = make_payload(method=method)
    del payload["paymentDetails"]["transactionId"]

    response = await client.post(LEDGER_URL, json=payload)

    assert response.status_code == 400
    body = response.json()
    assert "paymentDetails.transactionId" in _fields(body)
    assert "transactionId" in body["message"]


@pytest.mark.parametrize("method", ["neft", "rtgs", "imps", "bank-transfer"])
async def test_create_bank_transfer_without_reference_number(client, make_payload, method):
    payload = make_payload(method=method)
    del payload["paymentDetails"]["referenceNumber"]

    response = await client.post(LEDGER_URL, json=payload)

    assert response.status_code == 400
    assert "paymentDetails.referenceNumber" in _fields(response.json())


async def test_create_reports_all_structural_errors(client, make_payload):
    payload = make_payload(amount=0, description="", method="cash")
    payload["demand"] = -1
    payload["type"] = "bonus"
    del payload["toAccount"]

    response = await client.post(LEDGER_URL, json=payload)

    assert response.status_code == 400
    assert {"amount", "demand", "description", "type", "toAccount"} <= _fields(response.json())


async def test_create_rejects_unknown_method(client, make_payload):
    payload = make_payload()
    payload["method"] = "crypto"

    response = await client.post(LEDGER_URL, json=payload)

    assert response.status_code == 400
    assert "method" in _fields(response.json())


async def test_create_rejects_absurd_amount(client, make_payload):
    response = await client.post(LEDGER_URL, json=make_payload(amount=1_000_000_000))

    assert response.status_code == 400
    assert "amount" in _fields(response.json())


async def test_create_rejects_sub_paisa_amount(client, make_payload):
    response = await client.post(LEDGER_URL, json=make_payload(amount=0.001))

    assert response.status_code == 400
    assert "amount" in _fields(response.json())


async def test_create_rejects_demand_with_three_decimals(client, make_payload):
    payload = make_payload()
    payload["demand"] = 10.555

    response = await client.post(LEDGER_URL, json=payload)

    assert response.status_code == 400
    assert _fields(response.json()) == {"demand"}


async def test_create_keeps_two_decimal_amount(client, make_payload):
    data = await _create(client, make_payload(amount=1234.56))

    assert data["amount"] == 1234.56


async def test_create_reports_field_and_detail_errors_together(client, cheque_payload):
    cheque_payload["amount"] = -5
    del cheque_payload["paymentDetails"]["chequeDate"]

    response = await client.post(LEDGER_URL, json=cheque_payload)

    assert response.status_code == 400
    body = response.json()
    assert _fields(body) == {"amount", "paymentDetails.chequeDate"}
    assert body["message"] == "Validation failed: amount, paymentDetails.chequeDate"


async def test_create_rejects_stage_percentage_over_100(client, make_payload):
    response = await client.post(LEDGER_URL, json=make_payload(stagePercentage=120))

    assert response.status_code == 400
    assert "stagePercentage" in _fields(response.json())


async def test_create_for_unknown_booking(client, make_payload):
    payload = make_payload()
    payload["clientId"] = str(uuid.uuid4())

    response = await client.post(LEDGER_URL, json=payload)

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "Client booking not found"


# ---------- Listing & summary ----------

async def test_summary_buckets(client, booking, make_payload):
    await _create(client, make_payload(amount=1000, payment_type="schedule-payment"))
    await _create(client, make_payload(amount=500, payment_type="advance"))
    await _create(client, make_payload(amount=25, payment_type="adjustment"))
    await _create(client, make_payload(amount=200, payment_type="refund"))
    await _create(client, make_payload(amount=50, payment_type="penalty"))

    summary = await _summary(client, booking)

    assert summary == {
        "totalAmount": 1775,
        "totalPayments": 1525,
        "totalRefunds": 200,
        "totalPenalties": 50,
    }
    assert summary["totalAmount"] == (
        summary["totalPayments"] + summary["totalRefunds"] + summary["totalPenalties"]
    )


async def test_summary_is_zero_without_entries(client, booking):
    summary = await _summary(client, booking)

    assert summary == {
        "totalAmount": 0,
        "totalPayments": 0,
        "totalRefunds": 0,
        "totalPenalties": 0,
    }


async def test_listing_orders_by_date_desc_and_paginates(client, booking, make_payload):
    for day in ("2024-03-01", "2024-03-05", "2024-03-03", "2024-03-02", "2024-03-04"):
        await _create(client, make_payload(date=day, description=day))

    response = await client.get(
        f"{LEDGER_URL}/client/{booking.id}", params={"page": 2, "limit": 2}
    )

    assert response.status_code == 200
    body = response.json()
    assert [row["description"] for row in body["data"]] == ["2024-03-03", "2024-03-02"]
    assert body["meta"]["pagination"] == {
        "page": 2,
        "pageSize": 2,
        "totalRecords": 5,
        "totalPages": 3,
    }
    # summary is not paginated
    assert body["summary"]["totalAmount"] == 5000


async def test_listing_carries_booking_summary(client, booking, make_payload):
    await _create(client, make_payload())

    body = (await client.get(f"{LEDGER_URL}/client/{booking.id}")).json()

    assert body["booking"]["applicant"] == "Asha Kulkarni"
    assert body["booking"]["unit"] == "A-702"
    assert body["booking"]["phoneNo"] == "9820012345"


async def test_listing_is_repeatable(client, booking, make_payload):
    for _ in range(4):
        await _create(client, make_payload(date="2024-03-01"))

    url = f"{LEDGER_URL}/client/{booking.id}"
    first = (await client.get(url)).json()
    second = (await client.get(url)).json()

    assert first["data"] == second["data"]
    assert first["summary"] == second["summary"]


async def test_listing_filters_by_type_and_method(client, booking, make_payload):
    await _create(client, make_payload(amount=1000, method="cash"))
    await _create(client, make_payload(amount=300, payment_type="refund", method="neft"))
    await _create(client, make_payload(amount=700, method="upi"))

    url = f"{LEDGER_URL}/client/{booking.id}"
    refunds = (await client.get(url, params={"type": "refund"})).json()
    upi = (await client.get(url, params={"method": "upi"})).json()

    assert [row["amount"] for row in refunds["data"]] == [300]
    assert refunds["summary"]["totalAmount"] == 300
    assert refunds["summary"]["totalRefunds"] == 300
    assert [row["method"] for row in upi["data"]] == ["upi"]
    assert upi["summary"]["totalPayments"] == 700


async def test_listing_ignores_unknown_type_filter(client, booking, make_payload):
    await _create(client, make_payload())
    await _create(client, make_payload(payment_type="penalty"))

    body = (await client.get(f"{LEDGER_URL}/client/{booking.id}", params={"type": "bonus"})).json()

    assert body["meta"]["pagination"]["totalRecords"] == 2


async def test_listing_date_range_is_inclusive(client, booking, make_payload):
    await _create(client, make_payload(amount=1, date="2024-01-31T23:00:00"))
    await _create(client, make_payload(amount=10, date="2024-02-01T00:00:00"))
    await _create(client, make_payload(amount=100, date="2024-02-29T18:30:00"))
    await _create(client, make_payload(amount=1000, date="2024-03-01T00:00:00"))

    body = (
        await client.get(
            f"{LEDGER_URL}/client/{booking.id}",
            params={"fromDate": "2024-02-01", "toDate": "2024-02-29"},
        )
    ).json()

    assert sorted(row["amount"] for row in body["data"]) == [10, 100]
    assert body["summary"]["totalAmount"] == 110


async def test_listing_rejects_bad_client_id(client):
    response = await client.get(f"{LEDGER_URL}/client/not-a-uuid")

    assert response.status_code == 400


# ---------- Soft delete & restore ----------

async def test_soft_delete_excludes_entry_from_summary(client, booking, make_payload):
    keep = await _create(client, make_payload(amount=1000))
    drop = await _create(client, make_payload(amount=400))

    response = await client.request(
        "DELETE", f"{LEDGER_URL}/{drop['id']}", json={"reason": "duplicate entry"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["isDeleted"] is True
    assert data["deletedDate"] is not None
    assert data["deletedBy"] == "sales.manager"
    assert data["deletionReason"] == "duplicate entry"

    body = (await client.get(f"{LEDGER_URL}/client/{booking.id}")).json()
    assert [row["id"] for row in body["data"]] == [keep["id"]]
    assert body["summary"]["totalAmount"] == 1000


async def test_include_deleted_lists_rows_but_not_totals(client, booking, make_payload):
    await _create(client, make_payload(amount=1000))
    drop = await _create(client, make_payload(amount=400))
    await client.delete(f"{LEDGER_URL}/{drop['id']}")

    body = (
        await client.get(
            f"{LEDGER_URL}/client/{booking.id}", params={"includeDeleted": "true"}
        )
    ).json()

    assert body["meta"]["pagination"]["totalRecords"] == 2
    assert body["summary"]["totalAmount"] == 1000


async def test_soft_delete_without_body_uses_caller(client, make_payload):
    entry = await _create(client, make_payload())

    response = await client.delete(f"{LEDGER_URL}/{entry['id']}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["deletedBy"] == "sales.manager"
    assert data["deletionReason"] is None


async def test_soft_delete_twice_is_a_conflict(client, make_payload):
    entry = await _create(client, make_payload())
    await client.delete(f"{LEDGER_URL}/{entry['id']}")

    response = await client.delete(f"{LEDGER_URL}/{entry['id']}")

    assert response.status_code == 400
    assert response.json()["message"] == "Payment is already deleted"


async def test_soft_delete_unknown_payment(client):
    response = await client.delete(f"{LEDGER_URL}/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["error"] == "Payment not found"


async def test_restore_clears_deletion_fields(client, booking, make_payload):
    entry = await _create(client, make_payload(amount=750))
    await client.request(
        "DELETE",
        f"{LEDGER_URL}/{entry['id']}",
        json={"reason": "entered twice", "deletedBy": "auditor"},
    )

    response = await client.patch(f"{LEDGER_URL}/{entry['id']}/restore")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["isDeleted"] is False
    assert data["deletedBy"] is None
    assert data["deletedDate"] is None
    assert data["deletionReason"] is None
    assert (await _summary(client, booking))["totalAmount"] == 750


async def test_restore_active_payment_is_a_conflict(client, make_payload):
    entry = await _create(client, make_payload())

    response = await client.patch(f"{LEDGER_URL}/{entry['id']}/restore")

    assert response.status_code == 400
    assert response.json()["message"] == "Payment is not deleted"


async def test_restore_unknown_payment(client):
    response = await client.patch(f"{LEDGER_URL}/{uuid.uuid4()}/restore")

    assert response.status_code == 404


def _flip_after_lookup(monkeypatch, session_factory, **values):
    """Commit a change to the entry from another session right after it is loaded."""
    real_get_payment = ledger_service.get_payment

    async def get_then_change(db, payment_id):
        entry = await real_get_payment(db, payment_id)
        async with session_factory() as other:
            await other.execute(
                update(BookingLedgerEntry)
                .where(BookingLedgerEntry.id == payment_id)
                .values(**values)
            )
            await other.commit()
        return entry

    monkeypatch.setattr(ledger_service, "get_payment", get_then_change)


async def test_soft_delete_loses_race_to_concurrent_delete(
    client, session_factory, make_payload, monkeypatch
):
    entry = await _create(client, make_payload())
    _flip_after_lookup(monkeypatch, session_factory, is_deleted=True, deleted_by="accounts.desk")

    response = await client.delete(f"{LEDGER_URL}/{entry['id']}")

    assert response.status_code == 400
    assert response.json()["message"] == "Payment is already deleted"
    async with session_factory() as session:
        stored = await session.get(BookingLedgerEntry, uuid.UUID(entry["id"]))
    assert stored.deleted_by == "accounts.desk"


async def test_restore_loses_race_to_concurrent_restore(
    client, session_factory, make_payload, monkeypatch
):
    entry = await _create(client, make_payload())
    await client.delete(f"{LEDGER_URL}/{entry['id']}")
    _flip_after_lookup(monkeypatch, session_factory, is_deleted=False, deleted_by=None)

    response = await client.patch(f"{LEDGER_URL}/{entry['id']}/restore")

    assert response.status_code == 400
    assert response.json()["message"] == "Payment is not deleted"


# ---------- End to end ----------

async def test_cheque_payment_lifecycle(client, booking, cheque_payload, make_payload):
    await _create(client, make_payload(amount=10000, payment_type="advance"))
    before = await _summary(client, booking)

    cheque = await _create(client, cheque_payload)
    after_create = await _summary(client, booking)
    assert after_create["totalPayments"] == before["totalPayments"] + 50000

    rejected = make_payload(method="online-payment")
    del rejected["paymentDetails"]["transactionId"]
    response = await client.post(LEDGER_URL, json=rejected)
    assert response.status_code == 400
    assert "transactionId" in response.json()["message"]

    response = await client.request(
        "DELETE", f"{LEDGER_URL}/{cheque['id']}", json={"reason": "duplicate entry"}
    )
    assert response.status_code == 200
    assert await _summary(client, booking) == before

    response = await client.patch(f"{LEDGER_URL}/{cheque['id']}/restore")
    assert response.status_code == 200
    assert await _summary(client, booking) == after_create
