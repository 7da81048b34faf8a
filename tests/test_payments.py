import pytest


@pytest.fixture()
def loan(create_customer, create_loan, lender_headers):
    customer = create_customer(lender_headers, "1001")
    return create_loan(lender_headers, customer["customer_id"])


def pay(client, headers, loan_id, amount, day="2024-03-15", **extra):
    data = {"loan_id": loan_id, "amount": amount, "payment_date": day}
    data.update(extra)
    return client.post("/payments", json=data, headers=headers)


def loan_state(client, headers, loan_id):
    body = client.get(f"/loans/{loan_id}", headers=headers).json()
    return body["amount_paid"], body["outstanding_balance"]


def test_payment_reduces_outstanding(client, lender, lender_headers, loan):
    r = pay(client, lender_headers, loan["loan_id"], 200, payment_method="transfer", receipt_no=" R-001 ")
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["created_by"] == lender.user_id
    assert body["receipt_no"] == "R-001"
    assert body["payment_type"] == "regular"

    pay(client, lender_headers, loan["loan_id"], 150.25)
    assert loan_state(client, lender_headers, loan["loan_id"]) == (350.25, 699.75)


def test_edit_and_delete_recompute_balance(client, lender_headers, loan):
    p = pay(client, lender_headers, loan["loan_id"], 200).json()

    r = client.put(
        f"/payments/{p['payment_id']}",
        json={"loan_id": loan["loan_id"], "amount": 500, "payment_date": "2024-03-16", "payment_type": "partial"},
        headers=lender_headers,
    )
    assert r.status_code == 200, r.text
    assert r.json()["payment_type"] == "partial"
    assert loan_state(client, lender_headers, loan["loan_id"]) == (500.0, 550.0)

    assert client.delete(f"/payments/{p['payment_id']}", headers=lender_headers).status_code == 200
    assert loan_state(client, lender_headers, loan["loan_id"]) == (0.0, 1050.0)


def test_moving_payment_between_loans(client, lender_headers, loan, create_loan):
    second = create_loan(lender_headers, loan["customer_id"], principal_amount=2000)
    p = pay(client, lender_headers, loan["loan_id"], 100).json()

    r = client.put(
        f"/payments/{p['payment_id']}",
        json={"loan_id": second["loan_id"], "amount": 100, "payment_date": "2024-03-15"},
        headers=lender_headers,
    )
    assert r.status_code == 200
    assert loan_state(client, lender_headers, loan["loan_id"]) == (0.0, 1050.0)
    assert loan_state(client, lender_headers, second["loan_id"]) == (100.0, 2000.0)


@pytest.mark.parametrize("amount", [0, -10, "x"])
def test_invalid_amount(client, lender_headers, loan, amount):
    assert pay(client, lender_headers, loan["loan_id"], amount).status_code == 422


@pytest.mark.parametrize("status", ["paid", "cancelled"])
def test_closed_loans_do_not_accept_payments(client, lender_headers, create_loan, loan, status):
    closed = create_loan(lender_headers, loan["customer_id"], status=status)
    r = pay(client, lender_headers, closed["loan_id"], 100)
    assert r.status_code == 400


def test_overdue_loans_accept_payments(client, lender_headers, create_loan, loan):
    late = create_loan(lender_headers, loan["customer_id"], status="overdue")
    assert pay(client, lender_headers, late["loan_id"], 100).status_code == 201


def test_payments_are_scoped(client, admin_headers, lender_headers, other_headers, loan):
    assert pay(client, other_headers, loan["loan_id"], 100).status_code == 400

    p = pay(client, lender_headers, loan["loan_id"], 100).json()
    pid = p["payment_id"]

    assert client.get("/payments", headers=other_headers).json() == []
    assert client.get(f"/payments/{pid}", headers=other_headers).status_code == 404
    r = client.put(
        f"/payments/{pid}",
        json={"loan_id": loan["loan_id"], "amount": 1, "payment_date": "2024-03-15"},
        headers=other_headers,
    )
    assert r.status_code == 404
    assert client.delete(f"/payments/{pid}", headers=other_headers).status_code == 404

    assert len(client.get("/payments", headers=admin_headers).json()) == 1
    assert loan_state(client, lender_headers, loan["loan_id"]) == (100.0, 950.0)


def test_month_filter(client, lender_headers, loan):
    pay(client, lender_headers, loan["loan_id"], 10, day="2024-02-29")
    pay(client, lender_headers, loan["loan_id"], 20, day="2024-03-01")
    pay(client, lender_headers, loan["loan_id"], 30, day="2024-03-31")
    pay(client, lender_headers, loan["loan_id"], 40, day="2024-04-01")

    march = client.get("/payments", params={"month": "2024-03"}, headers=lender_headers).json()
    assert [p["amount"] for p in march] == [30.0, 20.0]
    assert march[0]["loan"]["customer"]["identity_document"] == "1001"

    feb = client.get("/payments", params={"month": "2024-02"}, headers=lender_headers).json()
    assert [p["amount"] for p in feb] == [10.0]

    assert client.get("/payments", params={"month": "march"}, headers=lender_headers).status_code == 422


def test_date_range_filter(client, lender_headers, loan):
    pay(client, lender_headers, loan["loan_id"], 10, day="2024-03-01")
    pay(client, lender_headers, loan["loan_id"], 20, day="2024-03-20")

    r = client.get("/payments", params={"date_from": "2024-03-10", "date_to": "2024-03-31"}, headers=lender_headers)
    assert [p["amount"] for p in r.json()] == [20.0]


def test_payment_cannot_exceed_outstanding(client, lender_headers, loan):
    r = pay(client, lender_headers, loan["loan_id"], 5000)
    assert r.status_code == 400
    assert loan_state(client, lender_headers, loan["loan_id"]) == (0.0, 1050.0)

    assert pay(client, lender_headers, loan["loan_id"], 1000).status_code == 201
    assert pay(client, lender_headers, loan["loan_id"], 50.01).status_code == 400
    assert pay(client, lender_headers, loan["loan_id"], 50).status_code == 201
    assert loan_state(client, lender_headers, loan["loan_id"]) == (1050.0, 0.0)


def test_edit_cannot_overpay(client, lender_headers, loan, create_loan):
    p = pay(client, lender_headers, loan["loan_id"], 1000).json()
    url = f"/payments/{p['payment_id']}"

    # the payment's own amount counts as available on the same loan
    r = client.put(url, json={"loan_id": loan["loan_id"], "amount": 1050, "payment_date": "2024-03-15"},
                   headers=lender_headers)
    assert r.status_code == 200, r.text

    r = client.put(url, json={"loan_id": loan["loan_id"], "amount": 1050.01, "payment_date": "2024-03-15"},
                   headers=lender_headers)
    assert r.status_code == 400
    assert loan_state(client, lender_headers, loan["loan_id"]) == (1050.0, 0.0)

    small = create_loan(lender_headers, loan["customer_id"], principal_amount=100)
    r = client.put(url, json={"loan_id": small["loan_id"], "amount": 1050, "payment_date": "2024-03-15"},
                   headers=lender_headers)
    assert r.status_code == 400
    assert loan_state(client, lender_headers, small["loan_id"]) == (0.0, 105.0)
