"""AccessProjector, OrderLedger and TicketThread against an in-memory store"""

from datetime import datetime, timezone

import pytest

from aurora.core.ids import IdGenerator
from aurora.services.access import AccessProjector
from aurora.services.orders import OrderLedger
from aurora.services.tickets import TicketThread
from aurora.stores.document_store import MemoryStore
from aurora.utils.exceptions import OrderNotFound, PermissionDenied, TicketNotFound, UserNotFound

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 0, 123000, tzinfo=timezone.utc)


@pytest.fixture
def seeded_store():
    return MemoryStore(
        {
            "users": [
                {"id": 1, "first_name": "Ana", "username": "AuroraStore_Safe", "role": "admin"},
                {"id": 7, "first_name": "Bo", "username": "bo", "role": "user"},
                {"id": 8, "first_name": "Cy", "username": "cy", "role": "user"},
            ],
            "orders": [],
            "tickets": [],
        }
    )


@pytest.fixture
def ledger(seeded_store):
    return OrderLedger(seeded_store, IdGenerator())


@pytest.fixture
def thread(seeded_store):
    return TicketThread(seeded_store, IdGenerator(), now=lambda: FIXED_NOW)


@pytest.fixture
def projector(seeded_store):
    return AccessProjector(seeded_store)


# ---------- orders ----------

def test_create_assigns_order_id(ledger, seeded_store):
    order = ledger.create({"buyerId": 7, "item": "Gift card", "price": 10})
    assert order["id"].startswith("order_")
    assert seeded_store.read_all()["orders"] == [order]


def test_create_overrides_client_id(ledger):
    order = ledger.create({"id": "mine", "buyerId": 7})
    assert order["id"] != "mine"


def test_create_ids_unique(ledger):
    ids = {ledger.create({"buyerId": 7})["id"] for _ in range(50)}
    assert len(ids) == 50


def test_update_is_shallow_merge(ledger, seeded_store):
    payload = {"buyerId": 7, "item": "Gift card", "payment": {"status": "pending", "method": "aba"}}
    order = ledger.create(payload)
    patch = {"payment": {"status": "paid"}, "fulfilled": True}
    merged = ledger.update(order["id"], patch)
    assert merged == {**payload, **patch, "id": order["id"]}
    assert merged["payment"] == {"status": "paid"}
    assert seeded_store.read_all()["orders"][0] == merged


def test_update_keeps_order_id(ledger):
    order = ledger.create({"buyerId": 7})
    merged = ledger.update(order["id"], {"id": "hijack", "note": "x"})
    assert merged["id"] == order["id"]
    assert merged["note"] == "x"


def test_update_unknown_order(ledger, seeded_store):
    with pytest.raises(OrderNotFound):
        ledger.update("order_404", {"paid": True})
    assert seeded_store.read_all()["orders"] == []


# ---------- tickets ----------

def test_open_ticket(thread, seeded_store):
    ticket = thread.open(7, "Help", "hi")
    assert ticket["ticketId"].startswith("t_")
    assert ticket["userId"] == 7
    assert ticket["status"] == "open"
    assert ticket["createdAt"] == "2024-05-01T12:30:00.123Z"
    assert ticket["messages"] == [{"senderId": 7, "text": "hi", "timestamp": "2024-05-01T12:30:00.123Z"}]
    assert seeded_store.read_all()["tickets"] == [ticket]


def test_reply_appends_and_reopens(thread, seeded_store):
    ticket = thread.open(7, "Help", "hi")
    snapshot = seeded_store.read_all()
    snapshot["tickets"][0]["status"] = "closed"
    seeded_store.write_all(snapshot)

    updated = thread.reply(ticket["ticketId"], 1, "on it")
    assert updated["status"] == "open"
    assert [m["text"] for m in updated["messages"]] == ["hi", "on it"]
    assert updated["createdAt"] == ticket["createdAt"]


def test_reply_count_grows_by_one(thread):
    ticket = thread.open(7, "Help", "hi")
    for n in range(2, 6):
        updated = thread.reply(ticket["ticketId"], 7, f"msg {n}")
        assert len(updated["messages"]) == n


def test_reply_unknown_ticket(thread, seeded_store):
    with pytest.raises(TicketNotFound):
        thread.reply("t_404", 7, "hello?")
    assert seeded_store.read_all()["tickets"] == []


def test_broadcast(thread):
    ticket = thread.broadcast(1, "Sale", "50% off")
    assert ticket["userId"] == "all"
    assert ticket["status"] == "closed"
    assert ticket["subject"] == "[សេចក្តីជូនដំណឹង] Sale"
    assert ticket["messages"][0]["senderId"] == 1


def test_broadcast_custom_marker(seeded_store):
    thread = TicketThread(seeded_store, announcement_marker="[News]")
    assert thread.broadcast(1, "Sale", "x")["subject"] == "[News] Sale"


def test_direct_message(thread):
    ticket = thread.direct_message(1, 8, "Your order", "Shipped")
    assert ticket["userId"] == 8
    assert ticket["status"] == "open"
    assert ticket["subject"] == "Your order"


def test_non_admin_cannot_broadcast(thread, seeded_store):
    with pytest.raises(PermissionDenied):
        thread.broadcast(7, "Spam", "x")
    with pytest.raises(PermissionDenied):
        thread.direct_message(7, 8, "Spam", "x")
    assert seeded_store.read_all()["tickets"] == []


def test_unknown_admin(thread):
    with pytest.raises(UserNotFound):
        thread.broadcast(999, "x", "y")


def test_reply_reopens_broadcast(thread):
    ticket = thread.broadcast(1, "Sale", "x")
    assert thread.reply(ticket["ticketId"], 7, "thanks")["status"] == "open"


# ---------- projection ----------

def test_project_unknown_user(projector):
    with pytest.raises(UserNotFound):
        projector.project(404)


def test_user_sees_own_orders_only(projector, ledger):
    mine = ledger.create({"buyerId": 7})
    ledger.create({"buyerId": 8})
    view = projector.project(7)
    assert view["orders"] == [mine]
    assert "adminData" not in view


def test_buyer_id_match_is_exact(projector, ledger):
    ledger.create({"buyerId": "7"})
    assert projector.project(7)["orders"] == []


def test_ticket_visibility(projector, thread):
    own = thread.open(7, "Help", "hi")
    thread.open(8, "Other", "hello")
    dm_other = thread.direct_message(1, 8, "DM", "for cy")
    announcement = thread.broadcast(1, "Sale", "x")
    view = projector.project(7)
    ids = [t["ticketId"] for t in view["tickets"]]
    assert ids == [own["ticketId"], announcement["ticketId"]]
    assert dm_other["ticketId"] in [t["ticketId"] for t in projector.project(8)["tickets"]]


def test_admin_gets_full_dataset(projector, ledger, thread, seeded_store):
    ledger.create({"buyerId": 7})
    ledger.create({"buyerId": 8})
    thread.open(7, "Help", "hi")
    view = projector.project(1)
    snapshot = seeded_store.read_all()
    assert view["orders"] == []
    assert view["adminData"] == {
        "allOrders": snapshot["orders"],
        "allTickets": snapshot["tickets"],
        "allUsers": snapshot["users"],
    }


def test_project_does_not_write(projector, seeded_store):
    before = seeded_store.read_all()
    projector.project(1)
    assert seeded_store.read_all() == before
