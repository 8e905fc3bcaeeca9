"""
Tests for counter read-repair
"""
from chatkeep.models.conversation import Conversation


def test_consistent_counters_untouched(client, make_conversation, add_message):
    convo = make_conversation()
    add_message(convo["id"])
    assert client.post("/api/maintenance/recount-messages").json() == {"repaired": [], "count": 0}


def test_drifted_counters_repaired(client, make_conversation, add_message, db_session):
    convo = make_conversation()
    add_message(convo["id"], "one", tokens=3)
    add_message(convo["id"], "two", tokens=4)
    other = make_conversation()

    row = db_session.get(Conversation, convo["id"])
    row.message_count = 10
    row.token_count = 0
    db_session.commit()

    result = client.post("/api/maintenance/recount-messages").json()
    assert result == {"repaired": [convo["id"]], "count": 1}

    fixed = client.get(f"/api/conversations/{convo['id']}").json()
    assert fixed["message_count"] == 2
    assert fixed["token_count"] == 7
    assert client.get(f"/api/conversations/{other['id']}").json()["message_count"] == 0


def test_single_conversation(client, make_conversation, db_session):
    a = make_conversation("a")
    b = make_conversation("b")
    for convo_id in (a["id"], b["id"]):
        db_session.get(Conversation, convo_id).message_count = 5
    db_session.commit()

    result = client.post("/api/maintenance/recount-messages", params={"conversation_id": a["id"]}).json()
    assert result["repaired"] == [a["id"]]
    assert client.get(f"/api/conversations/{b['id']}").json()["message_count"] == 5
