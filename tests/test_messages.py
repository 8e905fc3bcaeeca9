"""
Tests for appending, editing, branching and deleting messages
"""
from chatkeep.services.message_service import generate_title


def test_math_scenario(client, make_conversation):
    convo = make_conversation("Math Test")
    response = client.post(
        f"/api/conversations/{convo['id']}/messages",
        json={"content": "Show me a math equation", "role": "user"},
    )
    assert response.status_code == 201
    message = response.json()
    assert message["conversation_id"] == convo["id"]
    assert message["role"] == "user"
    assert message["edited_at"] is None

    refreshed = client.get(f"/api/conversations/{convo['id']}").json()
    assert refreshed["message_count"] == 1
    assert refreshed["title"] == "Math Test"


class TestAppendMessage:
    def test_counts_and_activity(self, client, make_conversation, add_message):
        convo = make_conversation()
        add_message(convo["id"], "one")
        add_message(convo["id"], "two", role="assistant", tokens=7)

        refreshed = client.get(f"/api/conversations/{convo['id']}").json()
        assert refreshed["message_count"] == 2
        assert refreshed["token_count"] >= 7
        assert refreshed["last_message_at"] is not None

    def test_messages_listed_in_order(self, client, make_conversation, add_message):
        convo = make_conversation()
        for text in ("a", "b", "c"):
            add_message(convo["id"], text)
        messages = client.get(f"/api/conversations/{convo['id']}/messages").json()
        assert [m["content"] for m in messages] == ["a", "b", "c"]
        assert messages[0]["parent_message_id"] is None
        assert messages[2]["parent_message_id"] == messages[1]["id"]

    def test_images_are_kept_in_order(self, client, make_conversation, add_message):
        convo = make_conversation()
        images = [
            {"media_type": "image/png", "data": "iVBORw0KGgo=", "name": "one.png"},
            {"media_type": "image/jpeg", "url": "https://example.com/two.jpg"},
        ]
        message = add_message(convo["id"], "look", images=images)
        assert [i["media_type"] for i in message["images"]] == ["image/png", "image/jpeg"]

    def test_image_without_source_rejected(self, client, make_conversation):
        convo = make_conversation()
        response = client.post(
            f"/api/conversations/{convo['id']}/messages",
            json={"content": "look", "images": [{"media_type": "image/png"}]},
        )
        assert response.status_code == 422

    def test_empty_content_rejected(self, client, make_conversation):
        convo = make_conversation()
        response = client.post(f"/api/conversations/{convo['id']}/messages", json={"content": ""})
        assert response.status_code == 422

    def test_negative_tokens_rejected(self, client, make_conversation):
        convo = make_conversation()
        response = client.post(f"/api/conversations/{convo['id']}/messages", json={"content": "x", "tokens": -500})
        assert response.status_code == 422
        assert client.get(f"/api/conversations/{convo['id']}").json()["token_count"] == 0

    def test_unknown_role_rejected(self, client, make_conversation):
        convo = make_conversation()
        response = client.post(f"/api/conversations/{convo['id']}/messages", json={"content": "x", "role": "tool"})
        assert response.status_code == 422

    def test_unknown_conversation(self, client):
        response = client.post("/api/conversations/404/messages", json={"content": "hi"})
        assert response.status_code == 404
        assert client.get("/api/conversations/404/messages").status_code == 404

    def test_first_message_titles_default_conversation(self, client, make_conversation, add_message):
        convo = make_conversation("New Conversation")
        add_message(convo["id"], "Can you explain recursion in Python")
        assert client.get(f"/api/conversations/{convo['id']}").json()["title"] == "Explain recursion in Python"

    def test_assistant_code_blocks_become_artifacts(self, client, make_conversation, add_message):
        convo = make_conversation()
        reply = add_message(
            convo["id"],
            "Here you go:\n\n```python\nprint('hi')\n```\n\n```mermaid\ngraph TD\n  A-->B\n```",
            role="assistant",
        )
        artifacts = client.get(f"/api/messages/{reply['id']}/artifacts").json()
        assert [(a["type"], a["language"], a["version"]) for a in artifacts] == [
            ("code", "python", 1),
            ("mermaid", "mermaid", 1),
        ]
        assert artifacts[0]["content"] == "print('hi')\n"

    def test_user_code_blocks_are_not_artifacts(self, client, make_conversation, add_message):
        convo = make_conversation()
        message = add_message(convo["id"], "```js\nconsole.log(1)\n```")
        assert client.get(f"/api/messages/{message['id']}/artifacts").json() == []


class TestEditMessage:
    def test_edit_sets_timestamp_and_keeps_identity(self, client, make_conversation, add_message):
        convo = make_conversation()
        original = add_message(convo["id"], "typo")

        response = client.put(f"/api/messages/{original['id']}", json={"content": "fixed"})
        assert response.status_code == 200
        body = response.json()
        assert body["branched"] is False
        edited = body["message"]
        assert edited["id"] == original["id"]
        assert edited["role"] == original["role"]
        assert edited["conversation_id"] == original["conversation_id"]
        assert edited["content"] == "fixed"
        assert edited["edited_at"] is not None

    def test_edit_requires_content(self, client, make_conversation, add_message):
        convo = make_conversation()
        message = add_message(convo["id"])
        assert client.put(f"/api/messages/{message['id']}", json={"content": " "}).status_code == 422

    def test_edit_missing_message(self, client):
        assert client.put("/api/messages/999", json={"content": "x"}).status_code == 404

    def test_branch_edit_creates_sibling(self, client, make_conversation, add_message):
        convo = make_conversation()
        question = add_message(convo["id"], "question")
        add_message(convo["id"], "answer", role="assistant")

        body = client.put(
            f"/api/messages/{question['id']}",
            json={"content": "better question", "create_branch": True},
        ).json()
        assert body["branched"] is True
        assert body["original_message_id"] == question["id"]
        sibling = body["message"]
        assert sibling["id"] != question["id"]
        assert sibling["parent_message_id"] == question["parent_message_id"]

        branches = client.get(f"/api/conversations/{convo['id']}/branches").json()
        assert len(branches["branches"]) == 1
        point = branches["branches"][0]
        assert point["parent_id"] is None
        assert {b["message_id"] for b in point["branches"]} == {question["id"], sibling["id"]}

        assert client.get(f"/api/conversations/{convo['id']}").json()["message_count"] == 3

    def test_branch_on_last_message_edits_in_place(self, client, make_conversation, add_message):
        convo = make_conversation()
        last = add_message(convo["id"], "only one")
        body = client.put(f"/api/messages/{last['id']}", json={"content": "changed", "create_branch": True}).json()
        assert body["branched"] is False
        assert body["message"]["id"] == last["id"]


class TestDeleteMessage:
    def test_delete_updates_count(self, client, make_conversation, add_message):
        convo = make_conversation()
        first = add_message(convo["id"], "one")
        second = add_message(convo["id"], "two")
        third = add_message(convo["id"], "three")

        assert client.delete(f"/api/messages/{second['id']}").status_code == 204

        messages = client.get(f"/api/conversations/{convo['id']}/messages").json()
        assert [m["id"] for m in messages] == [first["id"], third["id"]]
        assert messages[1]["parent_message_id"] == first["id"]
        assert client.get(f"/api/conversations/{convo['id']}").json()["message_count"] == 2

    def test_message_with_artifacts_cannot_be_deleted(self, client, make_conversation, add_message):
        convo = make_conversation()
        reply = add_message(convo["id"], "```sql\nselect 1;\n```", role="assistant")
        response = client.delete(f"/api/messages/{reply['id']}")
        assert response.status_code == 409
        assert response.json()["type"] == "conflict"

    def test_delete_missing(self, client):
        assert client.delete("/api/messages/31337").status_code == 404


class TestGenerateTitle:
    def test_strips_leading_filler(self):
        assert generate_title("please summarize this article") == "Summarize this article"

    def test_truncates_long_titles(self):
        title = generate_title("x" * 80)
        assert len(title) == 50
        assert title.endswith("...")

    def test_falls_back_when_too_short(self):
        assert generate_title("hi") == "New Chat"
