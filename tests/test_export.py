"""
Tests for the full-data export
"""
import pytest


@pytest.fixture
def populated(client, make_conversation, add_message):
    project = client.post("/api/projects", json={"name": "Work"}).json()
    client.post("/api/folders", json={"name": "Inbox"})
    client.post("/api/prompts/library", json={"title": "T", "prompt_template": "P"})

    active = make_conversation("Active", project_id=project["id"])
    add_message(active["id"], "hello")
    add_message(active["id"], "```python\nx = 1\n```", role="assistant")

    archived = make_conversation("Archived")
    add_message(archived["id"], "old")
    client.put(f"/api/conversations/{archived['id']}/archive")

    deleted = make_conversation("Deleted")
    add_message(deleted["id"], "gone")
    client.delete(f"/api/conversations/{deleted['id']}")

    return {"active": active, "archived": archived, "deleted": deleted}


class TestFullExport:
    def test_download_headers(self, client, populated):
        response = client.get("/api/export/full-data")
        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="chatkeep-export-')
        assert disposition.endswith('.json"')

    def test_every_conversation_once(self, client, populated):
        export = client.get("/api/export/full-data").json()
        ids = [c["id"] for c in export["conversations"]]
        assert sorted(ids) == sorted(c["id"] for c in populated.values())

        by_id = {c["id"]: c for c in export["conversations"]}
        assert by_id[populated["archived"]["id"]]["is_archived"] is True
        assert by_id[populated["deleted"]["id"]]["is_deleted"] is True
        assert [m["content"] for m in by_id[populated["active"]["id"]]["messages"]] == [
            "hello",
            "```python\nx = 1\n```",
        ]
        assert len(by_id[populated["active"]["id"]]["artifacts"]) == 1

    def test_statistics_match_nested_data(self, client, populated):
        export = client.get("/api/export/full-data").json()
        stats = export["statistics"]
        conversations = export["conversations"]
        assert stats["total_conversations"] == len(conversations) == 3
        assert stats["total_messages"] == sum(len(c["messages"]) for c in conversations) == 4
        assert stats["total_artifacts"] == sum(len(c["artifacts"]) for c in conversations) == 1
        assert stats["total_projects"] == len(export["projects"]) == 1
        assert stats["total_folders"] == len(export["folders"]) == 1
        assert stats["total_prompts"] == len(export["prompts"]) == 1

    def test_metadata_and_user(self, client, populated):
        export = client.get("/api/export/full-data").json()
        assert export["export_metadata"]["version"] == "1.0"
        assert export["export_metadata"]["export_date"]
        assert export["user"]["id"] == client.get("/api/auth/me").json()["id"]

    def test_export_is_read_only(self, client, populated):
        before = client.get(f"/api/conversations/{populated['active']['id']}").json()
        client.get("/api/export/full-data")
        after = client.get(f"/api/conversations/{populated['active']['id']}").json()
        assert before == after

    def test_empty_account(self, client):
        export = client.get("/api/export/full-data").json()
        assert export["conversations"] == []
        assert export["statistics"]["total_messages"] == 0
