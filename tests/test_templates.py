"""
Tests for conversation and project templates
"""
import pytest


@pytest.fixture
def source(make_conversation, add_message):
    convo = make_conversation("Code review", model="claude-opus-4-20250514")
    add_message(convo["id"], "Review this function")
    add_message(convo["id"], "Looks fine, rename the variable.", role="assistant")
    return convo


class TestConversationTemplates:
    def test_snapshot(self, client, source):
        response = client.post("/api/templates", json={"conversation_id": source["id"], "name": "Reviews"})
        assert response.status_code == 201
        template = response.json()
        assert template["category"] == "General"
        assert template["usage_count"] == 0
        assert template["template_structure"] == {
            "title": "Code review",
            "model": "claude-opus-4-20250514",
            "messages": [
                {"role": "user", "content": "Review this function"},
                {"role": "assistant", "content": "Looks fine, rename the variable."},
            ],
        }

    def test_unknown_conversation(self, client):
        response = client.post("/api/templates", json={"conversation_id": 999, "name": "x"})
        assert response.status_code == 404

    def test_name_required(self, client, source):
        response = client.post("/api/templates", json={"conversation_id": source["id"], "name": " "})
        assert response.status_code == 422

    def test_use_creates_conversation(self, client, source):
        template = client.post("/api/templates", json={"conversation_id": source["id"], "name": "Reviews"}).json()

        response = client.post(f"/api/templates/{template['id']}/use")
        assert response.status_code == 201
        convo = response.json()
        assert convo["id"] != source["id"]
        assert convo["title"] == "Code review"
        assert convo["model"] == "claude-opus-4-20250514"
        assert convo["message_count"] == 2

        messages = client.get(f"/api/conversations/{convo['id']}/messages").json()
        assert [m["role"] for m in messages] == ["user", "assistant"]
        assert messages[1]["parent_message_id"] == messages[0]["id"]

        listed = client.get("/api/templates").json()
        assert listed[0]["usage_count"] == 1

        repaired = client.post("/api/maintenance/recount-messages").json()
        assert repaired["count"] == 0

    def test_list_newest_first_and_delete(self, client, source):
        first = client.post("/api/templates", json={"conversation_id": source["id"], "name": "A"}).json()
        second = client.post("/api/templates", json={"conversation_id": source["id"], "name": "B"}).json()
        assert [t["id"] for t in client.get("/api/templates").json()] == [second["id"], first["id"]]

        assert client.delete(f"/api/templates/{first['id']}").status_code == 204
        assert [t["id"] for t in client.get("/api/templates").json()] == [second["id"]]
        assert client.delete(f"/api/templates/{first['id']}").status_code == 404

    def test_use_unknown_template(self, client):
        assert client.post("/api/templates/42/use").status_code == 404


class TestProjectTemplates:
    @pytest.fixture
    def template(self, client):
        project = client.post(
            "/api/projects",
            json={"name": "Research", "color": "#123456", "custom_instructions": "Cite sources"},
        ).json()
        response = client.post("/api/project-templates", json={"project_id": project["id"], "name": "Research setup"})
        assert response.status_code == 201
        return response.json()

    def test_snapshot(self, template):
        assert template["template_structure"]["name"] == "Research"
        assert template["template_structure"]["color"] == "#123456"

    def test_use_with_new_name(self, client, template):
        response = client.post(f"/api/project-templates/{template['id']}/use", json={"name": "Research 2"})
        assert response.status_code == 201
        project = response.json()
        assert project["name"] == "Research 2"
        assert project["color"] == "#123456"
        assert project["custom_instructions"] == "Cite sources"
        assert client.get("/api/project-templates").json()[0]["usage_count"] == 1

    def test_use_with_taken_name_conflicts(self, client, template):
        response = client.post(f"/api/project-templates/{template['id']}/use")
        assert response.status_code == 409
        assert client.get("/api/project-templates").json()[0]["usage_count"] == 0

    def test_unknown_project(self, client):
        assert client.post("/api/project-templates", json={"project_id": 77, "name": "x"}).status_code == 404

    def test_delete(self, client, template):
        assert client.delete(f"/api/project-templates/{template['id']}").status_code == 204
        assert client.get("/api/project-templates").json() == []
