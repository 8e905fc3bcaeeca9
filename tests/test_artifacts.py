"""
Tests for artifact creation and append-only versioning
"""
import pytest

from chatkeep.services.artifact_service import detect_artifacts


@pytest.fixture
def message(make_conversation, add_message):
    convo = make_conversation("Artifacts")
    return add_message(convo["id"], "Write me a function", role="user")


def create(client, message, **overrides):
    payload = {
        "message_id": message["id"],
        "type": "code",
        "title": "Greeter",
        "language": "python",
        "content": "A",
        **overrides,
    }
    return client.post(f"/api/conversations/{message['conversation_id']}/artifacts", json=payload)


class TestCreateArtifact:
    def test_starts_at_version_one(self, client, message):
        response = create(client, message)
        assert response.status_code == 201
        artifact = response.json()
        assert artifact["version"] == 1
        assert artifact["message_id"] == message["id"]
        assert artifact["identifier"].startswith("artifact_")

    def test_explicit_identifier(self, client, message):
        artifact = create(client, message, identifier="greeter").json()
        assert artifact["identifier"] == "greeter"

    def test_identifier_reuse_conflicts(self, client, message):
        create(client, message, identifier="greeter")
        response = create(client, message, identifier="greeter")
        assert response.status_code == 409
        assert response.json()["type"] == "conflict"

    def test_unknown_type_rejected(self, client, message):
        assert create(client, message, type="spreadsheet").status_code == 422

    def test_message_from_other_conversation(self, client, message, make_conversation):
        other = make_conversation("Other")
        response = client.post(
            f"/api/conversations/{other['id']}/artifacts",
            json={"message_id": message["id"], "type": "code", "title": "x", "content": "y"},
        )
        assert response.status_code == 422

    def test_unknown_message(self, client, message):
        assert create(client, message, message_id=9999).status_code == 404

    def test_unknown_conversation(self, client, message):
        response = client.post(
            "/api/conversations/9999/artifacts",
            json={"message_id": message["id"], "type": "code", "title": "x", "content": "y"},
        )
        assert response.status_code == 404


class TestVersions:
    def test_edit_appends_version(self, client, message):
        first = create(client, message, content="A").json()

        response = client.put(f"/api/artifacts/{first['id']}", json={"content": "B"})
        assert response.status_code == 200
        second = response.json()
        assert second["id"] != first["id"]
        assert second["identifier"] == first["identifier"]
        assert second["version"] == 2
        assert second["message_id"] == first["message_id"]

        versions = client.get(f"/api/artifacts/{first['id']}/versions").json()
        assert [(v["version"], v["content"]) for v in versions] == [(1, "A"), (2, "B")]

        # The first version is untouched
        assert client.get(f"/api/artifacts/{first['id']}").json()["content"] == "A"

    def test_versions_stay_contiguous(self, client, message):
        first = create(client, message, content="v1").json()
        for n in range(2, 6):
            # Editing an old row still appends after the latest
            client.put(f"/api/artifacts/{first['id']}", json={"content": f"v{n}"})

        versions = client.get(f"/api/artifacts/{first['id']}/versions").json()
        assert [v["version"] for v in versions] == [1, 2, 3, 4, 5]
        assert versions[-1]["content"] == "v5"

    def test_edit_can_retitle(self, client, message):
        first = create(client, message).json()
        second = client.put(f"/api/artifacts/{first['id']}", json={"content": "B", "title": "Renamed"}).json()
        assert second["title"] == "Renamed"

    def test_versions_are_separate_per_identifier(self, client, message):
        one = create(client, message, identifier="one").json()
        two = create(client, message, identifier="two").json()
        client.put(f"/api/artifacts/{one['id']}", json={"content": "B"})

        assert [v["version"] for v in client.get(f"/api/artifacts/{two['id']}/versions").json()] == [1]

    def test_conversation_listing_newest_first(self, client, message):
        first = create(client, message).json()
        second = client.put(f"/api/artifacts/{first['id']}", json={"content": "B"}).json()

        listed = client.get(f"/api/conversations/{message['conversation_id']}/artifacts").json()
        assert [a["id"] for a in listed] == [second["id"], first["id"]]

    def test_missing_artifact(self, client):
        assert client.get("/api/artifacts/777").status_code == 404
        assert client.put("/api/artifacts/777", json={"content": "x"}).status_code == 404
        assert client.get("/api/artifacts/777/versions").status_code == 404


class TestDetectArtifacts:
    def test_languages_map_to_types(self):
        content = (
            "```mermaid\ngraph TD\n```\n"
            "```markdown\n# Title\n```\n"
            "```html\n<p>hi</p>\n```\n"
            "```\nplain\n```\n"
        )
        found = detect_artifacts(content)
        assert [(a["type"], a["title"]) for a in found] == [
            ("mermaid", "Diagram 1"),
            ("document", "Document 2"),
            ("code", "HTML 3"),
            ("document", "Document 4"),
        ]

    def test_no_blocks(self):
        assert detect_artifacts("Just prose.") == []
        assert detect_artifacts("") == []
