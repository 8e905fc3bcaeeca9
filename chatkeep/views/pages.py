"""
Server-rendered read-only pages.
"""
import html
from typing import Dict, List

from chatkeep.models.artifact import Artifact
from chatkeep.models.message import Message
from chatkeep.services.artifact_service import CODE_BLOCK_RE
from chatkeep.views.boundary import component

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
</head>
<body>
{body}
</body>
</html>
"""


def _text_block(text: str) -> str:
    paragraphs = [p for p in text.split("\n\n") if p.strip()]
    return "".join(
        f"<p>{html.escape(p.strip()).replace(chr(10), '<br>')}</p>" for p in paragraphs
    )


@component("MessageContent")
def render_content(content: str) -> str:
    parts = []
    position = 0
    for match in CODE_BLOCK_RE.finditer(content):
        parts.append(_text_block(content[position:match.start()]))
        language = (match.group(1) or "text").lower()
        code = html.escape(match.group(2))
        if language == "mermaid":
            parts.append(f'<pre class="mermaid">{code}</pre>')
        else:
            parts.append(f'<pre><code class="language-{html.escape(language)}">{code}</code></pre>')
        position = match.end()
    parts.append(_text_block(content[position:]))
    return "".join(parts)


def _image(image: Dict) -> str:
    src = image.get("url") or f"data:{image['media_type']};base64,{image['data']}"
    alt = image.get("name") or "attachment"
    return f'<img src="{html.escape(src)}" alt="{html.escape(alt)}">'


@component("MessageView")
def render_message(message: Message) -> str:
    images = "".join(_image(image) for image in (message.images or []))
    edited = ' <span class="edited">(edited)</span>' if message.edited_at else ""
    return (
        f'<article class="message message-{html.escape(message.role)}" id="message-{message.id}">'
        f'<header>{html.escape(message.role.title())}{edited}</header>'
        f"{images}{render_content(message.content).unwrap()}"
        "</article>"
    )


@component("MessageList")
def render_message_list(messages: List[Message]) -> str:
    if not messages:
        return '<p class="empty">This conversation has no messages.</p>'
    return '<section class="messages">' + "".join(render_message(m).unwrap() for m in messages) + "</section>"


@component("ArtifactPanel")
def render_artifacts(artifacts: List[Artifact]) -> str:
    if not artifacts:
        return ""
    items = []
    for artifact in artifacts:
        items.append(
            f'<li><h3>{html.escape(artifact.title or artifact.identifier)} '
            f'<small>v{artifact.version}</small></h3>'
            f'<pre><code>{html.escape(artifact.content)}</code></pre></li>'
        )
    return '<aside class="artifacts"><h2>Artifacts</h2><ul>' + "".join(items) + "</ul></aside>"


@component("SharedConversationPage")
def render_shared_conversation(snapshot: Dict) -> str:
    conversation = snapshot["conversation"]
    title = html.escape(conversation.title)
    body = (
        f"<h1>{title}</h1>"
        f'<p class="meta">Shared conversation · {snapshot["view_count"]} views</p>'
        f'{render_message_list(snapshot["messages"]).unwrap()}'
        f'{render_artifacts(snapshot["artifacts"]).unwrap()}'
    )
    return PAGE_TEMPLATE.format(title=title, body=body)
