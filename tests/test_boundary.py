"""
Tests for the render boundary
"""
from chatkeep.views.boundary import ErrorBoundary, Rendered, RenderFailure, component
from chatkeep.views.pages import render_content


@component("Leaf")
def leaf(value):
    return f"<b>{value['text']}</b>"


@component("Branch")
def branch(values):
    return "<div>" + "".join(leaf(v).unwrap() for v in values) + "</div>"


@component("Root")
def root(values):
    return "<main>" + branch(values).unwrap() + "</main>"


class TestComponent:
    def test_success_is_rendered(self):
        result = root([{"text": "a"}, {"text": "b"}])
        assert isinstance(result, Rendered)
        assert result.ok
        assert result.unwrap() == "<main><div><b>a</b><b>b</b></div></main>"

    def test_failure_records_component_chain(self):
        result = root([{"text": "a"}, {}])
        assert isinstance(result, RenderFailure)
        assert not result.ok
        assert isinstance(result.error, KeyError)
        assert result.component_stack == ["Leaf", "Branch", "Root"]
        assert result.structural_trace() == "    in Leaf\n    in Branch\n    in Root"
        assert "KeyError" in result.trace


class TestErrorBoundary:
    def test_passes_through_success(self):
        boundary = ErrorBoundary(root)
        assert boundary.render([{"text": "ok"}]) == "<main><div><b>ok</b></div></main>"
        assert boundary.last_failure is None

    def test_fallback_screen(self):
        boundary = ErrorBoundary(root)
        page = boundary.render([{}])

        assert boundary.last_failure is not None
        assert "Something went wrong" in page
        assert "KeyError: &#x27;text&#x27;" in page
        assert "window.location.reload()" in page
        assert "Reload Page" in page
        assert "<details>" in page
        assert "Error Details" in page
        assert "in Leaf" in page

    def test_plain_callable_root(self):
        def broken():
            raise RuntimeError("boom")

        boundary = ErrorBoundary(broken)
        page = boundary.render()
        assert "RuntimeError: boom" in page
        assert boundary.last_failure.component_stack == ["broken"]

    def test_recovers_on_next_render(self):
        boundary = ErrorBoundary(root)
        boundary.render([{}])
        assert boundary.render([{"text": "fine"}]).startswith("<main>")
        assert boundary.last_failure is None


class TestMessageContent:
    def test_code_and_mermaid_blocks(self):
        html_out = render_content("Intro <b>\n\n```mermaid\ngraph TD\n```\n\n```js\na < b\n```").unwrap()
        assert "<p>Intro &lt;b&gt;</p>" in html_out
        assert '<pre class="mermaid">graph TD\n</pre>' in html_out
        assert '<pre><code class="language-js">a &lt; b\n</code></pre>' in html_out
