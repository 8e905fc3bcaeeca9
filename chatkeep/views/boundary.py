"""
Render results and the fault-isolation boundary for server-rendered pages.

Every view component returns a ``RenderResult``: either ``Rendered`` with its
HTML or ``RenderFailure`` carrying the exception, the chain of components it
propagated through (innermost first) and the formatted traceback. Components
compose children with ``unwrap()``; a failed child short-circuits the parent,
which adds its own name to the chain. ``ErrorBoundary`` sits at the root and
turns a failure into the fallback screen. It never retries.
"""
import functools
import html
import logging
import traceback
from dataclasses import dataclass, field
from typing import Callable, List, Union

logger = logging.getLogger(__name__)


@dataclass
class Rendered:
    html: str

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> str:
        return self.html


@dataclass
class RenderFailure:
    error: BaseException
    component_stack: List[str] = field(default_factory=list)
    trace: str = ""

    @property
    def ok(self) -> bool:
        return False

    @property
    def summary(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"

    def unwrap(self) -> str:
        raise ChildRenderFailed(self)

    def structural_trace(self) -> str:
        return "\n".join(f"    in {name}" for name in self.component_stack)


RenderResult = Union[Rendered, RenderFailure]


class ChildRenderFailed(Exception):
    """Carries a child's failure up through the enclosing component."""

    def __init__(self, failure: RenderFailure):
        super().__init__(failure.summary)
        self.failure = failure


def component(name: str) -> Callable:
    """Turn a function returning an HTML string into a view component."""

    def decorator(func: Callable[..., str]) -> Callable[..., RenderResult]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> RenderResult:
            try:
                return Rendered(func(*args, **kwargs))
            except ChildRenderFailed as e:
                e.failure.component_stack.append(name)
                return e.failure
            except Exception as e:
                return RenderFailure(
                    error=e,
                    component_stack=[name],
                    trace=traceback.format_exc(),
                )

        wrapper.component_name = name
        return wrapper

    return decorator


FALLBACK_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>Something went wrong</title>
</head>
<body class="error-boundary">
  <main>
    <h1>Something went wrong</h1>
    <p class="error-summary">{summary}</p>
    <button type="button" onclick="window.location.reload()">Reload Page</button>
    <details>
      <summary>Error Details</summary>
      <pre class="component-stack">{stack}</pre>
      <pre class="traceback">{trace}</pre>
    </details>
  </main>
</body>
</html>
"""


class ErrorBoundary:
    """
    Root wrapper for a page view.

    ``render`` returns the page HTML on success, or the fallback screen with the
    error summary, a reload action and an expandable diagnostic panel. The
    caller decides the status code from ``last_failure``.
    """

    def __init__(self, view: Callable[..., RenderResult]):
        self.view = view
        self.last_failure = None

    def render(self, *args, **kwargs) -> str:
        try:
            result = self.view(*args, **kwargs)
        except Exception as e:
            # The root view itself was not a component
            result = RenderFailure(
                error=e,
                component_stack=[getattr(self.view, "__name__", "root")],
                trace=traceback.format_exc(),
            )

        if result.ok:
            self.last_failure = None
            return result.html

        self.last_failure = result
        logger.error(f"View render failed: {result.summary}\n{result.structural_trace()}")
        return self.fallback(result)

    @staticmethod
    def fallback(failure: RenderFailure) -> str:
        return FALLBACK_TEMPLATE.format(
            summary=html.escape(failure.summary),
            stack=html.escape(failure.structural_trace()),
            trace=html.escape(failure.trace),
        )
