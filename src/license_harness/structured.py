"""HTML lookups over the last command's output.

The output is parsed on every lookup and the document is dropped right
after; callers get back a plain Fragment value.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Tag

from .assertions import OutputAssertions
from .errors import LookupFailure

PARSER = "html.parser"


@dataclass(frozen=True)
class Fragment:
    """One element found in the scanner's HTML report."""

    tag: str
    attrs: dict = field(default_factory=dict)
    text: str = ""
    html: str = ""

    @classmethod
    def from_tag(cls, tag: Tag) -> "Fragment":
        attrs = {k: (" ".join(v) if isinstance(v, list) else v) for k, v in tag.attrs.items()}
        return cls(tag=tag.name, attrs=attrs, text=tag.get_text(), html=str(tag))

    @property
    def id(self) -> str | None:
        return self.attrs.get("id")

    def contains(self, text: str) -> bool:
        return text in self.text

    def select(self, selector: str) -> list["Fragment"]:
        """CSS-select descendants of this fragment."""
        soup = BeautifulSoup(self.html, PARSER)
        return [Fragment.from_tag(t) for t in soup.select(selector)]

    def find(self, selector: str) -> "Fragment":
        """Exactly one descendant matching *selector*, or LookupFailure."""
        return _exactly_one(self.select(selector), selector)


def _exactly_one(found: list, selector: str):
    if len(found) != 1:
        raise LookupFailure(selector, len(found))
    return found[0]


class StructuredOutput:
    """Scoped lookups into the output parsed as an HTML document."""

    def __init__(self, assertions: OutputAssertions):
        self.assertions = assertions

    def _parse(self) -> BeautifulSoup:
        return BeautifulSoup(self.assertions.result.output, PARSER)

    def find_by_id(self, element_id: str) -> Fragment:
        """The element whose id is *element_id*, e.g. a dependency's section."""
        found = self._parse().find_all(id=element_id)
        return Fragment.from_tag(_exactly_one(found, f"#{element_id}"))

    def find_tag(self, name: str) -> Fragment:
        found = self._parse().find_all(name)
        return Fragment.from_tag(_exactly_one(found, name))

    def select_one(self, selector: str) -> Fragment:
        found = self._parse().select(selector)
        return Fragment.from_tag(_exactly_one(found, selector))

    def title(self) -> Fragment:
        """The report's top-level ``h1`` heading."""
        return self.find_tag("h1")
