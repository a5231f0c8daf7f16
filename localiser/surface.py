"""
Drawing surfaces for the map and chart renderers.

The renderers only talk to DrawingSurface: create a shape, restyle it,
attach a pick affordance, clear. SvgSurface is the concrete target used by
the app. It keeps a small element tree and serialises it to inline SVG.

Pick affordances are SVG <a> links carrying the region code as a URL query
parameter. Links are focusable and activate on Enter as well as on click,
so keyboard and pointer picks behave the same.
"""

import html as _html
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlencode

SVG_NS = "http://www.w3.org/2000/svg"


@dataclass
class Element:
    """One SVG node. Attribute names are stored in SVG form (stroke-width)."""
    tag: str
    attrs: dict = field(default_factory=dict)
    text: str = ""
    children: list = field(default_factory=list)
    pick_target: Optional[str] = None
    pick_label: str = ""

    def get(self, name, default=None):
        return self.attrs.get(name, default)


def _attr_name(key: str) -> str:
    """Python keyword to SVG attribute: stroke_width -> stroke-width, class_ -> class."""
    return key.rstrip("_").replace("_", "-")


def _fmt_value(value) -> str:
    if isinstance(value, float):
        text = f"{value:.2f}".rstrip("0").rstrip(".")
        return "0" if text == "-0" else text
    return str(value)


class DrawingSurface(ABC):
    """What a renderer may do to its target, and nothing more."""

    def __init__(self, width: float, height: float, label: str = ""):
        self.width = width
        self.height = height
        self.label = label

    @abstractmethod
    def clear(self):
        """Remove every shape."""

    @abstractmethod
    def add(self, tag: str, parent: Optional[Element] = None, text: str = "", **attrs) -> Element:
        """Create a shape (path, rect, line, circle, text, title...)."""

    @abstractmethod
    def set_style(self, element: Element, **style):
        """Change presentation attributes of an existing shape."""

    @abstractmethod
    def attach_pick(self, element: Element, target: str, label: str = ""):
        """Make a shape selectable; activating it picks `target`."""


class SvgSurface(DrawingSurface):
    """In-memory SVG document."""

    def __init__(self, width: float = 1000, height: float = 680,
                 label: str = "", pick_param: str = "icb", cls: str = ""):
        super().__init__(width, height, label)
        self.pick_param = pick_param
        self.cls = cls
        self.elements: list[Element] = []

    # ── DrawingSurface ───────────────────────────────────────────────────

    def clear(self):
        self.elements = []

    def add(self, tag, parent=None, text="", **attrs):
        element = Element(
            tag=tag,
            attrs={_attr_name(k): v for k, v in attrs.items() if v is not None},
            text=str(text) if text else "",
        )
        (parent.children if parent is not None else self.elements).append(element)
        return element

    def set_style(self, element, **style):
        for key, value in style.items():
            element.attrs[_attr_name(key)] = value

    def attach_pick(self, element, target, label=""):
        element.pick_target = target
        element.pick_label = label

    # ── Queries ──────────────────────────────────────────────────────────

    def iter_elements(self, tag: Optional[str] = None):
        """Depth-first walk over all elements, optionally filtered by tag."""
        stack = list(reversed(self.elements))
        while stack:
            element = stack.pop()
            if tag is None or element.tag == tag:
                yield element
            stack.extend(reversed(element.children))

    @property
    def pick_targets(self) -> list[str]:
        return [e.pick_target for e in self.iter_elements() if e.pick_target]

    # ── Serialisation ────────────────────────────────────────────────────

    def _render(self, element: Element, link_params: dict) -> str:
        attrs = "".join(
            f' {name}="{_html.escape(_fmt_value(value))}"'
            for name, value in element.attrs.items()
        )
        inner = _html.escape(element.text) + "".join(
            self._render(child, link_params) for child in element.children
        )
        if inner:
            node = f"<{element.tag}{attrs}>{inner}</{element.tag}>"
        else:
            node = f"<{element.tag}{attrs}/>"

        if not element.pick_target:
            return node
        query = urlencode({self.pick_param: element.pick_target, **link_params})
        aria = f' aria-label="{_html.escape(element.pick_label)}"' if element.pick_label else ""
        return f'<a href="?{_html.escape(query)}" target="_self"{aria}>{node}</a>'

    def to_svg(self, link_params: Optional[dict] = None) -> str:
        """Serialise to an inline <svg>.

        link_params are extra query parameters appended to every pick link,
        so state such as the adoption rate survives a pick."""
        link_params = {k: v for k, v in (link_params or {}).items() if v is not None}
        cls = f' class="{_html.escape(self.cls)}"' if self.cls else ""
        aria = f' aria-label="{_html.escape(self.label)}"' if self.label else ""
        body = "".join(self._render(e, link_params) for e in self.elements)
        return (
            f'<svg xmlns="{SVG_NS}" viewBox="0 0 {_fmt_value(self.width)} {_fmt_value(self.height)}"'
            f'{cls} role="img"{aria} style="width:100%;height:auto;display:block">'
            f"{body}</svg>"
        )
