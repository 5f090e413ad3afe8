"""
Well-known $mol framework components.

Used when a base class lives outside the workspace (the framework itself is
normally not checked out next to the project) and to rank base-class
completions.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional


@dataclass(frozen=True)
class FrameworkComponent:
    name: str
    description: str
    properties: FrozenSet[str]
    base_class: Optional[str] = "$mol_view"


def _component(name: str, description: str, *properties: str, base_class: Optional[str] = "$mol_view"):
    return FrameworkComponent(name, description, frozenset(properties), base_class)


FRAMEWORK_COMPONENTS: Dict[str, FrameworkComponent] = {
    c.name: c for c in (
        _component("$mol_view", "Base view component for creating UI elements",
                   "dom_name", "style", "event", "field", "attr", "sub", "title",
                   "hint", "enabled?", "visible?", "dom_tree", base_class=None),
        _component("$mol_button", "Interactive button component",
                   "title", "hint", "enabled?", "click", "uri"),
        _component("$mol_link", "Navigation link component",
                   "title", "hint", "uri", "sub"),
        _component("$mol_text", "Text display component", "text", "content"),
        _component("$mol_list", "List container component", "sub", "content", "rows"),
        _component("$mol_page", "Page layout component",
                   "title", "sub", "head", "body", "foot", "tools"),
        _component("$mol_form", "Form container component", "sub", "submit", "reset"),
        _component("$mol_card", "Card layout component",
                   "title", "content", "head", "body", "foot"),
    )
}


PROPERTY_DESCRIPTIONS: Dict[str, str] = {
    'title': 'Display title or label text',
    'hint': 'Tooltip text shown on hover',
    'enabled?': 'Whether the component is enabled for interaction',
    'visible?': 'Whether the component is visible',
    'sub': 'Child components or content',
    'content': 'Text content or child elements',
    'dom_name': 'HTML tag name for rendering',
    'dom_tree': 'DOM structure definition',
    'uri': 'URL or resource identifier',
    'text': 'Text content to display',
    'click': 'Click event handler',
}

PROPERTY_EXAMPLES: Dict[str, str] = {
    'title': 'title \\Hello World',
    'hint': 'hint \\Click to continue',
    'enabled?': 'enabled? true',
    'visible?': 'visible? <= show_panel',
    'sub': 'sub /\n\t<= Button $mol_button title \\Click me',
    'content': 'content /\n\t\\Some text content',
    'uri': 'uri \\https://example.com',
    'click?': 'click? <= handle_click?',
}

_NUMERIC_HINTS = ('width', 'height', 'size', 'count', 'max', 'min')


def property_type(name: str) -> str:
    """Coarse value type guessed from a property name."""
    if name.endswith('?'):
        return 'boolean'
    if name.endswith('*'):
        return 'array'
    if any(hint in name for hint in _NUMERIC_HINTS):
        return 'number'
    if name in ('sub', 'content'):
        return 'children'
    return 'string'


def get_framework_component(name: str) -> Optional[FrameworkComponent]:
    return FRAMEWORK_COMPONENTS.get(name)
