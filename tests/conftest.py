"""Shared test fixtures."""

from __future__ import annotations

import pytest

from flowsight.engine.structures import ComponentStructure, ScreenStructure
from flowsight.models.nodes import DesignNode


def frame(name: str, id: str | None = None, x: float = 0, y: float = 0,
          width: float = 375, height: float = 812, children: list | None = None, **extra) -> dict:
    node = {
        "id": id,
        "name": name,
        "type": "FRAME",
        "x": x,
        "y": y,
        "width": width,
        "height": height,
        "children": children or [],
    }
    node.update(extra)
    return node


def page(name: str, children: list) -> dict:
    return {"id": f"page:{name}", "name": name, "type": "PAGE", "children": children}


def solid(r: float, g: float, b: float) -> dict:
    return {"type": "SOLID", "color": {"r": r, "g": g, "b": b}}


# Sample node payloads, camelCase as the design tool sends them

SUBMIT_BUTTON = {
    "id": "1:2",
    "name": "Submit Button",
    "type": "FRAME",
    "width": 120,
    "height": 44,
    "cornerRadius": 8,
    "fills": [solid(0.2, 0.4, 1.0)],
}

# Two onboarding screens on one page, listed out of sequence order
ONBOARDING_DOC = {
    "id": "0:0",
    "name": "Shop App",
    "type": "DOCUMENT",
    "children": [
        page("Onboarding", [
            frame("Customer_Onboarding_2", id="10:2", x=400),
            frame("Customer_Onboarding_1", id="10:1", x=0),
        ]),
    ],
}

# Ten screens with nothing in common: no page, no naming scheme, far apart
UNRELATED_NAMES = [
    "Alpha", "Bravo", "Charlie", "Delta", "Echo",
    "Foxtrot", "Golf", "Hotel", "India", "Juliet",
]
UNRELATED_FRAMES = [
    frame(name, id=f"20:{i}", x=i * 1000, y=(i % 3) * 1000)
    for i, name in enumerate(UNRELATED_NAMES)
]

LOGIN_FORM = frame(
    "Login Form",
    id="30:1",
    x=2000,
    y=2000,
    layoutMode="VERTICAL",
    paddingTop=16,
    paddingRight=16,
    paddingBottom=16,
    paddingLeft=16,
    itemSpacing=8,
    fills=[solid(1, 1, 1)],
    children=[
        {"id": "30:2", "name": "Title", "type": "TEXT", "characters": "Sign in", "fontSize": 28,
         "fills": [solid(0, 0, 0)], "y": 0},
        {"id": "30:3", "name": "Email Field", "type": "FRAME", "width": 300, "height": 44,
         "strokes": [solid(0.8, 0.8, 0.8)], "y": 60},
        {"id": "30:4", "name": "Email Label", "type": "TEXT", "characters": "Email", "fontSize": 12,
         "y": 110},
        {"id": "30:5", "name": "Submit Button", "type": "FRAME", "width": 300, "height": 44,
         "cornerRadius": 8, "fills": [solid(0.2, 0.4, 1.0)], "y": 170},
    ],
)


def node(data: dict) -> DesignNode:
    return DesignNode.model_validate(data)


def screen(name: str, id: str | None = None, x: float = 0, y: float = 0, page: str | None = None,
           semantic_types: tuple[str, ...] = (), **extra) -> ScreenStructure:
    """Engine-level screen with one flat component per semantic type."""
    sid = id or name.lower().replace(" ", "_")
    components = [
        ComponentStructure(id=f"{sid}:{i}", name=t, type="FRAME", semantic_type=t)
        for i, t in enumerate(semantic_types)
    ]
    return ScreenStructure(id=sid, name=name, page=page, x=x, y=y, width=375, height=812,
                           components=components, **extra)


@pytest.fixture
def submit_button() -> DesignNode:
    return node(SUBMIT_BUTTON)


@pytest.fixture
def onboarding_doc() -> DesignNode:
    return node(ONBOARDING_DOC)


@pytest.fixture
def unrelated_frames() -> list[DesignNode]:
    return [node(f) for f in UNRELATED_FRAMES]


@pytest.fixture
def login_form() -> DesignNode:
    return node(LOGIN_FORM)
