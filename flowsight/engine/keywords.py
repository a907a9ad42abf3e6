"""Default keyword tables shared by the classifiers and flow strategies.

All matching is lowercase substring matching unless a table holds regex
patterns. Tuple order is significant wherever a table is scanned with
"first match wins" semantics (role buckets, flow-type buckets, semantic
type priority).
"""

from __future__ import annotations

import re

# Semantic component types in tie-break priority order.
SEMANTIC_TYPES = ("button", "input", "heading", "label", "card", "navigation")

COMPONENT_NAME_KEYWORDS: dict[str, tuple[str, ...]] = {
    "button": ("button", "btn", "cta", "action", "submit", "primary", "secondary"),
    "input": ("input", "field", "textbox", "text field", "form", "search", "textarea"),
    "heading": ("heading", "title", "h1", "h2", "h3", "h4", "h5", "h6", "header", "headline"),
    "label": ("label", "caption", "subtitle", "description", "hint", "helper"),
    "card": ("card", "item", "tile", "container", "panel", "widget"),
    "navigation": ("nav", "navigation", "tab", "menu", "bar", "header", "footer", "breadcrumb"),
}

# Role buckets, evaluated in this order.
ROLE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "customer": ("customer", "client", "user", "buyer", "shopper"),
    "admin": ("admin", "administrator", "manager", "super", "root"),
    "operator": ("operator", "staff", "employee", "worker", "agent"),
    "guest": ("guest", "visitor", "anonymous", "public", "unauth"),
    "moderator": ("moderator", "mod", "supervisor", "reviewer"),
}

# Role buckets the flow engine matches against screen names. A guest-facing
# screen also belongs to a customer flow.
FLOW_ROLE_KEYWORDS: dict[str, tuple[str, ...]] = {
    **ROLE_KEYWORDS,
    "customer": (*ROLE_KEYWORDS["customer"], "guest"),
}

# Flow-type buckets, evaluated in this order. "unknown" has no keywords.
FLOW_TYPE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "onboarding": ("onboard", "welcome", "intro", "getting started", "getting_started", "tutorial"),
    "authentication": ("auth", "login", "signin", "signup", "register", "password"),
    "checkout": ("checkout", "payment", "billing", "purchase", "cart", "order"),
    "settings": ("setting", "config", "preference", "profile", "account"),
    "main_feature": ("main", "home", "dashboard", "feed", "browse", "search", "explore"),
}

FLOW_STAGE_KEYWORDS = (
    "onboarding", "signup", "login", "checkout", "cart", "payment",
    "settings", "profile", "dashboard", "home", "search", "browse",
    "details", "confirmation", "success", "error", "welcome",
)

DEVICE_KEYWORDS = ("mobile", "tablet", "desktop", "phone", "ipad", "web")

# Role detector: does the layer name carry any sequence number?
ROLE_SEQUENCE_PATTERNS = (
    re.compile(r"\d+$"),
    re.compile(r"[-_]\d+[-_]"),
    re.compile(r"step\s*\d+", re.IGNORECASE),
    re.compile(r"page\s*\d+", re.IGNORECASE),
    re.compile(r"screen\s*\d+", re.IGNORECASE),
    re.compile(r"v\d+", re.IGNORECASE),
)

# Naming strategy: evidence that a screen name is one step of a sequence.
SEQUENCE_INDICATORS = (
    re.compile(r"step[-_\s]*\d+", re.IGNORECASE),
    re.compile(r"page[-_\s]*\d+", re.IGNORECASE),
    re.compile(r"screen[-_\s]*\d+", re.IGNORECASE),
    re.compile(r"\d+[-_]of[-_]\d+", re.IGNORECASE),
    re.compile(r"v\d+", re.IGNORECASE),
    re.compile(r"[-_]\d+$"),
    re.compile(r"^\d+[-_]"),
)

# Naming strategy: sequence number extraction cascade (first group is the number).
SEQUENCE_NUMBER_PATTERNS = (
    re.compile(r"[-_](\d+)$"),
    re.compile(r"step[-_]?(\d+)"),
    re.compile(r"page[-_]?(\d+)"),
    re.compile(r"screen[-_]?(\d+)"),
    re.compile(r"(\d+)[-_]of[-_]\d+"),
    re.compile(r"^(\d+)[-_]"),
)

# Naming strategy: group-key rules, tried in order before the keyword buckets.
ROLE_FLOW_PREFIX = re.compile(r"^(customer|admin|operator|guest|user)[-_]([a-z]+)[-_]")
FLOW_SEQUENCE_PREFIX = re.compile(r"^([a-z]+)[-_](?:step[-_]?)?\d+")
GENERIC_PREFIX = re.compile(r"^([a-z]+)[-_]")

# Seconds a user spends on one screen, per flow type.
SECONDS_PER_SCREEN: dict[str, int] = {
    "onboarding": 60,
    "authentication": 30,
    "main_feature": 90,
    "settings": 45,
    "checkout": 120,
    "unknown": 60,
}

CRITICAL_FLOW_TYPES = ("onboarding", "authentication", "main_feature")

USER_INTENTS: dict[str, str] = {
    "onboarding": "Learn and get started",
    "authentication": "Sign in or register",
    "main_feature": "Use primary functionality",
    "settings": "Configure preferences",
    "checkout": "Complete purchase",
    "unknown": "Complete task",
}

ROLE_DESIGN_PROFILES: dict[str, dict[str, object]] = {
    "customer": {
        "common_components": ["product_card", "rating", "review", "cart_button", "wishlist"],
        "color_palette": ["warm", "inviting", "brand_focused"],
        "typography_style": "friendly",
        "navigation_complexity": "simple",
        "information_density": "medium",
        "interaction_patterns": ["browse", "search", "purchase", "review"],
    },
    "admin": {
        "common_components": ["data_table", "form", "chart", "sidebar", "toolbar"],
        "color_palette": ["neutral", "professional", "status_colors"],
        "typography_style": "technical",
        "navigation_complexity": "complex",
        "information_density": "high",
        "interaction_patterns": ["manage", "configure", "monitor", "analyze"],
    },
    "operator": {
        "common_components": ["task_list", "status_indicator", "quick_actions", "notification"],
        "color_palette": ["functional", "high_contrast", "status_clear"],
        "typography_style": "minimal",
        "navigation_complexity": "moderate",
        "information_density": "medium",
        "interaction_patterns": ["process", "update", "assign", "complete"],
    },
    "guest": {
        "common_components": ["hero_banner", "feature_list", "signup_prompt", "demo"],
        "color_palette": ["welcoming", "brand_showcase", "clear_cta"],
        "typography_style": "friendly",
        "navigation_complexity": "simple",
        "information_density": "low",
        "interaction_patterns": ["explore", "learn", "signup", "contact"],
    },
}
