from __future__ import annotations

import re
from dataclasses import dataclass, replace

from .models import Classification, RawPost

HASHTAG_RE = re.compile(r"#(\w+)")

DEFAULT_CATEGORY = "app-ideas"
CATEGORIES = (
    "app-ideas",
    "saas-ideas",
    "mobile-apps",
    "developer-tools",
    "productivity",
    "no-code",
    "accessibility",
)
LEVELS = ("Low", "Medium", "High")

# Union of the Reddit and Twitter phrase lists.
IDEA_KEYWORDS = (
    "app idea",
    "startup idea",
    "build",
    "create",
    "develop",
    "tool for",
    "somebody make",
    "looking for",
    "need an app",
    "feature request",
    "would pay for",
    "market for",
    "solution for",
    "problem with",
    "api for",
    "saas for",
    "platform for",
    "service that",
    "app that",
    "website that",
    "bot that",
    "extension for",
    "i wish there was",
    "why doesn't exist",
    "business idea",
    "mvp",
    "minimum viable product",
    "prototype",
    "side project",
    "weekend project",
    "coding challenge",
)
IDEA_MARKERS = ("idea", "need", "make", "building", "should exist")

CATEGORY_RULES = (
    ("saas-ideas", ("saas", "subscription", "platform", "b2b")),
    ("mobile-apps", ("mobile", "ios", "android")),
    ("developer-tools", ("api", "dev", "code", "github")),
    ("productivity", ("productivity", "workflow", "automation")),
    ("no-code", ("no-code", "nocode", "drag and drop", "low-code")),
    ("accessibility", ("accessibility", "disabled", "inclusive")),
)

TAG_VOCABULARY = (
    ("React", ("react", "jsx", "next.js", "nextjs")),
    ("AI", ("ai", "artificial intelligence", "machine learning", "ml", "gpt", "openai", "chatgpt")),
    ("Mobile", ("mobile", "ios", "android", "react native", "flutter")),
    ("API", ("api", "rest", "graphql", "webhook")),
    ("Blockchain", ("blockchain", "crypto", "web3", "nft", "ethereum")),
    ("SaaS", ("saas", "subscription", "b2b", "enterprise")),
    ("No-Code", ("no-code", "nocode", "low-code", "zapier", "airtable")),
    ("DevTools", ("devtools", "developer", "github", "vscode", "debugging")),
    ("E-commerce", ("ecommerce", "e-commerce", "shopify", "store", "marketplace")),
    ("Social", ("social", "community", "messaging", "chat", "network")),
)
HASHTAG_TAGS = ("react", "nodejs", "python", "ai", "ml", "saas", "nocode", "webdev")
MAX_TAGS = 4

HIGH_COMPLEXITY_TERMS = (
    "ai",
    "machine learning",
    "blockchain",
    "distributed",
    "real-time",
    "scalable",
    "enterprise",
    "infrastructure",
)
MEDIUM_COMPLEXITY_TERMS = (
    "api",
    "database",
    "authentication",
    "payment",
    "integration",
    "mobile",
    "backend",
)
HIGH_MARKET_TERMS = (
    "billion",
    "market",
    "enterprise",
    "b2b",
    "saas",
    "subscription",
    "platform",
    "scale",
    "unicorn",
)
MEDIUM_MARKET_TERMS = ("startup", "business", "monetize", "revenue", "customers", "users", "growth")


@dataclass(frozen=True, slots=True)
class ClassifierRules:
    """Keyword lists driving every classification rule.

    Category rules and the tag vocabulary are ordered: the first matching
    category wins and tags are collected in declaration order.
    """

    idea_keywords: tuple[str, ...] = IDEA_KEYWORDS
    idea_markers: tuple[str, ...] = IDEA_MARKERS
    category_rules: tuple[tuple[str, tuple[str, ...]], ...] = CATEGORY_RULES
    default_category: str = DEFAULT_CATEGORY
    tag_vocabulary: tuple[tuple[str, tuple[str, ...]], ...] = TAG_VOCABULARY
    hashtag_tags: tuple[str, ...] = HASHTAG_TAGS
    max_tags: int = MAX_TAGS
    high_complexity_terms: tuple[str, ...] = HIGH_COMPLEXITY_TERMS
    medium_complexity_terms: tuple[str, ...] = MEDIUM_COMPLEXITY_TERMS
    high_market_terms: tuple[str, ...] = HIGH_MARKET_TERMS
    medium_market_terms: tuple[str, ...] = MEDIUM_MARKET_TERMS

    def with_overrides(self, overrides: dict[str, list[str]]) -> ClassifierRules:
        """Return a copy with flat keyword lists replaced.

        Only the plain term lists can be overridden; unknown keys raise
        ``ValueError`` so a typo in the config file is not silently ignored.
        """
        changes: dict[str, tuple[str, ...]] = {}
        for key, values in overrides.items():
            if key not in OVERRIDABLE_FIELDS:
                raise ValueError(f"Unknown classifier rule list: {key}")
            changes[key] = tuple(value.strip().lower() for value in values if value.strip())
        return replace(self, **changes)


OVERRIDABLE_FIELDS = frozenset(
    {
        "idea_keywords",
        "idea_markers",
        "hashtag_tags",
        "high_complexity_terms",
        "medium_complexity_terms",
        "high_market_terms",
        "medium_market_terms",
    }
)


class IdeaClassifier:
    def __init__(self, rules: ClassifierRules | None = None) -> None:
        self.rules = rules or ClassifierRules()

    def classify(self, title: str, body: str = "") -> Classification:
        raw = f"{title} {body or ''}"
        text = raw.lower()
        return Classification(
            is_idea=self.is_idea(text),
            category=self.categorize(text),
            tags=self.extract_tags(text, raw),
            complexity=self.assess_complexity(text),
            market_potential=self.assess_market_potential(text),
        )

    def classify_post(self, post: RawPost) -> Classification:
        return self.classify(post.title, post.body)

    def is_idea(self, text: str) -> bool:
        return _contains_any(text, self.rules.idea_keywords) or _contains_any(
            text, self.rules.idea_markers
        )

    def categorize(self, text: str) -> str:
        for category, keywords in self.rules.category_rules:
            if _contains_any(text, keywords):
                return category
        return self.rules.default_category

    def extract_tags(self, text: str, raw: str = "") -> tuple[str, ...]:
        candidates = self._hashtag_tags(raw)
        for tag, triggers in self.rules.tag_vocabulary:
            if _contains_any(text, triggers):
                candidates.append(tag)

        tags: list[str] = []
        seen: set[str] = set()
        for tag in candidates:
            key = tag.lower()
            if key in seen:
                continue
            seen.add(key)
            tags.append(tag)
        return tuple(tags[: self.rules.max_tags])

    def assess_complexity(self, text: str) -> str:
        return _tiered_level(
            text, self.rules.high_complexity_terms, self.rules.medium_complexity_terms
        )

    def assess_market_potential(self, text: str) -> str:
        return _tiered_level(text, self.rules.high_market_terms, self.rules.medium_market_terms)

    def _hashtag_tags(self, raw: str) -> list[str]:
        allowed = set(self.rules.hashtag_tags)
        return [tag for tag in HASHTAG_RE.findall(raw) if tag.lower() in allowed]


DEFAULT_CLASSIFIER = IdeaClassifier()


def classify(title: str, body: str = "") -> Classification:
    return DEFAULT_CLASSIFIER.classify(title, body)


def _tiered_level(text: str, high_terms: tuple[str, ...], medium_terms: tuple[str, ...]) -> str:
    if _contains_any(text, high_terms):
        return "High"
    if _contains_any(text, medium_terms):
        return "Medium"
    return "Low"


def _contains_any(text: str, patterns: tuple[str, ...]) -> bool:
    return any(pattern in text for pattern in patterns)
