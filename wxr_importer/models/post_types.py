"""
Post types understood by the book importer and the behaviour attached to
each of them.

Every branch that depends on the kind of post (publish status, whether the
body is kept, how the parent is chosen, which part later chapters nest
under, extra metadata) reads :data:`POST_TYPE_RULES` instead
of comparing strings inline.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, NamedTuple, Optional


class PostType(str, Enum):
    POST = "post"
    PAGE = "page"
    FRONT_MATTER = "front-matter"
    CHAPTER = "chapter"
    PART = "part"
    BACK_MATTER = "back-matter"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PostType"]:
        """Return the member for ``value`` or ``None`` if it is not supported."""
        try:
            return cls(value)
        except ValueError:
            return None


class Parenting(str, Enum):
    NONE = "none"
    RUNNING_PART = "running_part"


class PostTypeRule(NamedTuple):
    status: str
    keeps_content: bool
    parenting: Parenting
    heads_chapters: bool = False
    extra_meta_key: Optional[str] = None


POST_TYPE_RULES: Dict[PostType, PostTypeRule] = {
    PostType.POST: PostTypeRule("draft", True, Parenting.NONE),
    PostType.PAGE: PostTypeRule("draft", True, Parenting.NONE),
    PostType.FRONT_MATTER: PostTypeRule("draft", True, Parenting.NONE),
    PostType.CHAPTER: PostTypeRule("draft", True, Parenting.RUNNING_PART),
    PostType.PART: PostTypeRule("publish", False, Parenting.NONE, True, "pb_part_content"),
    PostType.BACK_MATTER: PostTypeRule("draft", True, Parenting.NONE),
}

SUPPORTED_POST_TYPES = frozenset(t.value for t in PostType)


def rule_for(post_type: str) -> PostTypeRule:
    """Look up the rule for ``post_type``, raising ``ValueError`` if unknown."""
    member = PostType.parse(post_type)
    if member is None:
        raise ValueError(f"Unsupported post type: {post_type!r}")
    return POST_TYPE_RULES[member]
