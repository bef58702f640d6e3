"""Hashtag extraction and tag tree helpers for note content."""

import re
from dataclasses import dataclass, field
from typing import List, NamedTuple


# Fenced code blocks are never scanned for tags
CODE_BLOCK_PATTERN = re.compile(r"```[\s\S]*?```")

# "#token" bounded by whitespace or the string edges, not part of a "://#" URL
HASHTAG_PATTERN = re.compile(r"(?<!://)(?:^|(?<=\s))#[^\s#]+(?=\s|$)")

# Markdown escapes left behind by the editor, e.g. "\#" or "\_". "*-_" is a
# range, so digits, capitals, "+", "=", "@" and "\\" are unescaped as well.
ESCAPED_CHAR_PATTERN = re.compile(r"\\([#<>{}\[\]|`*-_.])")

TAG_PATH_SEPARATOR = "/"


class TagKey(NamedTuple):
    """Identity of a tag within an account's tag forest."""
    name: str
    parent: int


@dataclass
class TagTreeNode:
    name: str
    children: List["TagTreeNode"] = field(default_factory=list)

    def child(self, name: str) -> "TagTreeNode":
        """Return the child called ``name``, creating it if needed."""
        for node in self.children:
            if node.name == name:
                return node
        node = TagTreeNode(name)
        self.children.append(node)
        return node


def sanitize_content(content: str) -> str:
    """Strip HTML space entities and markdown escapes from editor output."""
    content = content.replace("&#x20;", " ")
    return ESCAPED_CHAR_PATTERN.sub(r"\1", content)


def extract_hashtags(content: str) -> List[str]:
    """
    Find hashtags in note content.

    Code fences are removed first. A hashtag must start at the beginning of
    the text or after whitespace, and end at whitespace or the end of the
    text, so ``a#b`` and ``https://x.io/#top`` yield nothing.

    Returns:
        Hashtags in order of appearance, including the leading ``#``
    """
    without_code = CODE_BLOCK_PATTERN.sub("", content)
    return HASHTAG_PATTERN.findall(without_code)


def build_tag_tree(hashtags: List[str]) -> List[TagTreeNode]:
    """
    Build a tag forest from hashtags.

    ``#work/project/alpha`` becomes ``work -> project -> alpha``. Hashtags
    sharing a prefix share nodes, and nodes keep first-seen order.
    """
    root = TagTreeNode("")
    for hashtag in hashtags:
        segments = [s for s in hashtag.lstrip("#").split(TAG_PATH_SEPARATOR) if s]
        node = root
        for segment in segments:
            node = node.child(segment)
    return root.children


def tag_tree_from_content(content: str) -> List[TagTreeNode]:
    """Extract the tag forest from sanitized note content."""
    # Trailing space lets a hashtag at the very end terminate on whitespace
    return build_tag_tree(extract_hashtags(content.replace("\\", "") + " "))
