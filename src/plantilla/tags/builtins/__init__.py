"""Built-in tag handlers.

Provides the tags registered by default:
- if / elif / else / endif: conditional branches
- for / empty / endfor: iteration with a ``loop`` variable
- set: bind a variable in the current scope
- include: render another template found by the locator
- comment / endcomment: skip a block

"""

from __future__ import annotations

from plantilla.tags.builtins.assign import SetTag
from plantilla.tags.builtins.comment import CommentTag
from plantilla.tags.builtins.conditional import IfTag
from plantilla.tags.builtins.include import IncludeTag
from plantilla.tags.builtins.loop import ForTag, LoopInfo

BUILTIN_TAGS: tuple[type, ...] = (
    IfTag,
    ForTag,
    SetTag,
    IncludeTag,
    CommentTag,
)

__all__ = [
    "BUILTIN_TAGS",
    "CommentTag",
    "ForTag",
    "IfTag",
    "IncludeTag",
    "LoopInfo",
    "SetTag",
]
