"""
Plantilla: a small text-templating engine.

Templates are compiled once into a tuple of typed nodes and rendered any
number of times against a variable context. Syntax: ``{{ expr|filter }}``
for output, ``{% tag args %}`` for control tags and ``{# ... #}`` for
comments.

Quick Start:
    >>> from plantilla import from_string
    >>> tpl = from_string("greeting", "Hello {{ name }}!{# note #}")
    >>> tpl.execute({"name": "World"})
    'Hello World!'

    >>> # One-shot rendering
    >>> from plantilla import render
    >>> render("{% for n in items %}{{ n }}{% endfor %}", {"items": [1, 2, 3]})
    '123'

Custom Tags:
    >>> from plantilla import TemplateConfig, create_registry_with_defaults, tag
    >>>
    >>> @tag("shout")
    ... def shout(args, execution, context):
    ...     return str(execution.evaluate(args)).upper()
    >>>
    >>> builder = create_registry_with_defaults()
    >>> builder.register(shout())
    >>> config = TemplateConfig(tag_registry=builder.build())
    >>> from_string("t", "{% shout name %}", config=config).render(name="hi")
    'HI'

Installation:
    pip install plantilla            # Zero runtime dependencies
"""

from collections.abc import Mapping
from typing import Any

from plantilla.config import (
    TemplateConfig,
    get_template_config,
    reset_template_config,
    set_template_config,
    template_config_context,
)
from plantilla.context import UNDEFINED, Context
from plantilla.errors import (
    ExecutionError,
    ExpressionSyntaxError,
    FilterError,
    ParseError,
    PlantillaError,
    ResolutionError,
    UndefinedError,
)
from plantilla.execution import Execution
from plantilla.expressions import Expression, compile_expression
from plantilla.filters import (
    FilterRegistry,
    FilterRegistryBuilder,
    SafeString,
    create_default_filters,
    create_filters_with_defaults,
)
from plantilla.lexer import Lexer
from plantilla.loaders import DictLocator, FileSystemLocator, TemplateLocator
from plantilla.location import SourceLocation
from plantilla.nodes import ContentNode, FilterNode, MarkerNode, Node, TagNode, TemplateNode
from plantilla.tags import (
    SkipAware,
    TagHandler,
    TagRegistry,
    TagRegistryBuilder,
    create_default_registry,
    create_registry_with_defaults,
    tag,
)
from plantilla.template import Template, from_file, from_string

__version__ = "0.1.0"


def render(
    source: str,
    context: Context | Mapping[str, Any] | None = None,
    *,
    name: str = "<string>",
    config: TemplateConfig | None = None,
) -> str:
    """Parse and render a template string in one call.

    Args:
        source: Template source text
        context: Variables for the render
        name: Template name used in error messages
        config: Template configuration (current context default if None)

    Returns:
        Rendered output

    Raises:
        ParseError: Malformed source
        ExecutionError: Render failure
    """
    return from_string(name, source, config=config).execute(context)


__all__ = [  # noqa: RUF022 - grouped by category
    # Version
    "__version__",
    # Core API
    "Template",
    "from_file",
    "from_string",
    "render",
    # Execution
    "Execution",
    "Context",
    "UNDEFINED",
    # Nodes
    "ContentNode",
    "FilterNode",
    "MarkerNode",
    "Node",
    "TagNode",
    "TemplateNode",
    "SourceLocation",
    "Lexer",
    # Expressions and filters
    "Expression",
    "compile_expression",
    "FilterRegistry",
    "FilterRegistryBuilder",
    "SafeString",
    "create_default_filters",
    "create_filters_with_defaults",
    # Tags
    "SkipAware",
    "TagHandler",
    "TagRegistry",
    "TagRegistryBuilder",
    "create_default_registry",
    "create_registry_with_defaults",
    "tag",
    # Locators
    "DictLocator",
    "FileSystemLocator",
    "TemplateLocator",
    # Configuration
    "TemplateConfig",
    "get_template_config",
    "reset_template_config",
    "set_template_config",
    "template_config_context",
    # Errors
    "ExecutionError",
    "ExpressionSyntaxError",
    "FilterError",
    "ParseError",
    "PlantillaError",
    "ResolutionError",
    "UndefinedError",
]
