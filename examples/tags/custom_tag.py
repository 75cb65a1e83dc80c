"""Add your own block tag in ~10 lines: extend defaults with @tag."""

from plantilla import TemplateConfig, create_registry_with_defaults, from_string, tag


@tag("upper", markers=("endupper",), end_names=("endupper",))
class UpperTag:
    """Render everything up to {% endupper %} in upper case."""

    def render(self, args, execution, context):
        body, _ = execution.run_until("endupper")
        return body.upper()


builder = create_registry_with_defaults()
builder.register(UpperTag())

config = TemplateConfig(tag_registry=builder.build())

source = """
{% upper %}
Hello {{ name }}, you have {{ count }} new messages.
{% endupper %}
"""

print(from_string("custom", source, config=config).render(name="Ada", count=3))
