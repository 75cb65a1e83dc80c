"""Parse and render a template in 3 lines, zero config, zero deps."""

from plantilla import from_string

tpl = from_string("greeting", "Hello {{ name }}!{# note #}")
print(tpl.execute({"name": "World"}))
