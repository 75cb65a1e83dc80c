"""Render one parsed template from many threads.

The cursor lives on a per-call Execution, so a Template is safe to share.
"""

from concurrent.futures import ThreadPoolExecutor

from plantilla import from_string

tpl = from_string(
    "report",
    "{% for row in rows %}{{ loop.index }}. {{ row|title }}\n{% empty %}(no rows)\n{% endfor %}",
)

batches = [["alpha", "beta"], [], ["gamma"]]

with ThreadPoolExecutor(max_workers=4) as pool:
    for output in pool.map(lambda rows: tpl.execute({"rows": rows}), batches):
        print(output)
