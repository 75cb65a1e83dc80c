"""Thread safety tests for shared templates.

A parsed Template is immutable; each execute() call gets its own cursor.
These tests render one template from many threads at once.
"""

from concurrent.futures import ThreadPoolExecutor

from plantilla import DictLocator, from_string

SOURCE = (
    "{% for item in items %}"
    "{% if loop.first %}[{% endif %}{{ item }}{% if not loop.last %},{% endif %}"
    "{% if loop.last %}]{% endif %}"
    "{% empty %}none"
    "{% endfor %}"
)


def expected_for(n: int) -> str:
    if n == 0:
        return "none"
    return "[" + ",".join(str(i) for i in range(n)) + "]"


class TestConcurrentRendering:
    def test_shared_template_many_threads(self) -> None:
        tpl = from_string("shared", SOURCE)
        sizes = [i % 17 for i in range(200)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda n: tpl.execute({"items": list(range(n))}), sizes))

        assert results == [expected_for(n) for n in sizes]

    def test_concurrent_includes(self) -> None:
        locator = DictLocator({"row": "<{{ n }}>"})
        tpl = from_string(
            "page",
            "{% for n in numbers %}{% include 'row' %}{% endfor %}",
            locator=locator,
        )

        def work(k: int) -> str:
            return tpl.execute({"numbers": [k, k + 1]})

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(work, range(100)))

        assert results == [f"<{k}><{k + 1}>" for k in range(100)]

    def test_concurrent_first_parse(self) -> None:
        from plantilla import Template

        tpl = Template("lazy", "{{ a }}-{{ b }}")

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda i: tpl.execute({"a": i, "b": i * 2}), range(50)))

        assert results == [f"{i}-{i * 2}" for i in range(50)]
        assert tpl.parsed
