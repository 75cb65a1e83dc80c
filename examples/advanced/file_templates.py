"""Load templates from disk; includes resolve relative to the page."""

import tempfile
from pathlib import Path

from plantilla import from_file

with tempfile.TemporaryDirectory() as tmp:
    root = Path(tmp)
    (root / "partials").mkdir()
    (root / "partials" / "header.html").write_text("<h1>{{ title }}</h1>\n", encoding="utf-8")
    (root / "page.html").write_text(
        "{% include 'partials/header.html' %}<p>{{ body }}</p>\n", encoding="utf-8"
    )

    page = from_file(root / "page.html")
    print(page.render(title="Plantilla", body="Templates & includes"))
