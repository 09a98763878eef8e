import zipfile
from pathlib import Path

import pytest

OPF_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<package version="3.0" unique-identifier="pub-id">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    {metadata}
  </metadata>
</package>
"""

PAGE_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><title>Examinemos las Escrituras</title></head>
<body>
<h2>{heading}</h2>
<p class="themeScrp">{scripture}</p>
<div class="bodyTxt">
<p class="p1 sb">{explanation}</p>
</div>
</body>
</html>
"""


def make_page(heading: str, scripture: str, explanation: str) -> str:
    return PAGE_TEMPLATE.format(heading=heading, scripture=scripture, explanation=explanation)


def make_sanitized_page(*blocks: str) -> str:
    """A page without the themeScrp / "pN sb" markup, blocks separated by CRLF."""
    body = "\r\n".join(f"<div>{b}</div>" for b in blocks)
    return f"<html><body>\r\n{body}\r\n</body></html>"


def write_epub(path: Path, entries: dict) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("mimetype", "application/epub+zip")
        for name, content in entries.items():
            zf.writestr(name, content)
    return path


@pytest.fixture
def sample_pages():
    return {
        "OEBPS/1102025003.xhtml": make_page(
            "Jueves 2 de enero",
            "Esta enfermedad no tiene como finalidad la muerte (Juan 11:4).",
            "Explicación del texto w23.04 10 párrs. 10, 11",
        ),
        "OEBPS/1102025002.xhtml": make_page(
            "Miércoles 1 de enero",
            "Escudriñen las Escrituras (Juan 5:39).",
            "Comentario del día w22.01 8 párr. 2",
        ),
        "OEBPS/1102025004.xhtml": make_page(
            "Viernes 3 de enero",
            "Sigan buscando primero el Reino (Mat. 6:33).",
            "Otro comentario w21.05 3 párr. 4",
        ),
        "OEBPS/toc.xhtml": "<html><body><h2>Contenido</h2></body></html>",
        "OEBPS/1102025001.xhtml": "<html><body><h1>Enero</h1></body></html>",
    }


@pytest.fixture
def sample_epub(tmp_path, sample_pages):
    entries = {"OEBPS/content.opf": OPF_TEMPLATE.format(
        metadata="<dc:title>Examinemos 2025 (es25-S)</dc:title>"
    )}
    entries.update(sample_pages)
    return write_epub(tmp_path / "es25_S.epub", entries)
