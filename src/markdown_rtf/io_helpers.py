from __future__ import annotations

from pathlib import Path

RTF_SUFFIX = ".rtf"


def read_markdown(path: Path) -> str:
    # utf-8-sig drops a byte order mark left by some editors.
    return path.read_text(encoding="utf-8-sig")


def default_output_path(input_path: Path) -> Path:
    return input_path.with_suffix(RTF_SUFFIX)


def write_text_atomic(path: Path, content: str, encoding: str = "ascii") -> None:
    # RTF output is pure ASCII; no BOM, which some RTF readers reject.
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(content, encoding=encoding)
    tmp_path.replace(path)
