from __future__ import annotations

import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv


def main() -> int:
    root = Path(__file__).resolve().parent
    src_path = root / "src"
    sys.path.insert(0, str(src_path))

    env_path = find_dotenv(usecwd=True)
    load_dotenv(env_path, override=False)

    from markdown_rtf.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    raise SystemExit(main())
