#!/usr/bin/env python
"""Django's command-line utility for administrative tasks."""

import os
import sys
from pathlib import Path


def main() -> None:
    # Repository root and the shared schemas package must be importable
    root = Path(__file__).resolve().parents[2]
    sys.path[:0] = [str(root), str(root / "packages" / "schemas")]
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "apps.web.config.settings")
    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
