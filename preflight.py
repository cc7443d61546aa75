#!/usr/bin/env python3

import sys

from album_sync.config import load_settings
from album_sync.tools.preflight_entry import run_preflight


def main():
    try:
        settings = load_settings()
    except (OSError, ValueError) as e:
        print(f"[WARN] could not load settings: {e}")
        settings = None
    return run_preflight(settings)


if __name__ == "__main__":
    sys.exit(main())
