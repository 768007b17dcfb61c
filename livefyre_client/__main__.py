# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Allow running livefyre_client as a module:
    python -m livefyre_client token
    python -m livefyre_client checksum --article-id a1 --title T --url https://example.com/a1
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
