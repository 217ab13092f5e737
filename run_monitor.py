#!/usr/bin/env python
"""Run the sitemap monitor. See ``sitemap_digest.cli`` for the options."""

import sys

from sitemap_digest.cli import main

if __name__ == "__main__":
    sys.exit(main())
