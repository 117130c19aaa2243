"""Allow ``python -m devdocs_mcp``."""

import sys

from devdocs_mcp.cli import main

sys.exit(main())
