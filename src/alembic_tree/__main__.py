"""Allow ``python -m alembic_tree``."""

import sys

from alembic_tree.cli import main

sys.exit(main())
