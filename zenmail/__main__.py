"""Allow ``python -m zenmail``."""

from zenmail.cli import main

raise SystemExit(main())
