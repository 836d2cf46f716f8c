"""Allow running the job with python -m channel_discovery."""

from .cli import main

raise SystemExit(main())
