"""Package entry point.

Preferred invocation is via the installed console script:

    eda-report data.csv --target Listening_Time_minutes

For convenience we also support:

    python -m eda_report ...
"""

from __future__ import annotations

from .cli import app


def main() -> None:
    """Entry point used by `python -m eda_report`."""

    app()


if __name__ == "__main__":
    main()
