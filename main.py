#!/usr/bin/env python
import sys

from wolfcafe.infrastructure.application import ApplicationBuilder
from wolfcafe.ui.main_window import MainWindow


def main() -> int:
    """Start the WolfCafe items editor and return the exit code."""
    builder = ApplicationBuilder(main_window_factory=MainWindow)
    return builder.run()


if __name__ == "__main__":
    sys.exit(main())
