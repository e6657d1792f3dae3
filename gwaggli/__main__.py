import sys

from gwaggli.Application.Cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
