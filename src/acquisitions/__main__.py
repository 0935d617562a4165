"""Entry point for 'python -m acquisitions' command."""

from acquisitions.cli import main

if __name__ == "__main__":
    main()
