"""Entry point for 'python -m notekeep'."""

from notekeep.cli import main

if __name__ == "__main__":
    main()
