"""Allow running tomate with `python -m tomate`."""

from tomate.cli import main

if __name__ == "__main__":
    main()
