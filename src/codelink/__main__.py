"""Allow ``python -m codelink``."""

from codelink.ui.cli import main


if __name__ == "__main__":
    main()
