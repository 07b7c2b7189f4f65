"""Allow ``python -m create_alith_app``."""

from create_alith_app.cli import main

if __name__ == "__main__":
    main()
