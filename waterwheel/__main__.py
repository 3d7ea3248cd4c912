"""Allow ``python -m waterwheel``."""

from waterwheel.app import main

if __name__ == "__main__":
    main()
