"""``python -m ghostwrite.config``"""

from .introspection import main

if __name__ == "__main__":
    main()
