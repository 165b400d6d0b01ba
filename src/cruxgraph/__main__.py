"""Allow ``python -m cruxgraph`` as a shorthand for the ``cruxgraph`` command."""

from .cli import run

if __name__ == "__main__":
    run()
