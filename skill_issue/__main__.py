"""Allow ``python -m skill_issue`` to behave like the CLI entry point."""

from .cli import entrypoint

if __name__ == "__main__":  # pragma: no cover
    entrypoint()
