"""opencode-inline CLI bootstrap."""

from opencode_inline.cli import app

if __name__ == "__main__":
    app()
