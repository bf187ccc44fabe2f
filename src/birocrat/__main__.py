"""Birocrat CLI bootstrap."""

from birocrat.cli import app

if __name__ == "__main__":
    app()
