"""
odpwriter CLI

Entry point: odpwriterctl (see odpwriter.cli.odpwriterctl).
"""

from odpwriter.cli.odpwriterctl import main

__all__ = ["main"]
