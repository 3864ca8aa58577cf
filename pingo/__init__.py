"""Execution core of a small interactive shell: builtins, environment, redirections and pipelines."""

__version__ = "0.1.0"