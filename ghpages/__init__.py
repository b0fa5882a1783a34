"""
ghpages package

This package implements `gh-pages`, a CLI that wires a repository up for
GitHub Pages deployment through GitHub Actions.

Key responsibilities are split across modules:
- `shell.py`: the only place external processes are spawned
- `git.py`: version control queries and operations
- `github_client.py`: GitHub API access through the `gh` CLI
- `workflow.py`: deploy workflow template download / install
- `envfile.py`: env file discovery and parsing for secrets
- `polling.py`: waiting for the deploy marker branch
- `steps.py`: idempotent provisioning steps with ok / note / failed outcomes
- `config.py`: settings from defaults, `.gh-pages.yml` and environment
- `console.py`: terminal output and prompts
- `cli.py` + `commands/`: CLI entrypoint and per-command orchestration
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
