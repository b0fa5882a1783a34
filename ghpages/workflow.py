"""
workflow.py

Responsibility: fetch the deploy workflow template and install it into the repository.

The template is written exactly as served. It is parsed once with PyYAML only
to reject responses that are not a workflow (error pages, empty bodies).
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests
import yaml

logger = logging.getLogger(__name__)


class WorkflowError(RuntimeError):
    pass


def fetch_template(url: str, *, timeout: float = 30) -> bytes:
    """
    Download the template body as raw bytes, so no charset guess can alter it.
    """
    logger.debug("GET %s", url)
    try:
        r = requests.get(url, timeout=timeout, headers={"User-Agent": "gh-pages-cli"})
    except requests.RequestException as e:
        raise WorkflowError(f"Failed to download workflow template: {e}") from e
    if r.status_code >= 400:
        raise WorkflowError(f"Failed to download workflow template: HTTP {r.status_code}")
    validate_workflow(r.content)
    return r.content


def validate_workflow(content: bytes | str) -> None:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise WorkflowError(f"Workflow template is not valid YAML: {e}") from e
    if not isinstance(data, dict) or "jobs" not in data:
        raise WorkflowError("Workflow template does not define any jobs.")


def workflow_exists(path: str | Path) -> bool:
    return Path(path).is_file()


def write_workflow(path: str | Path, content: bytes) -> Path:
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(content)
    except OSError as e:
        raise WorkflowError(f"Failed to write {p}: {e}") from e
    return p


def install_workflow(url: str, path: str | Path) -> Path:
    """
    Download the template from `url` and write it to `path`, replacing any existing file.
    """
    return write_workflow(path, fetch_template(url))
