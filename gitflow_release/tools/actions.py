"""GitHub Actions runtime: trigger event, outputs and failure reporting."""

import json
import os
import sys
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..utils import get_logger


@dataclass
class ActionEvent:
    """The event that triggered the workflow run."""
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def action(self) -> Optional[str]:
        return self.payload.get("action")

    @property
    def pull_request(self) -> Dict[str, Any]:
        return self.payload.get("pull_request") or {}

    @property
    def is_pull_request_closed(self) -> bool:
        return self.name == "pull_request" and self.action == "closed"

    @property
    def is_dispatch(self) -> bool:
        return self.name == "workflow_dispatch"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ActionEvent":
        """Read GITHUB_EVENT_NAME and the payload at GITHUB_EVENT_PATH."""
        environ = os.environ if environ is None else environ
        payload: Dict[str, Any] = {}
        event_path = environ.get("GITHUB_EVENT_PATH")
        if event_path and Path(event_path).is_file():
            payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
        return cls(name=environ.get("GITHUB_EVENT_NAME", ""), payload=payload)


def format_output(key: str, value: str) -> str:
    """Format one GITHUB_OUTPUT entry, using a heredoc for multi-line values."""
    if "\n" not in value:
        return f"{key}={value}\n"
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{key}<<{delimiter}\n{value}\n{delimiter}\n"


def set_outputs(outputs: Mapping[str, str], environ: Optional[Mapping[str, str]] = None) -> None:
    """
    Write step outputs.

    Outputs go to the file named by GITHUB_OUTPUT; outside of Actions they
    are only logged.
    """
    environ = os.environ if environ is None else environ
    logger = get_logger()
    logger.info(f"Setting output: {json.dumps(dict(outputs))}")

    output_path = environ.get("GITHUB_OUTPUT")
    if not output_path:
        logger.debug("GITHUB_OUTPUT is not set, outputs were not written")
        return

    with open(output_path, "a", encoding="utf-8") as fh:
        for key, value in outputs.items():
            fh.write(format_output(key, value))


def set_failed(message: str) -> None:
    """Surface an error annotation on the workflow run."""
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    sys.stdout.write(f"::error::{escaped}\n")
    sys.stdout.flush()
