"""
GitHub Actions integration for nexttag.

Reads the run context the Actions runner exports and writes step outputs
to the ``$GITHUB_OUTPUT`` file.
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


def active_ref(env: Optional[Dict[str, str]] = None) -> Optional[str]:
    """
    Branch ref that triggered the run.

    Pull request runs expose the source branch in ``GITHUB_HEAD_REF``;
    everything else uses ``GITHUB_REF`` (``refs/heads/<branch>``).
    """
    env = os.environ if env is None else env
    head_ref = env.get('GITHUB_HEAD_REF')
    if head_ref:
        return f"refs/heads/{head_ref}"
    return env.get('GITHUB_REF') or None


def branch_from_ref(ref: str) -> str:
    """``refs/heads/release/2.x`` -> ``release/2.x``."""
    prefix = 'refs/heads/'
    return ref[len(prefix):] if ref.startswith(prefix) else ref


def write_outputs(outputs: Dict[str, Optional[str]], path: Optional[str] = None) -> bool:
    """
    Append step outputs for later workflow steps.

    Args:
        outputs: Output names and values (None values are skipped)
        path: Output file, defaults to ``$GITHUB_OUTPUT``

    Returns:
        True if the outputs were written, False outside of Actions
    """
    path = path or os.environ.get('GITHUB_OUTPUT')
    if not path:
        return False

    with open(Path(path), 'a', encoding='utf-8') as f:
        for name, value in outputs.items():
            if value is None:
                continue
            value = str(value)
            if '\n' in value:
                delimiter = f"ghadelimiter_{uuid.uuid4()}"
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                f.write(f"{name}={value}\n")

    logger.debug(f"Wrote outputs {sorted(outputs)} to {path}")
    return True
