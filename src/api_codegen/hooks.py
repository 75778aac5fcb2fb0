"""Shell hooks run before and after generation."""

import logging
import subprocess

from api_codegen.errors import HookError

logger = logging.getLogger(__name__)


def run_hook(command: str) -> str:
    """Run ``command`` through the shell and return its stdout.

    Raises HookError when the command exits with a non-zero status.
    """
    logger.info("Running hook: %s", command)
    result = subprocess.run(command, shell=True, capture_output=True, text=True)
    if result.returncode != 0:
        raise HookError(command, result.stderr)
    return result.stdout
