"""External node classifier lookup.

Runs the configured classifier program with a hostname as its last
argument and parses the YAML it prints. The lookup never raises: no
program, a failed execution or unusable output all yield {}.
"""
import logging
import shlex
import subprocess
from typing import Any, Optional

import yaml

from ..utils.retry import with_retry

logger = logging.getLogger(__name__)


class ClassifierLookup:
    """Query an external node classifier for one host."""

    def __init__(
        self,
        command: Optional[str] = None,
        timeout: float = 30.0,
        max_attempts: int = 3,
    ):
        """
        Initialize lookup.

        Args:
            command: Classifier command line (hostname is appended); None disables lookups
            timeout: Seconds before a single run is abandoned
            max_attempts: Runs attempted when the classifier times out
        """
        self.command = command
        self.timeout = timeout
        self._execute = with_retry(
            max_attempts=max_attempts,
            min_wait=0.5,
            max_wait=5,
            exceptions=(subprocess.TimeoutExpired,),
        )(self._run)

    @property
    def enabled(self) -> bool:
        return bool(self.command)

    def lookup(self, hostname: str) -> dict[str, Any]:
        """
        Classify a host.

        Returns:
            The classifier's mapping with str keys, or {} on any failure
        """
        if not self.enabled:
            return {}

        try:
            output = self._execute(hostname)
        except (OSError, ValueError, subprocess.TimeoutExpired) as e:
            # ValueError covers bad quoting and undecodable output
            logger.warning(f"Classifier failed for {hostname}: {e}")
            return {}

        try:
            data = yaml.safe_load(output.strip())
        except yaml.YAMLError as e:
            logger.warning(f"Classifier returned invalid YAML for {hostname}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.debug(f"Classifier returned no mapping for {hostname}")
            return {}

        return {str(k): v for k, v in data.items()}

    def _run(self, hostname: str) -> str:
        cmd = shlex.split(self.command) + [hostname]
        logger.debug(f"Running: {' '.join(cmd)}")

        result = subprocess.run(
            cmd,
            capture_output=True,
            encoding="utf-8",
            timeout=self.timeout,
            check=False,  # Output is parsed even on a non-zero exit
        )

        if result.returncode != 0:
            logger.debug(f"Classifier exited {result.returncode}: {result.stderr.strip()}")

        return result.stdout
