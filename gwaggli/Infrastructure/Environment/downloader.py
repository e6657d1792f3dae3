"""
Model download into the local cache.

Downloads land in a randomly named directory below <cache-root>/download and
are renamed into <cache-root>/models/<model-name> only once complete, so an
interrupted download never leaves a partial model in place.
"""

import logging
import os
import shutil
import time
import uuid
from pathlib import Path
from typing import Callable, Optional

from huggingface_hub import snapshot_download
from huggingface_hub.errors import HfHubHTTPError

from gwaggli.Core.Common.errors import TransientIOError
from gwaggli.Infrastructure.Environment.paths import CachePaths

logger = logging.getLogger(__name__)


class ModelDownloader:
    """
    Fetches model repositories from the Hugging Face Hub into the cache.

    Args:
        paths: Cache layout to download into
        retries: Attempts per download before giving up
        backoff: Seconds to wait after the first failure; doubled after each retry
        fetch: Function (repo_id, local_dir) -> None that downloads a repository;
            defaults to huggingface_hub.snapshot_download
    """

    def __init__(
            self,
            paths: CachePaths,
            retries: int = 3,
            backoff: float = 1.0,
            fetch: Optional[Callable[[str, Path], None]] = None,
        ):
        if retries < 1:
            raise ValueError(f"Retries must be at least 1, got {retries}")
        self.paths = paths
        self.retries = retries
        self.backoff = backoff
        self._fetch = fetch or _snapshot_fetch

    def ensure(self, repo_id: str, model_name: str) -> Path:
        """
        Return the cached model directory, downloading it first if needed.

        Raises:
            TransientIOError: If the download kept failing
        """
        target = self.paths.model_dir(model_name)
        if target.exists():
            logger.debug(f"Model {model_name} already cached at {target}")
            return target

        self.paths.prepare()
        delay = self.backoff
        last_error = None

        for attempt in range(1, self.retries + 1):
            staging = self.paths.download / uuid.uuid4().hex[:10]
            try:
                logger.info(f"Downloading {repo_id} (attempt {attempt}/{self.retries})")
                self._fetch(repo_id, staging)
                os.replace(staging, target)
                logger.info(f"Model {model_name} stored at {target}")
                return target
            except (OSError, HfHubHTTPError) as e:
                last_error = e
                logger.warning(f"Download of {repo_id} failed: {e}")
                if target.exists():
                    # Another process finished the same download first
                    return target
                if attempt < self.retries:
                    time.sleep(delay)
                    delay *= 2
            finally:
                if staging.exists():
                    shutil.rmtree(staging, ignore_errors=True)

        raise TransientIOError(f"Failed to download {repo_id} after {self.retries} attempts: {last_error}")


def _snapshot_fetch(repo_id: str, local_dir: Path) -> None:
    snapshot_download(repo_id=repo_id, local_dir=str(local_dir))
