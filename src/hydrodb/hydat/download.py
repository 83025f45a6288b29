"""
Download of the HYDAT archive.
"""

import logging
import os
import re
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Optional

import httpx
import pandas as pd

from ..base_client import BaseDataAccessClient, client_scope
from ..config import HYDAT_FILENAME, ClientConfig, hydat_dir
from ..exceptions import HydroDBError, RemoteUnavailableError
from .queries import hy_version

logger = logging.getLogger(__name__)

_RELEASE = re.compile(r"Hydat_sqlite3_(\d{8})")


class HydatDownloadClient(BaseDataAccessClient):
    """Locates and fetches the published HYDAT zip file."""

    def latest_release(self) -> str:
        """Release stamp (YYYYMMDD) of the newest archive on the server."""
        response = self._make_request("GET", self.config.hydat_url)
        match = _RELEASE.search(response.text)
        if not match:
            raise RemoteUnavailableError(
                f"No HYDAT release listed at {self.config.hydat_url}"
            )
        return match.group(1)

    def download_release(self, release: str, destination: Path) -> None:
        url = f"{self.config.hydat_url}Hydat_sqlite3_{release}.zip"
        logger.info(f"Downloading {url}")
        try:
            with self._client.stream("GET", url) as response:
                response.raise_for_status()
                with open(destination, "wb") as out_file:
                    for chunk in response.iter_bytes():
                        out_file.write(chunk)
        except (httpx.TimeoutException, httpx.HTTPStatusError, httpx.RequestError) as e:
            raise self._translate_error(e) from e


def _local_release(hydat_path: Path) -> Optional[str]:
    if not hydat_path.is_file():
        return None
    version = hy_version(str(hydat_path))
    if version.empty or "Date" not in version.columns:
        return None
    released = version["Date"].iloc[0]
    if pd.isna(released):
        return None
    return released.strftime("%Y%m%d")


def download_hydat(
    dl_hydat_here: Optional[str] = None,
    ask: bool = True,
    config: Optional[ClientConfig] = None,
    client: Optional[HydatDownloadClient] = None,
) -> bool:
    """
    Download the HYDAT SQLite archive.

    Nothing is downloaded when the local copy already has the newest
    release date.

    Args:
        dl_hydat_here: Target directory (default: :func:`hydrodb.config.hydat_dir`)
        ask: Prompt for confirmation first; the download takes several minutes
        config: Client settings
        client: Existing download client

    Returns:
        True if a new archive was written, False if the local one is current
    """
    target_dir = Path(dl_hydat_here) if dl_hydat_here else hydat_dir()

    if ask:
        response = input(
            "Downloading HYDAT will take approximately 10 minutes. "
            "Are you sure you want to continue? (Y/N) "
        )
        if response.strip().lower() not in ("y", "yes"):
            raise HydroDBError("HYDAT download cancelled.")

    target_dir.mkdir(parents=True, exist_ok=True)
    hydat_path = target_dir / HYDAT_FILENAME
    existing = _local_release(hydat_path)

    with client_scope(client, lambda: HydatDownloadClient(config)) as downloader:
        latest = downloader.latest_release()
        if latest == existing:
            logger.info(
                f"The existing local version of HYDAT, published on {existing}, "
                "is the most recent version available."
            )
            return False

        logger.info(f"Downloading HYDAT release {latest} to {target_dir}")
        with tempfile.TemporaryDirectory() as tmp:
            archive = Path(tmp) / f"Hydat_sqlite3_{latest}.zip"
            downloader.download_release(latest, archive)
            with zipfile.ZipFile(archive) as zipped:
                member = zipped.namelist()[0]
                # Written beside the target so the swap stays on one filesystem.
                partial = hydat_path.with_name(f"{HYDAT_FILENAME}.part")
                try:
                    with zipped.open(member) as source, open(partial, "wb") as dest:
                        shutil.copyfileobj(source, dest)
                    os.replace(partial, hydat_path)
                except BaseException:
                    partial.unlink(missing_ok=True)
                    raise

    logger.info(f"HYDAT {latest} written to {hydat_path}")
    return True
