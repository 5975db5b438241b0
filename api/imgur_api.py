"""
Imgur uploader for captures and recordings
"""
from __future__ import annotations

import os
from concurrent.futures import Executor, Future
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

import requests

from config import IMGUR_UPLOAD_URL, UPLOAD_FILE_PREFIX, UPLOAD_TIMEOUT_SECONDS
from core.settings_store import SettingsStore
from utils.clipboard import copy_to_clipboard
from utils.logger import logger


class UploadError(Enum):
    NETWORK = "network"
    PARSE = "parse"
    FILE = "file"


@dataclass(frozen=True)
class UploadResult:
    file_path: str
    link: Optional[str] = None
    error: Optional[UploadError] = None
    detail: str = ""
    status_code: Optional[int] = None
    copied: bool = False

    @property
    def ok(self) -> bool:
        return self.link is not None


def mime_type_for(file_type: str) -> str:
    file_type = file_type.lower()
    if file_type in ("jpg", "jpeg"):
        return "image/jpeg"
    return f"image/{file_type}"


def extract_link(payload: Any) -> Optional[str]:
    """Return data.link from an Imgur response body, or None."""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if not isinstance(data, dict):
        return None
    link = data.get("link")
    if isinstance(link, str) and link:
        return link
    return None


class ImgurAPI:
    """
    Single-attempt multipart upload to Imgur.

    Every call builds its own request, so concurrent uploads never share
    request state. The link of a successful upload goes to the clipboard.
    """

    def __init__(
        self,
        settings: SettingsStore,
        upload_url: str = IMGUR_UPLOAD_URL,
        timeout: float = UPLOAD_TIMEOUT_SECONDS,
        clipboard: Callable[[str], bool] = copy_to_clipboard,
    ):
        self.settings = settings
        self.upload_url = upload_url
        self.timeout = timeout
        self.clipboard = clipboard

    def _get_headers(self) -> Dict[str, str]:
        return {
            "accept": "application/json",
            "authorization": f"Client-ID {self.settings.get('imgurClientId')}",
        }

    def _post(self, file_path: str) -> UploadResult:
        file_type = self.settings.get("captureFileType")
        part_name = f"{UPLOAD_FILE_PREFIX}.{file_type}"

        try:
            with open(file_path, "rb") as f:
                files = {"image": (part_name, f, mime_type_for(file_type))}
                logger.info(f"[IMGUR] POST {self.upload_url} ({os.path.basename(file_path)})")
                response = requests.post(
                    self.upload_url,
                    headers=self._get_headers(),
                    files=files,
                    timeout=self.timeout,
                )
        except OSError as e:
            logger.error(f"[IMGUR] Could not read {file_path}: {e}")
            return UploadResult(file_path, error=UploadError.FILE, detail=str(e))
        except requests.RequestException as e:
            logger.error(f"[IMGUR] Upload request failed: {e}")
            return UploadResult(file_path, error=UploadError.NETWORK, detail=str(e))

        status_code = response.status_code
        logger.info(f"[IMGUR] Response Status: {status_code}")

        if not response.content:
            logger.error("[IMGUR] Response has no body")
            return UploadResult(
                file_path,
                error=UploadError.NETWORK,
                detail="empty response body",
                status_code=status_code,
            )

        try:
            payload = response.json()
        except ValueError:
            logger.error(f"[IMGUR] Response is not JSON: {response.text[:200]}")
            return UploadResult(
                file_path,
                error=UploadError.PARSE,
                detail="response is not JSON",
                status_code=status_code,
            )

        link = extract_link(payload)
        if link is None:
            logger.error("[IMGUR] Error parsing response or retrieving image link")
            logger.debug(f"[IMGUR] Response body: {payload}")
            return UploadResult(
                file_path,
                error=UploadError.PARSE,
                detail="response has no data.link",
                status_code=status_code,
            )

        logger.info(f"[IMGUR] Image uploaded successfully. Link: {link}")
        return UploadResult(file_path, link=link, status_code=status_code)

    def upload(self, file_path: str, on_complete: Optional[Callable[[UploadResult], None]] = None) -> UploadResult:
        """
        Upload a file and copy the resulting link.

        on_complete is called exactly once with the result, whether the
        upload succeeded or not.
        """
        result = self._post(file_path)
        if result.ok:
            result = replace(result, copied=bool(self.clipboard(result.link)))
        if on_complete is not None:
            on_complete(result)
        return result

    def upload_async(
        self,
        executor: Executor,
        file_path: str,
        on_complete: Optional[Callable[[UploadResult], None]] = None,
    ) -> "Future[UploadResult]":
        return executor.submit(self.upload, file_path, on_complete)
