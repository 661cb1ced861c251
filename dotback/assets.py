"""Removal of uploaded logo files that a level no longer references."""
import os

from flask import current_app

UPLOAD_PREFIX = "/uploads/"


def local_upload_path(url):
    """Map an ``/uploads/<name>`` reference to a file in UPLOAD_FOLDER, else None."""
    if not isinstance(url, str) or not url.startswith(UPLOAD_PREFIX):
        return None
    name = url[len(UPLOAD_PREFIX):]
    if not name or name in {".", ".."} or "/" in name or "\\" in name:
        return None
    return os.path.join(current_app.config["UPLOAD_FOLDER"], name)


def release_logo(url):
    path = local_upload_path(url)
    if path is None:
        return False
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    except OSError as exc:
        current_app.logger.warning("Failed to delete old logo file %s: %s", url, exc)
        return False
    current_app.logger.info("Deleted logo file %s", url)
    return True
