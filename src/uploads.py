"""Attachment storage for post-creation requests."""

import logging
import os

from werkzeug.exceptions import RequestEntityTooLarge

logger = logging.getLogger(__name__)


def stored_filename(original):
    """Return the name an upload is stored under.

    The client filename is kept verbatim apart from any directory part, so two
    uploads with the same name overwrite each other.

    :param original: Filename as sent by the client.
    :type original: str | None
    :returns: Bare filename, or empty string when nothing usable remains.
    :rtype: str
    """
    if not original:
        return ""
    name = original.replace("\\", "/").rsplit("/", 1)[-1]
    if name in {".", ".."}:
        return ""
    return name


def upload_size(file_storage):
    """Return the byte length of an uploaded stream, leaving it rewound."""
    stream = file_storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def save_upload(file_storage, upload_dir, max_size=None):
    """Write an uploaded file into ``upload_dir``.

    :param file_storage: Werkzeug upload from ``request.files``, or ``None``.
    :type file_storage: werkzeug.datastructures.FileStorage | None
    :param upload_dir: Destination directory.
    :type upload_dir: str
    :param max_size: Largest accepted file in bytes; ``None`` disables the check.
    :type max_size: int | None
    :returns: Stored path ``<upload_dir>/<filename>``, or ``None`` when no file was sent.
    :rtype: str | None
    :raises werkzeug.exceptions.RequestEntityTooLarge: If the file exceeds ``max_size``.
    """
    if file_storage is None:
        return None
    filename = stored_filename(file_storage.filename)
    if not filename:
        return None
    if max_size is not None:
        size = upload_size(file_storage)
        if size > max_size:
            logger.warning("Rejected upload %s: %d bytes exceeds limit %d", filename, size, max_size)
            raise RequestEntityTooLarge()
    os.makedirs(upload_dir, exist_ok=True)
    path = os.path.join(upload_dir, filename)
    file_storage.save(path)
    logger.info("Stored upload %s", path)
    return path.replace(os.sep, "/")
