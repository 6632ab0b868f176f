"""JSON-file persistence for boards, posts and comments."""

# One board maps to one JSON array on disk; every mutation rewrites the whole file.
import json
import logging
import os
import tempfile
import time
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

BOARD_SUFFIX = ".json"


class BoardStoreError(RuntimeError):
    """Raised when the data directory itself cannot be read."""


class InvalidBoardName(ValueError):
    """Raised for board names that cannot be mapped to a file in the data directory."""


def validate_board_name(board):
    """Reject board names that cannot be mapped to a file inside the data directory.

    :param board: Board name taken from the URL or a form.
    :type board: str
    :raises InvalidBoardName: If the name is empty, starts with ``.`` or holds
        a path separator or NUL.
    """
    if not board or not board.strip():
        raise InvalidBoardName("Board name must not be empty")
    if board.startswith(".") or any(sep in board for sep in ("/", "\\", "\x00")):
        raise InvalidBoardName(f"Invalid board name: {board!r}")


def timestamp_ms():
    """Return the current time in milliseconds since the epoch.

    :returns: Epoch milliseconds, used as post ids.
    :rtype: int
    """
    return int(time.time() * 1000)


def iso_timestamp(moment=None):
    """Format a moment as ISO-8601 UTC with millisecond precision and ``Z`` suffix.

    :param moment: Aware datetime to format; defaults to now.
    :type moment: datetime.datetime | None
    :returns: Timestamp string such as ``2024-05-01T12:00:00.000Z``.
    :rtype: str
    """
    moment = moment or datetime.now(timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def new_post(title, content, file=None):
    """Build a fresh post with zeroed vote counters and no comments.

    :param title: User-supplied title.
    :type title: str
    :param content: User-supplied body.
    :type content: str
    :param file: Stored attachment path, if any.
    :type file: str | None
    :returns: Post mapping ready to append to a board.
    :rtype: dict
    """
    return {
        "id": timestamp_ms(),
        "title": title,
        "content": content,
        "file": file,
        "createdAt": iso_timestamp(),
        "comments": [],
        "likes": 0,
        "dislikes": 0,
    }


def new_comment(content):
    """Build a comment mapping stamped with the current time."""
    return {"content": content, "createdAt": iso_timestamp()}


def find_post(posts, post_id):
    """Return the first post whose id equals ``post_id``, or ``None``."""
    for post in posts:
        if post.get("id") == post_id:
            return post
    return None


def search_posts(posts, query):
    """Filter posts whose title or content contains ``query``.

    Matching is a case-sensitive substring test; an empty query keeps every post.

    :param posts: Posts to filter.
    :type posts: list[dict]
    :param query: Substring to look for.
    :type query: str | None
    :returns: Matching posts in their original order.
    :rtype: list[dict]
    """
    query = query or ""
    return [
        post for post in posts
        if query in (post.get("title") or "") or query in (post.get("content") or "")
    ]


class BoardStore:
    """Board-name keyed document store over a directory of JSON files.

    Writes go to a temporary file that is renamed over the target, so a crash
    mid-write leaves the previous version intact. There is no locking: two
    requests mutating the same board race and the last save wins.
    """

    def __init__(self, data_dir):
        self.data_dir = str(data_dir)

    def path_for(self, board):
        """Map a board name to its JSON file path.

        :param board: Board name taken from the URL or a form.
        :type board: str
        :returns: ``<data_dir>/<board>.json``.
        :rtype: str
        :raises InvalidBoardName: If the name is empty or could escape ``data_dir``.
        """
        validate_board_name(board)
        return os.path.join(self.data_dir, f"{board}{BOARD_SUFFIX}")

    def exists(self, board):
        return os.path.exists(self.path_for(board))

    def list_boards(self):
        """Return board names found in the data directory.

        :returns: Sorted file basenames without the ``.json`` extension.
        :rtype: list[str]
        :raises BoardStoreError: If the directory cannot be read.
        """
        try:
            entries = os.listdir(self.data_dir)
        except OSError as exc:
            raise BoardStoreError(f"Error reading boards: {exc}") from exc
        return sorted(
            name[:-len(BOARD_SUFFIX)]
            for name in entries
            if name.endswith(BOARD_SUFFIX) and not name.startswith(".")
        )

    def load(self, board):
        """Read every post of a board.

        Missing, unreadable, corrupt or non-array files all yield an empty list;
        array entries that are not JSON objects are skipped.

        :param board: Board name.
        :type board: str
        :returns: Posts in stored order.
        :rtype: list[dict]
        """
        path = self.path_for(board)
        if not os.path.exists(path):
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                posts = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Discarding unreadable board file %s: %s", path, exc)
            return []
        if not isinstance(posts, list):
            logger.warning("Discarding non-array board file %s", path)
            return []
        kept = [post for post in posts if isinstance(post, dict)]
        if len(kept) != len(posts):
            # Dropped entries are lost on the next save of this board.
            logger.warning(
                "Skipping %d non-object entries in board file %s", len(posts) - len(kept), path
            )
        return kept

    def save(self, board, posts):
        """Overwrite a board file with the full post list, pretty-printed."""
        path = self.path_for(board)
        os.makedirs(self.data_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{board}.", suffix=".tmp", dir=self.data_dir
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(posts, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError):
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def create(self, board):
        """Create an empty board file unless one already exists.

        :returns: ``True`` when a new file was written.
        :rtype: bool
        """
        if self.exists(board):
            return False
        self.save(board, [])
        return True

    def add_post(self, board, title, content, file=None):
        """Append a new post to a board and persist it.

        :returns: The stored post.
        :rtype: dict
        """
        posts = self.load(board)
        post = new_post(title, content, file)
        posts.append(post)
        self.save(board, posts)
        return post

    def _update_post(self, board, post_id, mutate):
        # Shared load -> find -> mutate -> save cycle; unknown ids leave the file untouched.
        posts = self.load(board)
        post = find_post(posts, post_id)
        if post is None:
            return None
        mutate(post)
        self.save(board, posts)
        return post

    def add_comment(self, board, post_id, content):
        """Append a comment to a post.

        :returns: The updated post, or ``None`` when ``post_id`` is unknown.
        :rtype: dict | None
        """
        def _append(post):
            post.setdefault("comments", []).append(new_comment(content))

        return self._update_post(board, post_id, _append)

    def like(self, board, post_id):
        """Increment a post's like counter; ``None`` when the post is unknown."""
        return self._update_post(board, post_id, lambda post: _increment(post, "likes"))

    def dislike(self, board, post_id):
        """Increment a post's dislike counter; ``None`` when the post is unknown."""
        return self._update_post(board, post_id, lambda post: _increment(post, "dislikes"))


def _increment(post, field):
    post[field] = post.get(field, 0) + 1
