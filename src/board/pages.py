"""Route handlers for boards, posts, comments and votes."""

import os
import re

from flask import (
    Blueprint,
    abort,
    current_app,
    redirect,
    render_template,
    request,
    send_from_directory,
    url_for,
)

from board_store import (
    BoardStoreError,
    InvalidBoardName,
    find_post,
    search_posts,
    validate_board_name,
)
from uploads import save_upload

bp = Blueprint('pages', __name__)

# Leading integer, the way a browser-facing id segment like "17abc" is read as 17.
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def _store():
    """Return the board store configured on the running app.

    :rtype: board_store.BoardStore
    """
    return current_app.config["BOARD_STORE"]


def _parse_post_id(raw):
    """Parse the leading integer of a URL segment.

    :param raw: Path segment from the URL.
    :type raw: str
    :returns: Parsed id, or ``None`` when the segment has no leading digits.
    :rtype: int | None
    """
    match = _LEADING_INT_RE.match(raw or "")
    return int(match.group(1)) if match else None


def _redirect_to_post(board, raw_post_id):
    post_id = _parse_post_id(raw_post_id)
    segment = str(post_id) if post_id is not None else raw_post_id
    return redirect(url_for('pages.post_view', board=board, post_id=segment))


@bp.errorhandler(InvalidBoardName)
def invalid_board_name(exc):
    current_app.logger.warning("Rejected board name: %s", exc)
    return 'Invalid board name', 400


@bp.route('/')
def index():
    """Render the list of every board in the data directory.

    :returns: Rendered HTML, or a plain 500 response if the directory is unreadable.
    """
    try:
        boards = _store().list_boards()
    except BoardStoreError as exc:
        current_app.logger.error("%s", exc)
        return 'Error reading boards', 500
    return render_template('pages/index.html', boards=boards)


@bp.route('/board/<board>')
def board_view(board):
    posts = _store().load(board)
    return render_template('pages/board.html', board=board, posts=posts)


@bp.route('/board/<board>/search')
def board_search(board):
    """Render a board filtered to posts containing ``q`` in title or content.

    A missing ``q`` behaves like an empty query and matches everything.
    """
    query = request.args.get('q', '')
    posts = search_posts(_store().load(board), query)
    return render_template('pages/board.html', board=board, posts=posts, query=query)


@bp.route('/board/<board>/post/<post_id>')
def post_view(board, post_id):
    """Render one post; unknown ids render the page with ``post=None``."""
    parsed_id = _parse_post_id(post_id)
    post = None
    if parsed_id is not None:
        post = find_post(_store().load(board), parsed_id)
    return render_template('pages/post.html', board=board, post=post)


@bp.route('/board/<board>/new')
def new_post_form(board):
    validate_board_name(board)
    return render_template('pages/new.html', board=board)


@bp.route('/board/<board>/posts', methods=['POST'])
def create_post(board):
    """Create a post from the submitted form and optional ``file`` upload.

    :returns: Redirect to the board listing.
    :rtype: flask.Response
    """
    store = _store()
    validate_board_name(board)
    stored_path = save_upload(
        request.files.get('file'),
        current_app.config["UPLOAD_DIR"],
        max_size=current_app.config.get("MAX_FILE_SIZE"),
    )
    post = store.add_post(
        board,
        title=request.form.get('title', ''),
        content=request.form.get('content', ''),
        file=stored_path,
    )
    current_app.logger.info("Created post %s on board %s", post["id"], board)
    return redirect(url_for('pages.board_view', board=board))


@bp.route('/board/<board>/post/<post_id>/comment', methods=['POST'])
def add_comment(board, post_id):
    """Append a comment; always redirects to the post view."""
    parsed_id = _parse_post_id(post_id)
    updated = None
    if parsed_id is not None:
        updated = _store().add_comment(board, parsed_id, request.form.get('content', ''))
    if updated is None:
        current_app.logger.info("Comment ignored: no post %s on board %s", post_id, board)
    return _redirect_to_post(board, post_id)


def _vote(board, post_id, action):
    parsed_id = _parse_post_id(post_id)
    updated = None
    if parsed_id is not None:
        updated = getattr(_store(), action)(board, parsed_id)
    if updated is None:
        current_app.logger.info("%s ignored: no post %s on board %s", action, post_id, board)
    return _redirect_to_post(board, post_id)


@bp.route('/board/<board>/post/<post_id>/like', methods=['POST'])
def like_post(board, post_id):
    return _vote(board, post_id, 'like')


@bp.route('/board/<board>/post/<post_id>/dislike', methods=['POST'])
def dislike_post(board, post_id):
    return _vote(board, post_id, 'dislike')


@bp.route('/newboard', methods=['GET', 'POST'])
def new_board():
    """Show the board-name form, or create the named board on POST.

    Creating a board that already exists leaves its file untouched.
    """
    if request.method == 'GET':
        return render_template('pages/newboard.html')
    board = request.form.get('boardName', '')
    if _store().create(board):
        current_app.logger.info("Created board %s", board)
    return redirect(url_for('pages.board_view', board=board))


@bp.route('/rules')
def rules():
    return render_template('pages/rules.html')


@bp.route('/uploads/<path:filename>')
def uploaded_file(filename):
    """Serve a stored attachment from the upload directory."""
    upload_dir = os.path.abspath(current_app.config["UPLOAD_DIR"])
    if not os.path.isdir(upload_dir):
        abort(404)
    return send_from_directory(upload_dir, filename)
