"""Flask application factory for the bulletin board."""

import os

from flask import Flask

from board import pages
from board_config import (
    get_data_dir,
    get_max_request_size,
    get_max_upload_size,
    get_upload_dir,
)
from board_store import BoardStore


def create_app(*, test_config=None, store=None):
    """Create and configure the Flask application.

    ``MAX_FILE_SIZE`` bounds the attachment itself; ``MAX_CONTENT_LENGTH``
    bounds the whole request and leaves room for the other form fields.

    :param test_config: Optional config dictionary applied after env defaults.
    :type test_config: dict | None
    :param store: Optional pre-built board store; defaults to one over ``DATA_DIR``.
    :type store: board_store.BoardStore | None
    :returns: Configured Flask app instance.
    :rtype: flask.Flask
    """
    app = Flask(__name__)
    app.config.from_mapping(
        DATA_DIR=get_data_dir(),
        UPLOAD_DIR=get_upload_dir(),
        MAX_FILE_SIZE=get_max_upload_size(),
        MAX_CONTENT_LENGTH=get_max_request_size(),
    )
    if test_config:
        app.config.update(test_config)

    os.makedirs(app.config["DATA_DIR"], exist_ok=True)
    os.makedirs(app.config["UPLOAD_DIR"], exist_ok=True)
    app.config["BOARD_STORE"] = store or BoardStore(app.config["DATA_DIR"])

    app.register_blueprint(pages.bp)
    return app
