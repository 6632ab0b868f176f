import os
import sys
from datetime import datetime

# `src/` holds the top-level modules (board_config, board_store, ...) next to the package.
PROJECT_ROOT = os.path.abspath('..')
SRC_ROOT = os.path.join(PROJECT_ROOT, 'src')
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from board_config import ENV_KEYS  # noqa: E402

project = 'JSON Bulletin Board'
author = 'Bulletin Board contributors'
copyright = f"{datetime.now().year}, {author}"
release = '0.1.0'

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.autosummary',
]

autosummary_generate = True
autodoc_member_order = 'bysource'
autodoc_typehints = 'description'
autodoc_default_options = {
    "members": True,
    "undoc-members": True,
    "show-inheritance": True,
}

templates_path = ['_templates']
exclude_patterns = ['_build', '_generated', 'Thumbs.db', '.DS_Store']

html_theme = 'alabaster'


def _write_env_reference():
    """Render the environment variables board_config reads as an rst table."""
    out_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), '_generated')
    os.makedirs(out_dir, exist_ok=True)
    lines = [
        ".. list-table::",
        "   :header-rows: 1",
        "",
        "   * - Variable",
        "     - Meaning",
    ]
    for key, meaning in ENV_KEYS.items():
        lines.append(f"   * - ``{key}``")
        lines.append(f"     - {meaning}")
    with open(os.path.join(out_dir, 'env_keys.rst'), 'w', encoding='utf-8') as f:
        f.write("\n".join(lines) + "\n")


_write_env_reference()
