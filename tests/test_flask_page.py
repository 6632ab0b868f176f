import pytest
from bs4 import BeautifulSoup
from flask import Flask

# Render GET pages through the test client and inspect the HTML the views produce.
pytestmark = pytest.mark.web


def _soup(response):
    return BeautifulSoup(response.get_data(as_text=True), "html.parser")


def test_app_factory_creates_testable_app_with_required_routes(app):
    assert isinstance(app, Flask)
    assert app.config["TESTING"] is True

    routes = {rule.rule for rule in app.url_map.iter_rules()}
    for expected in (
        "/",
        "/board/<board>",
        "/board/<board>/search",
        "/board/<board>/post/<post_id>",
        "/board/<board>/new",
        "/board/<board>/posts",
        "/board/<board>/post/<post_id>/comment",
        "/board/<board>/post/<post_id>/like",
        "/board/<board>/post/<post_id>/dislike",
        "/newboard",
        "/rules",
        "/uploads/<path:filename>",
    ):
        assert expected in routes


def test_index_lists_boards(client, store):
    store.create("tech")
    store.create("art")

    response = client.get("/")

    assert response.status_code == 200
    links = [a.get_text(strip=True) for a in _soup(response).select('[data-testid="board-list"] a')]
    assert links == ["art", "tech"]


def test_index_with_no_boards_shows_placeholder(client):
    response = client.get("/")

    assert response.status_code == 200
    assert _soup(response).select_one('[data-testid="no-boards"]') is not None


def test_index_returns_500_when_data_dir_unreadable(client, app, tmp_path):
    from board_store import BoardStore

    app.config["BOARD_STORE"] = BoardStore(tmp_path / "gone")

    response = client.get("/")

    assert response.status_code == 500
    assert response.get_data(as_text=True) == "Error reading boards"


def test_unknown_board_renders_empty_list(client, data_dir):
    response = client.get("/board/unknown")

    assert response.status_code == 200
    assert _soup(response).select_one('[data-testid="no-posts"]') is not None
    assert not (data_dir / "unknown.json").exists()


def test_board_page_lists_posts_with_links(client, store, sequential_ids):
    post = store.add_post("tech", "hello", "world")

    response = client.get("/board/tech")

    soup = _soup(response)
    link = soup.select_one('[data-testid="post-list"] a')
    assert link.get_text(strip=True) == "hello"
    assert link["href"] == f"/board/tech/post/{post['id']}"


def test_search_filters_by_substring(client, store, sequential_ids):
    store.add_post("tech", "foo title", "x")
    store.add_post("tech", "plain", "contains foo")
    store.add_post("tech", "Foo upper", "FOO")

    response = client.get("/board/tech/search?q=foo")

    titles = [a.get_text(strip=True) for a in _soup(response).select('[data-testid="post-list"] a')]
    assert titles == ["foo title", "plain"]


@pytest.mark.parametrize("url", ["/board/tech/search?q=", "/board/tech/search"])
def test_search_with_empty_or_missing_query_returns_all(client, store, sequential_ids, url):
    store.add_post("tech", "one", "a")
    store.add_post("tech", "two", "b")

    response = client.get(url)

    assert len(_soup(response).select('[data-testid="post-list"] li')) == 2


def test_post_page_shows_post_and_comments(client, store, sequential_ids):
    post = store.add_post("tech", "hello", "world")
    store.add_comment("tech", post["id"], "nice")

    response = client.get(f"/board/tech/post/{post['id']}")

    assert response.status_code == 200
    soup = _soup(response)
    assert soup.select_one('[data-testid="post"] h1').get_text(strip=True) == "hello"
    comments = [c.get_text(strip=True) for c in soup.select('[data-testid="comment-list"] .comment')]
    assert comments == ["nice"]
    assert "Like 0" in soup.select_one('[data-testid="like-btn"]').get_text(strip=True)


@pytest.mark.parametrize("post_id", ["12345", "not-a-number"])
def test_unknown_post_renders_not_found_without_error(client, store, post_id):
    store.create("tech")

    response = client.get(f"/board/tech/post/{post_id}")

    assert response.status_code == 200
    assert _soup(response).select_one('[data-testid="post-not-found"]') is not None


def test_post_id_with_trailing_garbage_uses_leading_digits(client, store, sequential_ids):
    post = store.add_post("tech", "hello", "world")

    response = client.get(f"/board/tech/post/{post['id']}abc")

    assert _soup(response).select_one('[data-testid="post"]') is not None


def test_post_page_escapes_user_content(client, store, sequential_ids):
    post = store.add_post("tech", "<script>alert(1)</script>", "body")

    page = client.get(f"/board/tech/post/{post['id']}").get_data(as_text=True)

    assert "<script>alert(1)</script>" not in page
    assert "&lt;script&gt;" in page


def test_static_form_pages_render(client):
    new_post = _soup(client.get("/board/tech/new"))
    form = new_post.select_one('[data-testid="new-post-form"]')
    assert form["action"] == "/board/tech/posts"
    assert form["enctype"] == "multipart/form-data"
    assert form.select_one('input[name="file"]') is not None

    new_board = _soup(client.get("/newboard"))
    assert new_board.select_one('input[name="boardName"]') is not None

    rules = client.get("/rules")
    assert rules.status_code == 200
    assert _soup(rules).select_one('[data-testid="rules-list"]') is not None


def test_invalid_board_name_returns_400(client):
    response = client.get("/board/.hidden")

    assert response.status_code == 400
    assert response.get_data(as_text=True) == "Invalid board name"


def test_stylesheet_is_served(client):
    response = client.get("/static/style.css")

    assert response.status_code == 200
    assert "font-family" in response.get_data(as_text=True)


def test_post_page_with_non_object_entries_renders(client, data_dir):
    data_dir.joinpath("tech.json").write_text(
        '[1, {"id": 5, "title": "survivor", "content": "x", "comments": []}]', encoding="utf-8"
    )

    response = client.get("/board/tech/post/5")
    listing = client.get("/board/tech/search?q=surv")

    assert response.status_code == 200
    assert _soup(response).select_one('[data-testid="post"] h1').get_text(strip=True) == "survivor"
    assert listing.status_code == 200
    assert len(_soup(listing).select('[data-testid="post-list"] li')) == 1
