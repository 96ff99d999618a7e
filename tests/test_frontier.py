# File: tests/test_frontier.py
from site_mirror.crawler.frontier import Frontier


def test_dequeue_is_fifo_and_ends_with_none():
    frontier = Frontier(["http://example.com/a", "http://example.com/b"])
    assert frontier.dequeue().url == "http://example.com/a"
    assert frontier.dequeue().url == "http://example.com/b"
    assert frontier.dequeue() is None


def test_dequeue_marks_seen_and_drops_duplicates():
    frontier = Frontier()
    frontier.enqueue_many(
        ["http://example.com/a", "http://EXAMPLE.com/a#frag", "http://example.com/b", "http://example.com/a"]
    )
    assert len(frontier) == 4

    handed_out = []
    while (entry := frontier.dequeue()) is not None:
        handed_out.append(entry.url)

    assert handed_out == ["http://example.com/a", "http://example.com/b"]
    assert frontier.seen_count("http://example.com/a") == 1
    assert len(frontier) == 0


def test_url_seen_elsewhere_is_skipped_at_dequeue(frontier):
    frontier.enqueue_many(["http://example.com/redirected"])
    frontier.mark_seen("http://example.com/redirected")
    assert frontier.dequeue() is None


def test_referer_last_writer_wins(frontier):
    frontier.enqueue_many(["http://example.com/x"], referer="http://example.com/one")
    frontier.enqueue_many(["http://example.com/x"], referer="http://example.com/two")
    entry = frontier.dequeue()
    assert entry.url == "http://example.com/x"
    assert entry.referer == "http://example.com/two"
    assert frontier.referer_for("http://example.com/x#f") == "http://example.com/two"


def test_set_referer_for_seed():
    frontier = Frontier(["http://example.com/"])
    frontier.set_referer("http://example.com", "http://google.com/")
    assert frontier.dequeue().referer == "http://google.com/"


def test_mark_seen_counts(frontier):
    assert frontier.mark_seen("http://example.com/") == 1
    assert frontier.mark_seen("http://example.com/#x") == 2
    assert frontier.is_seen("http://example.com")


def test_clear_discards_pending(frontier):
    frontier.enqueue_many([f"http://example.com/{i}" for i in range(5)])
    assert frontier.clear() == 5
    assert frontier.dequeue() is None
