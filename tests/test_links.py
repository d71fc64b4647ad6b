import json
import re
import string
import time

import pytest

from chhoto.database import LinkDatabase, LookupResult
from chhoto.links import (
    ADJECTIVES,
    MAX_EXPIRY_DELAY,
    NAMES,
    CreatedLink,
    LinkError,
    LinkSettings,
    add_link,
    delete_link,
    gen_link,
    get_longurl,
    getall_json,
    validate_link,
)

UID_ALPHABET = set(string.ascii_lowercase + string.digits)


@pytest.fixture
def db():
    with LinkDatabase(":memory:") as database:
        yield database


def request(**fields):
    return json.dumps(fields)


@pytest.mark.parametrize("link", ["abc", "abc-123_x", "-", "z9"])
def test_validate_link_accepts(link):
    assert validate_link(link) is True


@pytest.mark.parametrize("link", ["", "ABC", "a b", "a/b", "abc\n", "é"])
def test_validate_link_rejects(link):
    assert validate_link(link) is False


def test_gen_link_uid():
    slug = gen_link("UID", 12)
    assert len(slug) == 12
    assert set(slug) <= UID_ALPHABET


def test_gen_link_pair():
    slug = gen_link("Pair", 8)
    adjective, name = slug.split("-")
    assert adjective in ADJECTIVES
    assert name in NAMES
    assert validate_link(slug)


def test_add_link_with_shortlink(db):
    created = add_link(
        request(shortlink="mine", longlink="https://example.com"), db, LinkSettings()
    )
    assert created == CreatedLink("mine", 0)
    assert get_longurl(db, "mine", True) == LookupResult("https://example.com", 0, 0)


def test_add_link_generates_pair(db):
    created = add_link(request(longlink="https://example.com"), db, LinkSettings())
    assert validate_link(created.shortlink)
    assert "-" in created.shortlink
    assert get_longurl(db, created.shortlink, False).longlink == "https://example.com"


def test_add_link_generates_uid(db):
    settings = LinkSettings(slug_style="UID", slug_length=10)
    created = add_link(request(longlink="https://example.com"), db, settings)
    assert len(created.shortlink) == 10
    assert set(created.shortlink) <= UID_ALPHABET
    assert created.expiry_time == 0
    assert get_longurl(db, created.shortlink, False).longlink == "https://example.com"


@pytest.mark.parametrize(
    "req",
    [
        "not json",
        "[]",
        request(shortlink="x"),
        request(longlink=5),
        request(longlink="https://example.com", shortlink=None),
        request(longlink="https://example.com", expiry_delay=1.5),
        request(longlink="https://example.com", expiry_delay=True),
        request(longlink="https://example.com", expiry_delay=2**64),
    ],
)
def test_add_link_invalid_request(db, req):
    with pytest.raises(LinkError) as info:
        add_link(req, db, LinkSettings())
    assert info.value.reason == "Invalid request!"


def test_add_link_invalid_shortlink(db):
    with pytest.raises(LinkError, match="Short URL is not valid!"):
        add_link(request(shortlink="Bad Link", longlink="https://example.com"), db, LinkSettings())
    assert db.getall() == []


def test_add_link_duplicate_provided(db):
    req = request(shortlink="dup", longlink="https://example.com")
    add_link(req, db, LinkSettings())
    with pytest.raises(LinkError, match="Short URL is already in use!"):
        add_link(req, db, LinkSettings())


def _fill_single_chars(db):
    for ch in "abcdefghijklmnopqrstuvwxyz0123456789":
        db.add_link(ch, "https://example.com", 0)


def test_generated_collision_without_retry(db):
    _fill_single_chars(db)
    settings = LinkSettings(slug_style="UID", slug_length=1)
    with pytest.raises(LinkError, match="Something went wrong!"):
        add_link(request(longlink="https://example.com/new"), db, settings)


def test_generated_collision_retries_longer(db):
    _fill_single_chars(db)
    settings = LinkSettings(slug_style="UID", slug_length=1, try_longer_slug=True)
    created = add_link(request(longlink="https://example.com/new"), db, settings)
    assert len(created.shortlink) == 5
    assert get_longurl(db, created.shortlink, False).longlink == "https://example.com/new"


def test_expiry_delay_applied(db):
    before = int(time.time())
    created = add_link(
        request(shortlink="soon", longlink="https://example.com", expiry_delay=60),
        db,
        LinkSettings(),
    )
    after = int(time.time())
    assert before + 60 <= created.expiry_time <= after + 60


def test_negative_delay_means_no_expiry(db):
    created = add_link(
        request(shortlink="neg", longlink="https://example.com", expiry_delay=-50),
        db,
        LinkSettings(),
    )
    assert created.expiry_time == 0


def test_delay_capped_at_five_years(db):
    before = int(time.time())
    created = add_link(
        request(shortlink="long", longlink="https://example.com", expiry_delay=10**12),
        db,
        LinkSettings(),
    )
    after = int(time.time())
    assert before + MAX_EXPIRY_DELAY <= created.expiry_time <= after + MAX_EXPIRY_DELAY


def test_public_mode_default_and_cap(db):
    settings = LinkSettings(public_mode=True, public_mode_expiry_delay=100)
    before = int(time.time())
    default = add_link(request(shortlink="d", longlink="https://example.com"), db, settings)
    capped = add_link(
        request(shortlink="c", longlink="https://example.com", expiry_delay=5000), db, settings
    )
    shorter = add_link(
        request(shortlink="s", longlink="https://example.com", expiry_delay=10), db, settings
    )
    after = int(time.time())
    assert before + 100 <= default.expiry_time <= after + 100
    assert before + 100 <= capped.expiry_time <= after + 100
    assert before + 10 <= shorter.expiry_time <= after + 10


def test_get_longurl_invalid_skips_lookup(db):
    db.add_link("UPPER", "https://example.com", 0)
    assert get_longurl(db, "UPPER", True) == LookupResult(None, None, None)


def test_getall_json(db):
    add_link(request(shortlink="one", longlink="https://example.com/1"), db, LinkSettings())
    add_link(request(shortlink="two", longlink="https://example.com/2"), db, LinkSettings())
    text = getall_json(db)
    assert " " not in text
    assert json.loads(text) == [
        {"shortlink": "one", "longlink": "https://example.com/1", "hits": 0, "expiry_time": 0},
        {"shortlink": "two", "longlink": "https://example.com/2", "hits": 0, "expiry_time": 0},
    ]


def test_delete_link(db):
    add_link(request(shortlink="gone", longlink="https://example.com"), db, LinkSettings())
    assert delete_link(db, "gone") is True
    assert delete_link(db, "gone") is False
    assert get_longurl(db, "gone", False) == LookupResult()


def test_delete_invalid_link(db):
    db.add_link("UPPER", "https://example.com", 0)
    assert delete_link(db, "UPPER") is False
    assert len(db.getall()) == 1