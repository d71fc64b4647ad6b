# chhoto

The storage and link-handling core of a small self-hosted URL shortener.
Short links are kept in an SQLite database. Each link has a hit counter and an
optional expiry time.

## Installation

```
pip install .
```

The package needs only the Python standard library.

## Storing links: `chhoto.database`

`LinkDatabase(path)` opens an SQLite file, or creates it if it does not exist.
It creates the `urls` table and its indexes when they are missing. It also
migrates older databases that lack the `expiry_time` column. The class is a
context manager, and `close()` closes the connection.

```python
from chhoto.database import LinkDatabase

with LinkDatabase("urls.sqlite") as db:
    expiry = db.add_link("docs", "https://example.com/docs", 0)  # 0 means the link never expires
    found = db.find_url("docs", needhits=True)  # LookupResult(longlink, hits, expiry_time)
    db.add_hit("docs")
    for row in db.getall():  # DBRow items in insertion order
        print(row.to_dict())
    removed = db.cleanup()  # number of expired links deleted
    db.delete_link("docs")  # True if a link was removed
```

- `add_link(shortlink, longlink, expiry_delay)` stores a link and returns its
  expiry time as a Unix timestamp. It returns `0` when `expiry_delay` is `0`.
  If the short link already exists it raises `DuplicateShortlinkError`.
- `find_url(shortlink, needhits)` finds only links that have not expired. When
  nothing matches, every field of the `LookupResult` is `None`. When
  `needhits` is false, only `longlink` is filled in.
- `getall()` returns all unexpired links as `DBRow` objects, which have the
  fields `shortlink`, `longlink`, `hits` and `expiry_time`.
- `cleanup()` deletes the links whose expiry time has passed and logs them
  through the `logging` module.

## Handling requests: `chhoto.links`

`add_link(req, db, settings)` takes a JSON request body of the form
`{"shortlink": ..., "longlink": ..., "expiry_delay": ...}`. Only `longlink` is
required. It returns a `CreatedLink` with `shortlink` and `expiry_time`. If the
link cannot be created it raises `LinkError`. The exception's message, which
is also held in `reason`, is one of:

- `"Invalid request!"`
- `"Short URL is not valid!"`
- `"Short URL is already in use!"`
- `"Something went wrong!"`
- `"Something went very wrong!"`
- `"Something went extremely wrong!"`

```python
from chhoto.database import LinkDatabase
from chhoto.links import LinkError, LinkSettings, add_link, delete_link, get_longurl, getall_json

settings = LinkSettings(slug_style="UID", slug_length=8, try_longer_slug=True)

with LinkDatabase("urls.sqlite") as db:
    try:
        created = add_link('{"longlink": "https://example.com"}', db, settings)
        print(created.shortlink, created.expiry_time)
    except LinkError as err:
        print(err.reason)
    print(get_longurl(db, "docs", needhits=False).longlink)
    print(getall_json(db))  # compact JSON array of all active links
    delete_link(db, "docs")
```

`LinkSettings` has these fields and defaults:

| field | default | meaning |
|---|---|---|
| `slug_style` | `"Pair"` | `"UID"` for random characters; anything else gives an adjective-name pair |
| `slug_length` | `8` | length of `"UID"` slugs |
| `public_mode` | `False` | apply `public_mode_expiry_delay` to new links |
| `public_mode_expiry_delay` | `0` | in public mode, the default and the upper limit for expiry delays, when greater than 0 |
| `try_longer_slug` | `False` | with `"UID"`, if a generated slug is taken, retry once with 4 more characters |

Expiry delays are given in seconds. They are capped at five years
(`MAX_EXPIRY_DELAY`). Negative delays are treated as zero.

Short links may contain only `a-z`, `0-9`, `-` and `_`, and `validate_link`
checks this. `get_longurl` and `delete_link` reject invalid short links without
querying the database. `gen_link(style, length)` creates a random slug: with the
style `"UID"` it is `length` characters drawn from `a-z0-9`, and with any other
style it is an adjective-name pair from `ADJECTIVES` and `NAMES`, such as
`"brave-turing"`.

## What this package does not do

This package is a library only. It has no web server or HTTP routes, no
redirects, no login, sessions or API-key checks, and no front end. It has no
command line and no background job that runs `cleanup()` on a schedule. An
application that serves links has to provide these itself.

## Tests

```
pip install .[test]
pytest
```