"""Validation, slug generation and request handling for short links."""

from __future__ import annotations

import json
import re
import secrets
import sqlite3
import string
from dataclasses import dataclass

from .database import DuplicateShortlinkError, LinkDatabase, LookupResult

# Longest allowed expiry delay: five years, in seconds.
MAX_EXPIRY_DELAY = 157784760

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

_VALID_LINK = re.compile(r"[a-z0-9\-_]+")

_UID_CHARS = string.ascii_lowercase + string.digits

ADJECTIVES = (
    "admiring", "adoring", "affectionate", "agitated", "amazing", "angry", "awesome", "beautiful",
    "blissful", "bold", "boring", "brave", "busy", "charming", "clever", "compassionate", "competent",
    "condescending", "confident", "cool", "cranky", "crazy", "dazzling", "determined", "distracted",
    "dreamy", "eager", "ecstatic", "elastic", "elated", "elegant", "eloquent", "epic", "exciting",
    "fervent", "festive", "flamboyant", "focused", "friendly", "frosty", "funny", "gallant", "gifted",
    "goofy", "gracious", "great", "happy", "hardcore", "heuristic", "hopeful", "hungry", "infallible",
    "inspiring", "intelligent", "interesting", "jolly", "jovial", "keen", "kind", "laughing", "loving",
    "lucid", "magical", "modest", "musing", "mystifying", "naughty", "nervous", "nice", "nifty",
    "nostalgic", "objective", "optimistic", "peaceful", "pedantic", "pensive", "practical", "priceless",
    "quirky", "quizzical", "recursing", "relaxed", "reverent", "romantic", "sad", "serene", "sharp",
    "silly", "sleepy", "stoic", "strange", "stupefied", "suspicious", "sweet", "tender", "thirsty",
    "trusting", "unruffled", "upbeat", "vibrant", "vigilant", "vigorous", "wizardly", "wonderful",
    "xenodochial", "youthful", "zealous", "zen",
)

NAMES = (
    "agnesi", "albattani", "allen", "almeida", "antonelli", "archimedes", "ardinghelli", "aryabhata",
    "austin", "babbage", "banach", "banzai", "bardeen", "bartik", "bassi", "beaver", "bell", "benz",
    "bhabha", "bhaskara", "black", "blackburn", "blackwell", "bohr", "booth", "borg", "bose", "bouman",
    "boyd", "brahmagupta", "brattain", "brown", "buck", "burnell", "cannon", "carson", "cartwright",
    "carver", "cauchy", "cerf", "chandrasekhar", "chaplygin", "chatelet", "chatterjee", "chaum",
    "chebyshev", "clarke", "cohen", "colden", "cori", "cray", "curie", "curran", "darwin", "davinci",
    "dewdney", "dhawan", "diffie", "dijkstra", "dirac", "driscoll", "dubinsky", "easley", "edison",
    "einstein", "elbakyan", "elgamal", "elion", "ellis", "engelbart", "euclid", "euler", "faraday",
    "feistel", "fermat", "fermi", "feynman", "franklin", "gagarin", "galileo", "galois", "ganguly",
    "gates", "gauss", "germain", "goldberg", "goldstine", "goldwasser", "golick", "goodall", "gould",
    "greider", "grothendieck", "haibt", "hamilton", "hardy", "haslett", "hawking", "heisenberg",
    "hellman", "hermann", "herschel", "hertz", "heyrovsky", "hodgkin", "hofstadter", "hoover", "hopper",
    "hugle", "hypatia", "ishizaka", "jackson", "jang", "jemison", "jennings", "jepsen", "johnson",
    "joliot", "jones", "kalam", "kapitsa", "kare", "keldysh", "keller", "kepler", "khayyam", "khorana",
    "kilby", "kirch", "knuth", "kowalevski", "lalande", "lamarr", "lamport", "leakey", "leavitt",
    "lederberg", "lehmann", "lewin", "lichterman", "liskov", "lovelace", "lumiere", "mahavira",
    "margulis", "matsumoto", "maxwell", "mayer", "mccarthy", "mcclintock", "mclaren", "mclean",
    "mcnulty", "meitner", "mendel", "mendeleev", "meninsky", "merkle", "mestorf", "mirzakhani",
    "montalcini", "moore", "morse", "moser", "murdock", "napier", "nash", "neumann", "newton",
    "nightingale", "nobel", "noether", "northcutt", "noyce", "panini", "pare", "pascal", "pasteur",
    "payne", "perlman", "pike", "poincare", "poitras", "proskuriakova", "ptolemy", "raman", "ramanujan",
    "rhodes", "ride", "riemann", "ritchie", "robinson", "roentgen", "rosalind", "rubin", "saha",
    "sammet", "sanderson", "satoshi", "shamir", "shannon", "shaw", "shirley", "shockley", "shtern",
    "sinoussi", "snyder", "solomon", "spence", "stonebraker", "sutherland", "swanson", "swartz",
    "swirles", "taussig", "tesla", "tharp", "thompson", "torvalds", "tu", "turing", "varahamihira",
    "vaughan", "vaughn", "villani", "visvesvaraya", "volhard", "wescoff", "weierstrass", "wilbur",
    "wiles", "williams", "williamson", "wilson", "wing", "wozniak", "wright", "wu", "yalow", "yonath",
    "zhukovsky",
)


@dataclass(frozen=True)
class LinkSettings:
    """Settings that govern how new links are created."""

    slug_style: str = "Pair"
    slug_length: int = 8
    public_mode: bool = False
    public_mode_expiry_delay: int = 0
    try_longer_slug: bool = False


@dataclass(frozen=True)
class CreatedLink:
    """A link that was stored successfully."""

    shortlink: str
    expiry_time: int


class LinkError(Exception):
    """A link could not be created; the message is the reason shown to clients."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def validate_link(link: str) -> bool:
    """Return whether a short link uses only a-z, 0-9, '-' and '_'."""
    return _VALID_LINK.fullmatch(link) is not None


def gen_link(style: str, length: int) -> str:
    """Generate a random slug: random characters for "UID", else adjective-name."""
    if style == "UID":
        return "".join(secrets.choice(_UID_CHARS) for _ in range(length))
    return f"{secrets.choice(ADJECTIVES)}-{secrets.choice(NAMES)}"


def get_longurl(db: LinkDatabase, shortlink: str, needhits: bool) -> LookupResult:
    """Look up a short link, refusing invalid ones without touching the database."""
    if validate_link(shortlink):
        return db.find_url(shortlink, needhits)
    return LookupResult()


def getall_json(db: LinkDatabase) -> str:
    """Return all active links as a compact JSON array."""
    return json.dumps(
        [row.to_dict() for row in db.getall()],
        separators=(",", ":"),
        ensure_ascii=False,
    )


def _is_i64(value) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and _I64_MIN <= value <= _I64_MAX
    )


def _parse_request(req: str) -> tuple[str, str, int]:
    invalid = LinkError("Invalid request!")
    try:
        data = json.loads(req)
    except (ValueError, TypeError):
        raise invalid from None
    if not isinstance(data, dict):
        raise invalid
    longlink = data.get("longlink")
    shortlink = data.get("shortlink", "")
    expiry_delay = data.get("expiry_delay", 0)
    if not isinstance(longlink, str) or not isinstance(shortlink, str):
        raise invalid
    if not _is_i64(expiry_delay):
        raise invalid
    return shortlink, longlink, expiry_delay


def add_link(req: str, db: LinkDatabase, settings: LinkSettings) -> CreatedLink:
    """Parse a JSON request and store the link it describes.

    Raises LinkError with a client-facing reason on failure.
    """
    shortlink, longlink, expiry_delay = _parse_request(req)

    shortlink_provided = bool(shortlink)
    if not shortlink_provided:
        shortlink = gen_link(settings.slug_style, settings.slug_length)

    if settings.public_mode and settings.public_mode_expiry_delay > 0:
        if expiry_delay == 0:
            expiry_delay = settings.public_mode_expiry_delay
        else:
            expiry_delay = min(expiry_delay, settings.public_mode_expiry_delay)

    expiry_delay = max(min(expiry_delay, MAX_EXPIRY_DELAY), 0)

    if not validate_link(shortlink):
        raise LinkError("Short URL is not valid!")

    try:
        expiry_time = db.add_link(shortlink, longlink, expiry_delay)
    except DuplicateShortlinkError:
        if shortlink_provided:
            raise LinkError("Short URL is already in use!") from None
        if settings.slug_style == "UID" and settings.try_longer_slug:
            shortlink = gen_link(settings.slug_style, settings.slug_length + 4)
            try:
                expiry_time = db.add_link(shortlink, longlink, expiry_delay)
            except (DuplicateShortlinkError, sqlite3.Error):
                raise LinkError("Something went very wrong!") from None
            return CreatedLink(shortlink, expiry_time)
        raise LinkError("Something went wrong!") from None
    except sqlite3.Error:
        raise LinkError("Something went extremely wrong!") from None
    return CreatedLink(shortlink, expiry_time)


def delete_link(db: LinkDatabase, shortlink: str) -> bool:
    """Delete a valid short link; return whether it existed."""
    if validate_link(shortlink):
        return db.delete_link(shortlink)
    return False