# src/services/usernames.py
import re
import unicodedata
from itertools import count
from typing import Iterator, Optional

DEFAULT_USERNAME = "user"


def normalize_username(text: str) -> str:
    """Lowercase ASCII username: accents dropped, only letters, digits, '.' and '_'."""
    # remove accents
    t = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    t = re.sub(r"[^a-zA-Z0-9._]+", "", t).strip("._").lower()
    return t


def username_base_from_email(email: Optional[str]) -> str:
    """Local part of the email as a username base, e.g. 'Alice.B@x.com' -> 'alice.b'."""
    local_part = (email or "").split("@")[0]
    return normalize_username(local_part) or DEFAULT_USERNAME


def username_candidates(base: str) -> Iterator[str]:
    """base, base1, base2, ... in probing order."""
    yield base
    for suffix in count(1):
        yield f"{base}{suffix}"
