from typing import Iterable, List, Union


def parse_roll_list(raw: Union[str, Iterable[str], None]) -> List[str]:
    """Accepts "a, b,c" or ["a", " b "] and returns trimmed, non-empty identifiers."""
    if raw is None:
        return []
    if isinstance(raw, str):
        parts = raw.split(",")
    else:
        parts = [str(p) for p in raw]
    return [p.strip() for p in parts if p and p.strip()]


def uniq(items: Iterable[str]) -> List[str]:
    # keeps first-seen order
    return list(dict.fromkeys(items))
