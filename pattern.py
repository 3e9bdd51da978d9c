# pattern.py


def match_pattern(pattern: str, name: str) -> bool:
    """Match a whole filename against an exclude pattern.

    ``*`` matches any run of characters (including none) and ``.`` matches
    exactly one character; everything else is literal. There is no escaping,
    so a literal dot cannot be expressed.

    Matching backtracks on every ``*``, which is exponential in the number of
    stars for adversarial patterns such as ``*a*a*a*a*b``.
    """
    p = n = 0
    while p < len(pattern) and n < len(name):
        if pattern[p] == '*':
            return match_pattern(pattern[p + 1:], name[n:]) or match_pattern(pattern[p:], name[n + 1:])
        if pattern[p] == '.' or pattern[p] == name[n]:
            p += 1
            n += 1
        else:
            return False

    # Trailing stars match the empty remainder
    while p < len(pattern) and pattern[p] == '*':
        p += 1
    return p == len(pattern) and n == len(name)
