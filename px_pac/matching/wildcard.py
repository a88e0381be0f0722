"""
Shell expression matching for shExpMatch.
"""


def shell_expression_match(subject: str, pattern: str) -> bool:
    """
    Match subject against a shell expression anchored at both ends.

    '*' matches any run of characters (including none), '?' matches exactly
    one character, every other character matches itself case-sensitively.
    There is no escape character.

    Iterative with single-star backtracking: a later '*' supersedes an
    earlier one, so the worst case is O(len(subject) * len(pattern)).
    """
    s = p = 0
    star = -1
    resume = 0

    while s < len(subject):
        if p < len(pattern) and pattern[p] == '*':
            star = p
            resume = s
            p += 1
        elif p < len(pattern) and (pattern[p] == '?' or pattern[p] == subject[s]):
            s += 1
            p += 1
        elif star != -1:
            p = star + 1
            resume += 1
            s = resume
        else:
            return False

    while p < len(pattern) and pattern[p] == '*':
        p += 1
    return p == len(pattern)
