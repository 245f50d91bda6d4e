import numbers


def json_equal(first, second):
    """
    Returns True if the two decoded JSON values are structurally equal, False otherwise.

    Object key order is not significant and integers compare equal to floats with the
    same value, but a boolean is never equal to a number.
    """
    if isinstance(first, bool) or isinstance(second, bool):
        return isinstance(first, bool) and isinstance(second, bool) and first == second
    elif isinstance(first, numbers.Number) and isinstance(second, numbers.Number):
        return first == second
    elif isinstance(first, dict) and isinstance(second, dict):
        return (
            first.keys() == second.keys() and
            all(json_equal(value, second[key]) for key, value in first.items())
        )
    elif isinstance(first, (list, tuple)) and isinstance(second, (list, tuple)):
        return (
            len(first) == len(second) and
            all(json_equal(a, b) for a, b in zip(first, second))
        )
    else:
        return type(first) is type(second) and first == second
