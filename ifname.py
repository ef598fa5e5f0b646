NAME_PREFIX = "[name="


def parse_interface_name(path: str) -> str:
    """Return X from the first ``[name=X]`` key in a gNMI path, or "" if there is none.

    >>> parse_interface_name("interfaces/interface[name=Ethernet8]/state/counters")
    'Ethernet8'
    """
    start = path.find(NAME_PREFIX)
    if start == -1:
        return ""
    start += len(NAME_PREFIX)
    end = path.find("]", start)
    if end == -1:
        return ""
    return path[start:end]
