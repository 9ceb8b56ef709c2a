def check_path_component(value: str) -> str:
    """
    returns `value` if it can be used as a single file name, else raises ValueError.

    names and versions read from the index end up in cache and source paths.
    """
    if not value or value in (".", "..") or "/" in value or "\\" in value or "\0" in value:
        raise ValueError(f"`{value}` is not a valid path component")
    return value
