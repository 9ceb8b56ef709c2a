import hashlib


def short_hash(value: object) -> str:
    """
    returns a short, stable hex hash of an object's string form.
    """
    digest = hashlib.sha256(str(value).encode()).hexdigest()
    return digest[:16]  # truncate for readability
