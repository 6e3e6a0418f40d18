"""Vault path rules."""


def should_exclude_file(file_path: str, excluded_folders: list[str]) -> bool:
    """
    Check if a vault-relative path lies in (or is) an excluded folder.

    ``Archive`` excludes ``Archive/old.md`` and ``Archive/2024/x.md`` but not
    ``Archived/x.md``. Trailing slashes on folders are ignored.
    """
    for folder in excluded_folders:
        folder = folder.rstrip("/")
        if not folder:
            continue
        if file_path == folder or file_path.startswith(folder + "/"):
            return True
    return False
