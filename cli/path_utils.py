# cli/path_utils.py

import os

from core.settings import settings

REGISTRY_MARKER_FILE = "courses.json"


def sanitize_name(name: str) -> str:
    """Strips a store name or course id and replaces inner spaces with underscores."""
    return name.strip().replace(" ", "_")


def default_data_dir() -> str:
    return os.path.expanduser(settings.data_dir)


def get_save_dir(registry_name: str, user_input: str | None) -> str:
    """
    Picks the directory for a new roster store.

    Args:
        registry_name (str): The already sanitized store name.
        user_input (str | None): Directory typed by the user; None or blank selects the default.

    Returns:
        The expanded user path, or `<settings.data_dir>/<registry_name>`.
    """
    if user_input is not None and user_input.strip():
        return os.path.expanduser(user_input.strip())

    return os.path.join(default_data_dir(), registry_name)


def resolve_save_dir(registry_name: str, dir_input: str | None) -> str:
    save_dir = get_save_dir(sanitize_name(registry_name), dir_input)

    # parents included
    os.makedirs(save_dir, exist_ok=True)

    return save_dir


def resolve_export_path(course_id: str, dir_path: str) -> str:
    return os.path.join(dir_path, f"{sanitize_name(course_id)}_students.csv")


def dir_is_empty(dir_path: str) -> bool:
    return os.path.isdir(dir_path) and not os.listdir(dir_path)


def list_registry_dirs(parent_dir: str | None = None) -> list[str]:
    """
    Lists the roster stores directly under a parent directory.

    Args:
        parent_dir (str | None): Directory to scan. Defaults to `settings.data_dir`.

    Returns:
        Sorted paths of the subdirectories that hold a saved store. Empty if the parent does not exist.
    """
    parent = parent_dir or default_data_dir()

    if not os.path.isdir(parent):
        return []

    return sorted(
        os.path.join(parent, entry)
        for entry in os.listdir(parent)
        if os.path.isfile(os.path.join(parent, entry, REGISTRY_MARKER_FILE))
    )
