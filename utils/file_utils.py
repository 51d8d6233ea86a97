# utils/file_utils.py

"""Size formatting utilities."""


def format_size(size_bytes: int) -> str:
    """Formats bytes into a human-readable string (KiB, MiB, GiB)."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = float(size_bytes)
    for unit in ['KiB', 'MiB', 'GiB', 'TiB']:
        size /= 1024.0
        if size < 1024.0:
            return f"{size:.1f} {unit}"
    return f"{size / 1024.0:.1f} PiB"
