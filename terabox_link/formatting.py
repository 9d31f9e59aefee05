SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")

FILE_TYPES = {
    "video": ("mp4", "avi", "mkv", "mov", "wmv", "flv", "webm", "m4v", "3gp", "ogv"),
    "audio": ("mp3", "wav", "flac", "aac", "m4a", "ogg", "opus", "wma"),
    "image": ("jpg", "jpeg", "png", "gif", "bmp", "webp", "svg", "tiff", "ico", "heic"),
    "document": ("pdf", "doc", "docx", "txt", "rtf", "odt", "xls", "xlsx", "ppt", "pptx"),
    "archive": ("zip", "rar", "7z", "tar", "gz", "bz2", "xz"),
    "code": ("js", "html", "css", "json", "xml", "sql", "py", "java"),
}

EXTENSION_TYPES = {ext: kind for kind, extensions in FILE_TYPES.items() for ext in extensions}


def format_file_size(size_bytes: int | None) -> str:
    """Binary-prefixed size string: 0 -> "0 Bytes", 1536 -> "1.5 KB"."""
    if not size_bytes or size_bytes <= 0:
        return "0 Bytes"

    value = float(size_bytes)
    index = 0
    while value >= 1024 and index < len(SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[index]}"


def get_file_type(filename: str) -> str:
    if "." not in filename:
        return "other"
    extension = filename.rsplit(".", 1)[-1].lower()
    return EXTENSION_TYPES.get(extension, "other")


def extract_thumbnail(entry: dict) -> str | None:
    thumbs = entry.get("thumbs") or {}
    return thumbs.get("url3") or thumbs.get("url2") or thumbs.get("url1") or None
