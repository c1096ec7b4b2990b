import mimetypes

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Compression suffixes that mimetypes only knows as encodings.
_ENCODING_TYPES = {
    ".gz": "application/gzip",
    ".bz2": "application/x-bzip2",
    ".xz": "application/x-xz",
}


def content_type_for(name: str) -> str:
    """Look up a MIME type by the text after the last '.' of the last path segment."""
    tail = name.rsplit("/", 1)[-1]
    if "." not in tail:
        return DEFAULT_CONTENT_TYPE
    ext = "." + tail.rsplit(".", 1)[1]
    if not mimetypes.inited:
        mimetypes.init()
    for key in (ext, ext.lower()):
        found = (
            _ENCODING_TYPES.get(key)
            or mimetypes.types_map.get(key)
            or mimetypes.common_types.get(key)
        )
        if found:
            return found
    return DEFAULT_CONTENT_TYPE


def resolve_content_type(name: str, explicit: str | None = None) -> str:
    if explicit and explicit.strip():
        return explicit
    return content_type_for(name)
