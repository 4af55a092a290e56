"""Query-building helpers shared by the service layer."""


def escape_ilike(value: str) -> str:
    """
    Escape LIKE/ILIKE wildcards so user input matches literally.

    Use together with `escape="\\"` on the `ilike()` call.
    """
    return (
        value.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
