"""Locale helpers"""


def country_code_from_locale(locale: str | None, default: str | None = None) -> str | None:
    """
    Two letter country code from the region part of a locale.

    Example:
        nl_NL → NL, en_US.UTF-8 → US, nl → default
    """
    if not locale:
        return default

    parts = locale.split("_")

    if len(parts) < 2 or len(parts[1]) < 2:
        return default

    return parts[1][:2].upper()
