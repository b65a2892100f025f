__all__ = [
    "decode_access_token",
    "get_current_user",
    "oauth2_scheme",
    "resolve_user_from_token",
    "utcnow",
]


def __getattr__(name):
    if name in {
        "decode_access_token",
        "get_current_user",
        "oauth2_scheme",
        "resolve_user_from_token",
    }:
        from . import security as _security
        return getattr(_security, name)
    if name == "utcnow":
        from .timeutils import utcnow
        return utcnow
    raise AttributeError(f"module 'skilltrade.utils' has no attribute '{name}'")
