"""Detection of login/consent pages behind the authentication wall."""

from typing import Optional

LOGIN_URL_INDICATORS = ("login", "oauth", "auth", "discord", "connect", "authorize")

LOGIN_CONTENT_INDICATORS = (
    "please log in",
    "sign in to continue",
    "oauth",
    "authorize",
    "connect your account",
    "authenticate",
    "discord login",
)


def login_required_reason(current_url: str, page_text: str) -> Optional[str]:
    """
    Check whether a loaded page is a login or consent page.

    Args:
        current_url: URL the session ended up on (after redirects)
        page_text: Page source or text

    Returns:
        A short description of the matched indicator, or None
    """
    url = current_url.casefold()
    for indicator in LOGIN_URL_INDICATORS:
        if indicator in url:
            return f"url contains '{indicator}'"

    content = page_text.casefold()
    for indicator in LOGIN_CONTENT_INDICATORS:
        if indicator in content:
            return f"page mentions '{indicator}'"

    return None
