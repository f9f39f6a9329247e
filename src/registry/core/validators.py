import re

from pydantic import AnyUrl, TypeAdapter, ValidationError

REPO_REF_PATTERN = re.compile(r"^[A-Za-z0-9_-]+/[A-Za-z0-9_-]+$")

_url_adapter = TypeAdapter(AnyUrl)


def is_valid_repo_ref(value: str) -> bool:
    """Check a repository reference has the ``owner/repo`` shape."""
    return REPO_REF_PATTERN.fullmatch(value) is not None


def is_valid_absolute_url(value: str) -> bool:
    """Check the value parses as an absolute URL (scheme required)."""
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True
