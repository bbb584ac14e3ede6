"""Homepage links derived from package URLs.

Purely syntactic: no lookups are made, and a package URL that does not
match the expected shape simply has no homepage.
"""

import re
from typing import Optional
from urllib.parse import unquote

# [pkg:]type/name@version, where name may itself contain slashes
PURL_PATTERN = re.compile(r"^(?:pkg:)?([^/]+)/(.+)@([^@]+)$")


def component_url_from_purl(purl: Optional[str]) -> Optional[str]:
    """Derive a homepage URL from a package URL.

    Args:
        purl: Package URL such as "pkg:npm/left-pad@1.3.0" or
            "golang/github.com/foo/bar@v1.0.0".

    Returns:
        Registry or repository URL for npm, PyPI and Go packages,
        None for other ecosystems or unparseable input.
    """
    if not purl:
        return None

    match = PURL_PATTERN.match(purl)
    if not match:
        return None

    purl_type, raw_name, _version = match.groups()
    name = unquote(raw_name)

    if purl_type == "npm":
        return f"https://www.npmjs.com/package/{name}"
    if purl_type == "pypi":
        return f"https://pypi.org/project/{name}/"
    if purl_type == "golang":
        parts = name.split("/")
        if parts[0] == "github.com" and len(parts) >= 3:
            return f"https://github.com/{parts[1]}/{parts[2]}"
        return f"https://pkg.go.dev/{name}"

    return None
