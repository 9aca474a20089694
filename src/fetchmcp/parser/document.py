"""DOM construction with BeautifulSoup."""

from urllib.parse import urljoin

from bs4 import BeautifulSoup

from fetchmcp.logger import logger

# Attributes whose values are URLs that should be made absolute
URL_ATTRIBUTES = {
    "a": "href",
    "img": "src",
    "source": "src",
    "video": "src",
    "audio": "src",
    "link": "href",
}


def parse_document(html: str, base_url: str) -> BeautifulSoup:
    """Parse HTML into a DOM rooted at base_url.

    Relative links and media sources are resolved against the document's
    <base href> when present, otherwise against base_url. Attributes holding
    values that are not valid URLs are removed.

    Args:
        html: Raw HTML text.
        base_url: URL the document was fetched from.

    Returns:
        Parsed BeautifulSoup tree with absolute link targets.

    """
    soup = BeautifulSoup(html, "html.parser")

    root_url = base_url
    base_tag = soup.find("base", href=True)
    if base_tag:
        base_href = _resolve(base_url, str(base_tag["href"]))
        if base_href is None:
            del base_tag["href"]
        else:
            root_url = base_href

    for tag_name, attribute in URL_ATTRIBUTES.items():
        for element in soup.find_all(tag_name, attrs={attribute: True}):
            value = str(element[attribute]).strip()
            if value.startswith(("#", "javascript:", "data:", "mailto:")):
                continue
            resolved = _resolve(root_url, value)
            if resolved is None:
                # Keeps the text; later stages would choke on the value
                del element[attribute]
            else:
                element[attribute] = resolved

    return soup


def _resolve(base: str, value: str) -> str | None:
    """Join value onto base, or None if either is malformed."""
    try:
        return urljoin(base, value)
    except ValueError:
        logger.debug("Dropping malformed URL %r", value)
        return None
