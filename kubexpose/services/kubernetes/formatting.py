"""Output helpers for service URLs."""

from typing import Iterable, TextIO
from urllib.parse import urlparse

from tabulate import tabulate

SERVICE_LIST_HEADERS = ["Namespace", "Name", "Target Port", "URL"]


def optionally_https_formatted_url(bare_url: str, https: bool) -> tuple[str, bool]:
    """Rewrite an http URL to https when requested.

    The rewrite is a plain substitution of the first lowercase "http" in the
    string, not a scheme rewrite. Schemes compare case-insensitively, so
    ``HTTP://http-svc:80`` becomes ``HTTP://https-svc:80``.

    Args:
        bare_url: URL as rendered from the template
        https: Whether to upgrade http URLs

    Returns:
        Tuple of (possibly rewritten URL, whether the original scheme was http).
    """
    try:
        is_http_schemed = urlparse(bare_url).scheme == "http"
    except ValueError:
        is_http_schemed = False

    if is_http_schemed and https:
        return bare_url.replace("http", "https", 1), is_http_schemed
    return bare_url, is_http_schemed


def print_service_list(writer: TextIO, rows: Iterable[list[str]]) -> None:
    """Print services as a Namespace | Name | Target Port | URL table."""
    writer.write(tabulate(list(rows), headers=SERVICE_LIST_HEADERS, tablefmt="grid"))
    writer.write("\n")
