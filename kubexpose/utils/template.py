"""URL templates for rendering service access URLs.

A template is a ``str.format`` pattern that may reference three named
fields:

- ``ip``: the node's externally reachable address
- ``port``: the node port assigned to the service port
- ``name``: the endpoint port name (empty string when unknown)

Example: ``"http://{ip}:{port}"`` or ``"{name}={ip}:{port}"``.
"""

from string import Formatter

from ..models.errors import FatalError

DEFAULT_URL_TEMPLATE = "http://{ip}:{port}"

TEMPLATE_FIELDS = frozenset({"ip", "port", "name"})


class URLTemplate:
    """A validated URL format template.

    Parsing happens at construction so that a malformed template fails
    loudly before any cluster call is made.
    """

    def __init__(self, pattern: str):
        if pattern is None:
            raise FatalError("attempted to create a URL template from a nil format")
        self.pattern = pattern
        self._validate()

    def _validate(self) -> None:
        try:
            parsed = list(Formatter().parse(self.pattern))
        except ValueError as e:
            raise FatalError(f"invalid URL template {self.pattern!r}", e) from e

        for _, field_name, _, _ in parsed:
            if field_name is None:
                continue
            # "{port!s}" / "{ip.upper}" style lookups resolve against the root field
            root = field_name.split(".", 1)[0].split("[", 1)[0]
            if root not in TEMPLATE_FIELDS:
                raise FatalError(
                    f"invalid URL template {self.pattern!r}: unknown field {field_name!r}, "
                    f"expected one of {', '.join(sorted(TEMPLATE_FIELDS))}"
                )

    def render(self, ip: str, port: int, name: str = "") -> str:
        """Render one URL.

        Raises:
            FatalError: if formatting fails (bad format spec, bad attribute).
        """
        try:
            return self.pattern.format(ip=ip, port=port, name=name)
        except (KeyError, IndexError, AttributeError, ValueError, TypeError) as e:
            raise FatalError(f"failed to render URL template {self.pattern!r}", e) from e

    def __repr__(self) -> str:
        return f"URLTemplate({self.pattern!r})"

    def __eq__(self, other):
        if isinstance(other, URLTemplate):
            return self.pattern == other.pattern
        return False

    def __hash__(self):
        return hash(self.pattern)
