"""OWNERS policy file parsing.

The OWNERS file is a YAML mapping; only the ``approvers`` list is used:

.. code-block:: yaml

    approvers:
      - login-one
      - login-two

Unknown keys, including non-string ones, are ignored. Unquoted all-digit
logins are read as strings. A missing ``approvers`` key means nobody is
approved by the file.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import PolicyFormatError

YAML_VERSION = (1, 2)


class _OwnersDocument(msgspec.Struct, kw_only=True):
    approvers: list[str] | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class OwnersPolicy:
    """Approver logins declared by an OWNERS file."""

    approvers: frozenset[str] = frozenset()

    def approves(self, login: str) -> bool:
        """Return whether ``login`` is listed as an approver."""
        return bool(login) and login in self.approvers


def parse_owners(content: bytes | str) -> OwnersPolicy:
    """Parse OWNERS content into an :class:`OwnersPolicy`.

    Raises
    ------
    PolicyFormatError
        If the content is not UTF-8, is not valid YAML, is not a mapping, or
        declares ``approvers`` as anything but a list of logins.

    """
    if isinstance(content, bytes):
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PolicyFormatError.not_utf8(exc) from exc
    else:
        text = content

    try:
        loaded = _yaml().load(text)
    except YAMLError as exc:
        raise PolicyFormatError.invalid_yaml(exc) from exc

    if loaded is None:
        return OwnersPolicy()
    if not isinstance(loaded, dict):
        raise PolicyFormatError.invalid_schema("expected a mapping at the top level")

    try:
        document = msgspec.convert(
            {"approvers": _scalar_logins(loaded.get("approvers"))},
            type=_OwnersDocument,
        )
    except msgspec.ValidationError as exc:
        raise PolicyFormatError.invalid_schema(exc) from exc

    approvers = (login.strip() for login in document.approvers or ())
    return OwnersPolicy(approvers=frozenset(login for login in approvers if login))


def load_owners(path: Path | str) -> OwnersPolicy:
    """Read and parse an OWNERS file from disk.

    ``OSError`` from reading the file propagates unchanged.
    """
    return parse_owners(Path(path).read_bytes())


def _scalar_logins(value: object) -> object:
    """Return approver entries with unquoted integer logins as strings.

    YAML reads a bare all-digit login such as ``12345`` as an integer.
    Anything else is returned unchanged for schema validation to judge.
    """
    if not isinstance(value, list):
        return value
    return [
        str(item) if isinstance(item, int) and not isinstance(item, bool) else item
        for item in value
    ]


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
