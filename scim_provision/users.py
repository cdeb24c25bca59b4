"""Flat user records used for ad-hoc and bulk user creation."""

from typing import Any, List, Mapping

import yaml


class UserFileError(ValueError):
    """The bulk user file could not be read or has the wrong shape."""


class BasicUser:
    """A user as the operator types it: a name plus optional details.

    Blank fields are filled in from ``name`` when the account is built
    (see ``payload_factory.make_user_account``).
    """

    def __init__(self, name: str, given: str = "", family: str = "",
                 email: str = "", password: str = ""):
        self.name = name
        self.given = given
        self.family = family
        self.email = email
        self.password = password

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BasicUser":
        """Build from a YAML record; ``pwd`` and ``password`` are both accepted."""
        def text(key: str) -> str:
            value = data.get(key)
            return "" if value is None else str(value)

        return cls(
            name=text("name"),
            given=text("given"),
            family=text("family"),
            email=text("email"),
            password=text("pwd") or text("password"),
        )

    def __repr__(self) -> str:
        return f"BasicUser(name={self.name!r})"


def load_users_file(path: str) -> List[BasicUser]:
    """Read a YAML list of user records.

    Example::

        - name: alice
          given: Alice
          family: Liddell
          pwd: s3cret
        - {name: bob, email: bob@example.org}

    Raises:
        UserFileError: the file is missing, not YAML, or not a list of mappings.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise UserFileError(f"cannot open {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise UserFileError(f"invalid YAML in {path}: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, list):
        raise UserFileError(f"{path} must contain a list of users")

    users = []
    for index, record in enumerate(data, start=1):
        if not isinstance(record, dict):
            raise UserFileError(f"{path}: entry {index} is not a mapping")
        users.append(BasicUser.from_mapping(record))
    return users
