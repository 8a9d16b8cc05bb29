import json
from pathlib import Path
from typing import Dict, Optional, Tuple

from workreport.constants import PLACEHOLDER, UNKNOWN_MEMBER_PRIORITY


class MemberDirectory:
    """
    Static identity (email) -> display name / sort priority directory.

    Built once at startup and passed to every component that sorts or
    resolves people.
    """

    def __init__(self, members: Optional[Dict[str, dict]] = None):
        self._members: Dict[str, dict] = dict(members or {})
        self._by_name: Dict[str, str] = {}
        for identity, info in self._members.items():
            name = info.get("name")
            if name and name not in self._by_name:
                self._by_name[name] = identity

    @classmethod
    def load(cls, path) -> "MemberDirectory":
        """Load `{email: {"name": ..., "priority": ...}}` from a JSON file."""
        with open(Path(path), encoding="utf-8") as fh:
            return cls(json.load(fh))

    def __len__(self):
        return len(self._members)

    def name_of(self, identity: Optional[str]) -> str:
        if not identity:
            return PLACEHOLDER
        info = self._members.get(identity)
        if info and info.get("name"):
            return info["name"]
        return identity

    def priority_of(self, identity: Optional[str]) -> int:
        if not identity:
            return UNKNOWN_MEMBER_PRIORITY
        info = self._members.get(identity)
        if not info or info.get("priority") is None:
            return UNKNOWN_MEMBER_PRIORITY
        return int(info["priority"])

    def identity_of(self, name: Optional[str]) -> str:
        if not name:
            return ""
        return self._by_name.get(name, "")

    def priority_of_name(self, name: Optional[str]) -> int:
        return self.priority_of(self.identity_of(name))

    def sort_key(self, name: str) -> Tuple[int, str, str]:
        name = name or ""
        return self.priority_of_name(name), name.casefold(), name
