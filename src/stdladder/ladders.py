"""
Revision Ladders

A ladder is the strictly ordered list of known standard revisions for one
language family, oldest to newest. Each family has exactly one ladder.

The ladder answers three questions:
    - What is the floor (oldest revision)?
    - Which revision does a version token reach (newest-first scan)?
    - Which revisions are implied by a given one (prefix inclusion)?

ARCHITECTURAL RULE:
    "At least" sets are always ladder prefixes.
    They are never built by testing revisions one at a time,
    so a gap in the set cannot be expressed.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from stdladder.model import LanguageFamily, Revision


@dataclass(frozen=True)
class Ladder:
    """
    Ordered revisions of one language family.

    Properties:
        family:
            LanguageFamily of every revision on the ladder

        base_flag:
            Presence flag that proves the family's standard is implemented
            at all (__STDC__ for C, __cplusplus for C++)

        revisions:
            Revisions ordered oldest to newest
    """

    family: LanguageFamily
    base_flag: str
    revisions: Tuple[Revision, ...]

    def __post_init__(self):
        if not self.revisions:
            raise ValueError(f"Ladder for {self.family.value} has no revisions")
        names = set()
        for rev in self.revisions:
            if rev.family is not self.family:
                raise ValueError(f"Revision {rev.name} does not belong to {self.family.value}")
            for name in (rev.name,) + rev.aliases:
                if name in names:
                    raise ValueError(f"Duplicate revision name on {self.family.value} ladder: {name}")
                names.add(name)

    def __iter__(self):
        return iter(self.revisions)

    def __len__(self):
        return len(self.revisions)

    @property
    def floor(self) -> Revision:
        return self.revisions[0]

    @property
    def newest(self) -> Revision:
        return self.revisions[-1]

    def get(self, name: str) -> Optional[Revision]:
        """
        Retrieve a revision by canonical name or alias.

        Args:
            name: Revision name (e.g., "C99", "C18", "C++03")

        Returns:
            Revision object or None if not found
        """
        for rev in self.revisions:
            if rev.matches(name):
                return rev
        return None

    def position(self, revision: Revision) -> int:
        return self.revisions.index(revision)

    def prefix(self, revision: Revision) -> Tuple[Revision, ...]:
        """Every revision at or below `revision`, oldest first."""
        return self.revisions[: self.position(revision) + 1]

    def scan(self, token: int, presence_flags: FrozenSet[str] = frozenset()) -> Optional[Revision]:
        """
        Find the newest revision a version token reaches.

        Walks the ladder newest to oldest and returns the first revision
        whose threshold is <= token, or whose implied_by flags are present.
        Revisions without a threshold are never matched by the token itself.

        Args:
            token: Normalized version token
            presence_flags: Presence flags reported alongside the token

        Returns:
            Revision, or None if the token is below every threshold
        """
        for rev in reversed(self.revisions):
            if rev.threshold is not None and token >= rev.threshold:
                return rev
            if rev.implied_by & presence_flags:
                return rev
        return None


C_LADDER = Ladder(
    family=LanguageFamily.C,
    base_flag="__STDC__",
    revisions=(
        Revision("C89", LanguageFamily.C, 1989, description="ANSI X3.159-1989"),
        Revision("C90", LanguageFamily.C, 1990, description="ISO/IEC 9899:1990"),
        Revision("C94", LanguageFamily.C, 1994, threshold=199409, aliases=("C95",),
                 description="ISO/IEC 9899-1:1994"),
        Revision("C99", LanguageFamily.C, 1999, threshold=199901,
                 implied_by=frozenset({"__STDC_HOSTED__"}), description="ISO/IEC 9899:1999"),
        Revision("C11", LanguageFamily.C, 2011, threshold=201112, description="ISO/IEC 9899:2011"),
        Revision("C17", LanguageFamily.C, 2017, threshold=201710, aliases=("C18",),
                 description="ISO/IEC 9899:2018"),
        Revision("C23", LanguageFamily.C, 2023, threshold=202311, description="ISO/IEC 9899:2024"),
    ),
)

CPP_LADDER = Ladder(
    family=LanguageFamily.CPP,
    base_flag="__cplusplus",
    revisions=(
        # Pre-standard C++ (e.g. compilers defining __cplusplus as 1)
        Revision("C++pre", LanguageFamily.CPP, 0, description="Pre-standard C++"),
        # C++03 reuses the C++98 token and cannot be told apart
        Revision("C++98", LanguageFamily.CPP, 1998, threshold=199711, aliases=("C++03",),
                 description="ISO/IEC 14882:1998"),
        Revision("C++11", LanguageFamily.CPP, 2011, threshold=201103, description="ISO/IEC 14882:2011"),
        Revision("C++14", LanguageFamily.CPP, 2014, threshold=201402, description="ISO/IEC 14882:2014"),
        Revision("C++17", LanguageFamily.CPP, 2017, threshold=201703, description="ISO/IEC 14882:2017"),
        Revision("C++20", LanguageFamily.CPP, 2020, threshold=202002, description="ISO/IEC 14882:2020"),
        Revision("C++23", LanguageFamily.CPP, 2023, threshold=202302, description="ISO/IEC 14882:2024"),
    ),
)

LADDERS: Dict[LanguageFamily, Ladder] = {
    LanguageFamily.C: C_LADDER,
    LanguageFamily.CPP: CPP_LADDER,
}


def get_ladder(family: LanguageFamily) -> Optional[Ladder]:
    """Ladder for a family, or None for LanguageFamily.NONE."""
    return LADDERS.get(family)
