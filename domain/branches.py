# domain/branches.py
"""
Branch name variants.

Customer rows were imported from several spreadsheets and the branch column
holds whatever each sheet used ("Mumbai HO", "Mumbai", "mumbai", ...).
Reads expand a branch id into every known spelling; writes store the long
form so new rows match the imported ones.
"""

from typing import Dict, Iterable, List, Optional, Tuple

# branch id (exact) -> stored spellings, in lookup order
BRANCH_READ_ALIASES: Dict[str, Tuple[str, ...]] = {
    "mumbai": ("Mumbai HO", "Mumbai"),
    "ulhasnagar": ("Ulhasnagar HO", "Ulhasnagar"),
    "delhi": ("Delhi HO", "Delhi"),
    "bangalore": ("Banglore HO", "Banglore"),  # spelled this way in the data
}

# form value (exact) -> value written to customers.branch
BRANCH_WRITE_CANONICAL: Dict[str, str] = {
    "Mumbai": "Mumbai HO",
    "mumbai": "Mumbai HO",
    "Ulhasnagar": "Ulhasnagar HO",
    "ulhasnagar": "Ulhasnagar HO",
}


def branch_variations(branch_id: Optional[str]) -> List[str]:
    """
    Every spelling that counts as `branch_id` when reading customers.
    Example: "mumbai" -> ["mumbai", "MUMBAI", "Mumbai", "Mumbai HO"]
    """
    if not branch_id:
        return []

    candidates = [
        branch_id,
        branch_id.upper(),
        branch_id[:1].upper() + branch_id[1:],
        *BRANCH_READ_ALIASES.get(branch_id, ()),
    ]

    seen = set()
    out: List[str] = []
    for v in candidates:
        if v and v not in seen:
            seen.add(v)
            out.append(v)
    return out


def matches_branch(stored_branch: Optional[str], variations: Iterable[str]) -> bool:
    if stored_branch is None:
        return False
    stored = str(stored_branch).lower()
    return any(stored == v.lower() for v in variations)


def canonical_branch(branch: str) -> str:
    return BRANCH_WRITE_CANONICAL.get(branch, branch)
