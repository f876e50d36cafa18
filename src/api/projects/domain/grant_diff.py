"""Identity-keyed diffing of grant collections.

A grant whose roles changed must surface as a single in-place update rather
than as a remove followed by an add, since the remote API updates role
assignments idempotently.
"""

from __future__ import annotations

from projects.domain.value_objects import Grant, GrantCollection, GrantDiff


def diff_grants(previous: GrantCollection, desired: GrantCollection) -> GrantDiff:
    """Compute the grants to add, change and remove to go from previous to desired.

    Args:
        previous: The collection as last declared (or last read)
        desired: The newly declared collection

    Returns:
        GrantDiff whose three collections are pairwise identity-disjoint.
        Identities with identical roles on both sides appear in none of them.
    """
    before = previous.as_mapping()
    after = desired.as_mapping()

    added: list[Grant] = []
    changed: list[Grant] = []
    removed: list[Grant] = []

    for identity, roles in after.items():
        prior_roles = before.get(identity)
        if prior_roles is None:
            added.append(Grant(identity, roles))
        elif prior_roles != roles:
            changed.append(Grant(identity, roles))

    for identity, roles in before.items():
        if identity not in after:
            removed.append(Grant(identity, roles))

    return GrantDiff(
        added=GrantCollection(added),
        changed=GrantCollection(changed),
        removed=GrantCollection(removed),
    )
