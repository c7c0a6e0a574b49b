"""Name Normalization — storage and display forms of site and location names.

Invariants:
    - normalize: trim, upper-case, every space replaced by NAME_SEPARATOR
    - denormalize: trim, every NAME_SEPARATOR replaced by a space (case is not restored)
    - denormalize(normalize(s)) == s.strip().upper() when s contains no NAME_SEPARATOR
    - None passes through both functions unchanged

Design Decisions:
    - No escaping of a separator already present in the input: such names do not
      round-trip and are displayed with the separator turned into a space
"""

from rfid_ledger.core.domain_types import NAME_SEPARATOR


def normalize(name: str | None) -> str | None:
    if name is None:
        return None
    return name.strip().upper().replace(" ", NAME_SEPARATOR)


def denormalize(name: str | None) -> str | None:
    if name is None:
        return None
    return name.strip().replace(NAME_SEPARATOR, " ")


def display_location(site_name: str, location_name: str) -> str:
    """Label shown for a scan location: site then location, both in display form."""
    return f"{denormalize(site_name)} {denormalize(location_name)}"
