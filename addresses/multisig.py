"""
Counterparty Wallet Validation - Bare Multisig Address Strings

Counterparty writes an M-of-N bare multisig destination as a single string of
underscore-separated fields: ``M_addr1_addr2[_addr3]_N``.
"""

import logging
import re
from typing import Callable, List

from core.exceptions import FormatError, RangeError
from .models import AddressInfo, MultisigAddress

logger = logging.getLogger(__name__)

MIN_SIGNATURES = 1
MAX_SIGNATURES = 3
MIN_KEYS = 2
MAX_KEYS = 3

_COUNT_RE = re.compile(r"^[0-9]{1,2}$")


class MultisigMemberError(FormatError):
    """Raised when a member address of a multisig string is invalid."""

    def __init__(self, position: int, member: AddressInfo):
        self.position = position
        self.member = member
        self.kind = member.error_kind or self.kind
        super().__init__(f"Invalid address {position} in multisig: {member.error}")


def _parse_count(field: str, label: str) -> int:
    if not _COUNT_RE.fullmatch(field):
        raise FormatError(f"Multisig {label} must be an integer")
    return int(field)


def parse_multisig_address(address: str, classify: Callable[[str], AddressInfo]) -> MultisigAddress:
    """
    Parse a Counterparty bare multisig string and classify each member.

    Args:
        address: String of the form M_addr1_addr2[_addr3]_N
        classify: Classifier applied to every member address

    Returns:
        MultisigAddress with one AddressInfo per member

    Raises:
        FormatError: Wrong field count, non-integer M/N, or an invalid member
        RangeError: M or N outside the allowed bounds, or M > N
    """
    fields = address.split("_")
    if len(fields) not in (4, 5):
        raise FormatError("Multisig address must have the form M_addr1_addr2[_addr3]_N")

    m = _parse_count(fields[0], "M")
    n = _parse_count(fields[-1], "N")
    members = fields[1:-1]

    if not MIN_SIGNATURES <= m <= MAX_SIGNATURES:
        raise RangeError(f"Multisig M must be between {MIN_SIGNATURES} and {MAX_SIGNATURES}")
    if not MIN_KEYS <= n <= MAX_KEYS:
        raise RangeError(f"Multisig N must be between {MIN_KEYS} and {MAX_KEYS}")
    if m > n:
        raise RangeError(f"Multisig M ({m}) cannot exceed N ({n})")
    if len(members) != n:
        raise FormatError(f"Multisig declares {n} addresses but contains {len(members)}")

    infos: List[AddressInfo] = []
    for position, member in enumerate(members, start=1):
        info = classify(member)
        if not info.is_valid:
            raise MultisigMemberError(position, info)
        infos.append(info)

    networks = {info.network for info in infos}
    if len(networks) > 1:
        raise FormatError("Multisig member addresses must be on the same network")

    return MultisigAddress(m=m, n=n, member_addresses=tuple(infos))
