"""Round-robin pairing generation."""

from __future__ import annotations

import random
from itertools import permutations
from typing import Sequence

from backend.domain.models import Participant, Pairing
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def generate_pairings(
    participants: Sequence[Participant],
    rng: random.Random,
) -> list[Pairing]:
    """Return every ordered (host, guest) pairing in a shuffled order.

    Each participant hosts every other participant exactly once, giving
    N * (N - 1) pairings. Fewer than two participants yield no pairings.
    """
    pairings = [Pairing(host=host, guest=guest) for host, guest in permutations(participants, 2)]
    rng.shuffle(pairings)
    logger.debug(
        "Pairings generated | participants=%s | pairings=%s",
        len(participants),
        len(pairings),
    )
    return pairings
