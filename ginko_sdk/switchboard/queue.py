"""Switchboard oracle queues."""

from dataclasses import dataclass

from solders.pubkey import Pubkey

from ..program.constants import SWITCHBOARD_PROGRAM_ID

MAINNET_QUEUE = Pubkey.from_string("A43DyUGA7s8eXPxqEjJY6EBu1KKbNgfxF8h17VAHn13w")
DEVNET_QUEUE = Pubkey.from_string("EYiAmGSdsQTuCw413V5BzaruWuCCSDgTPtBGvLkXHbe7")


@dataclass(frozen=True)
class SwitchboardQueue:
    """An oracle queue and the oracle program that owns it."""

    pubkey: Pubkey
    program_id: Pubkey = SWITCHBOARD_PROGRAM_ID

    @property
    def hex(self) -> str:
        """Bare hex of the queue address, the form crossbar stores jobs under."""
        return bytes(self.pubkey).hex()


def default_queue() -> SwitchboardQueue:
    """The default mainnet queue."""
    return SwitchboardQueue(MAINNET_QUEUE)


def default_devnet_queue() -> SwitchboardQueue:
    """The default devnet queue."""
    return SwitchboardQueue(DEVNET_QUEUE)
