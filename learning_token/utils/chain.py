"""
In-process execution environment for the LearningToken contract.

Provides the logical clock and the caller identity the contract consumes, deterministic
account addresses and contract deployment. The clock only moves forward.
"""
import logging
from hashlib import sha256
from typing import Dict

from learning_token.onchain.learning_token import LearningToken
from learning_token.onchain.util import Address, POSIXTime, TxContext

_LOGGER = logging.getLogger(__name__)

# 2024-01-01T00:00:00Z
DEFAULT_GENESIS_TIME: POSIXTime = 1_704_067_200


def derive_address(seed: bytes) -> Address:
    return "0x" + sha256(seed).hexdigest()[:40]


class LocalChain:
    def __init__(self, genesis_time: POSIXTime = DEFAULT_GENESIS_TIME):
        self._timestamp = genesis_time
        self._accounts: Dict[str, Address] = {}
        self._nonces: Dict[Address, int] = {}

    def latest(self) -> POSIXTime:
        return self._timestamp

    def increase_time(self, seconds: int) -> POSIXTime:
        if seconds < 0:
            raise ValueError(f"Time can not move backwards by {seconds}s")
        self._timestamp += seconds
        return self._timestamp

    def set_next_timestamp(self, timestamp: POSIXTime) -> None:
        if timestamp < self._timestamp:
            raise ValueError(
                f"Timestamp {timestamp} is earlier than the latest block time {self._timestamp}"
            )
        self._timestamp = timestamp

    def tx(self, sender: Address) -> TxContext:
        return TxContext(sender=sender, timestamp=self._timestamp)

    def new_account(self, label: str) -> Address:
        if label not in self._accounts:
            self._accounts[label] = derive_address(b"account:" + label.encode())
        return self._accounts[label]

    def label_of(self, address: Address) -> str:
        for label, account in self._accounts.items():
            if account == address:
                return label
        return address

    def deploy(self, deployer: Address) -> LearningToken:
        nonce = self._nonces.get(deployer, 0)
        self._nonces[deployer] = nonce + 1
        address = derive_address(f"contract:{deployer}:{nonce}".encode())
        token = LearningToken(deployer, address, deployed_at=self._timestamp)
        _LOGGER.debug(f"Deployed contract at {address} with nonce {nonce}")
        return token
