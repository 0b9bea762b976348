"""
The token ledger.

Holds the fungible LHT balances of all accounts, including the custody balance of the
contract itself (staking vault and reward treasury), and the allowances granted between
accounts. The sum of all balances always equals the total supply. Movements that would
leave a balance or allowance negative fail instead.

After every balance movement the registered transfer hooks are notified. Hooks run
inside the operation that moved the funds and may call back into the contract.
"""
import logging
from typing import Callable, Dict, List, Tuple

from learning_token.onchain.errors import (
    InsufficientAllowance,
    InsufficientBalance,
    InvalidAmount,
    InvalidApprover,
    InvalidReceiver,
    InvalidSender,
    InvalidSpender,
)
from learning_token.onchain.events import Approval, EventLog, Transfer
from learning_token.onchain.util import (
    MAX_UINT256,
    NULL_ADDRESS,
    Address,
    StateContainer,
)

_LOGGER = logging.getLogger(__name__)

TransferHook = Callable[[Address, Address, int], None]


def check_amount(amount: int) -> None:
    # bool is a subclass of int but never a token amount
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(amount)
    if amount < 0 or amount > MAX_UINT256:
        raise InvalidAmount(amount)


class Ledger(StateContainer):
    STATE_FIELDS = ("_balances", "_allowances", "_total_supply")

    def __init__(self, events: EventLog):
        self._balances: Dict[Address, int] = {}
        self._allowances: Dict[Tuple[Address, Address], int] = {}
        self._total_supply = 0
        self._events = events
        self._transfer_hooks: List[TransferHook] = []

    def add_transfer_hook(self, hook: TransferHook) -> None:
        self._transfer_hooks.append(hook)

    def remove_transfer_hook(self, hook: TransferHook) -> None:
        self._transfer_hooks.remove(hook)

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: Address) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: Address, spender: Address) -> int:
        return self._allowances.get((owner, spender), 0)

    def transfer(self, sender: Address, receiver: Address, amount: int) -> None:
        if sender == NULL_ADDRESS:
            raise InvalidSender(sender)
        if receiver == NULL_ADDRESS:
            raise InvalidReceiver(receiver)
        self._update(sender, receiver, amount)

    def approve(self, owner: Address, spender: Address, amount: int) -> None:
        if owner == NULL_ADDRESS:
            raise InvalidApprover(owner)
        if spender == NULL_ADDRESS:
            raise InvalidSpender(spender)
        check_amount(amount)
        self._allowances[(owner, spender)] = amount
        self._events.emit(Approval(owner, spender, amount))

    def transfer_from(
        self, spender: Address, sender: Address, receiver: Address, amount: int
    ) -> None:
        self._spend_allowance(sender, spender, amount)
        self.transfer(sender, receiver, amount)

    def mint(self, account: Address, amount: int) -> None:
        if account == NULL_ADDRESS:
            raise InvalidReceiver(account)
        self._update(NULL_ADDRESS, account, amount)

    def burn(self, account: Address, amount: int) -> None:
        if account == NULL_ADDRESS:
            raise InvalidSender(account)
        self._update(account, NULL_ADDRESS, amount)

    def burn_from(self, spender: Address, account: Address, amount: int) -> None:
        self._spend_allowance(account, spender, amount)
        self.burn(account, amount)

    def _spend_allowance(self, owner: Address, spender: Address, amount: int) -> None:
        check_amount(amount)
        current = self.allowance(owner, spender)
        if current == MAX_UINT256:
            return
        if current < amount:
            raise InsufficientAllowance(spender, current, amount)
        self._allowances[(owner, spender)] = current - amount

    def _update(self, sender: Address, receiver: Address, amount: int) -> None:
        """
        Move funds between accounts.
        The null address as sender mints, as receiver burns.
        """
        check_amount(amount)
        if sender == NULL_ADDRESS:
            self._total_supply += amount
        else:
            balance = self.balance_of(sender)
            if balance < amount:
                raise InsufficientBalance(sender, balance, amount)
            self._balances[sender] = balance - amount
        if receiver == NULL_ADDRESS:
            self._total_supply -= amount
        else:
            self._balances[receiver] = self.balance_of(receiver) + amount
        _LOGGER.debug(f"Transfer of {amount} from {sender} to {receiver}")
        self._events.emit(Transfer(sender, receiver, amount))
        for hook in list(self._transfer_hooks):
            hook(sender, receiver, amount)
