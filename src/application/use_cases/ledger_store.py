"""Ledger store: the authoritative in-memory state of the ledger.

The store owns the five entity collections and is the only component that
adjusts ``Account.balance``. Every public mutation follows the same shape:

* validate input and stage the new records without touching shared state;
* write every staged record inside one persistence unit of work;
* swap the staged state in only after the unit of work commits.

A persistence failure therefore leaves both the durable store (rolled back)
and the in-memory snapshot untouched. Mutations are serialized by a
re-entrant lock; readers see the last committed ``LedgerSnapshot`` without
locking because collections are replaced, never mutated in place.
"""

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
import threading
import uuid

from src.application.ports.persistence import LedgerPersistencePort
from src.domain.constants import TRANSACTION_TYPES
from src.domain.errors import NotFoundError, PersistenceError
from src.domain.models import (
    Account,
    AccountUpdate,
    Budget,
    Category,
    CategoryUpdate,
    LedgerSnapshot,
    NewAccount,
    NewCategory,
    NewRecurringTransaction,
    NewTransaction,
    RecurringTransaction,
    RecurringTransactionUpdate,
    Transaction,
    TransactionUpdate,
)
from src.domain.models.updates import merge
from src.domain.services import (
    advance_date,
    month_start,
    signed_delta,
    validate_account_type,
    validate_amount,
    validate_category_type,
    validate_date,
    validate_decimal,
    validate_frequency,
    validate_transaction_type,
)
from src.domain.services.validation import validate_choice
from src.infrastructure.logging.logger import get_app_logger


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _find(items: Iterable, entity_id: str):
    for item in items:
        if item.id == entity_id:
            return item
    return None


def _replace_item(items: tuple, updated) -> tuple:
    return tuple(updated if item.id == updated.id else item for item in items)


def _remove_item(items: tuple, entity_id: str) -> tuple:
    return tuple(item for item in items if item.id != entity_id)


class LedgerStore:
    """Single source of truth for accounts, transactions, and budgets."""

    def __init__(
        self,
        persistence: LedgerPersistencePort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            persistence: Port providing durable storage of the collections.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current timestamp.
            id_factory: Optional callable returning new entity identifiers.
        """
        self._persistence = persistence
        self._logger = logger or get_app_logger()
        self._clock = clock or _utc_now
        self._id_factory = id_factory or _new_id
        self._lock = threading.RLock()
        self._state = LedgerSnapshot()

    def snapshot(self) -> LedgerSnapshot:
        """Return the last committed state of every collection."""
        return self._state

    @property
    def accounts(self) -> tuple[Account, ...]:
        return self._state.accounts

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._state.categories

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._state.transactions

    @property
    def recurring_transactions(self) -> tuple[RecurringTransaction, ...]:
        return self._state.recurring_transactions

    @property
    def budgets(self) -> tuple[Budget, ...]:
        return self._state.budgets

    def get_account(self, account_id: str) -> Account | None:
        return _find(self._state.accounts, account_id)

    def get_category(self, category_id: str) -> Category | None:
        return _find(self._state.categories, category_id)

    def get_transaction(self, transaction_id: str) -> Transaction | None:
        return _find(self._state.transactions, transaction_id)

    def get_recurring_transaction(
        self,
        recurring_id: str,
    ) -> RecurringTransaction | None:
        return _find(self._state.recurring_transactions, recurring_id)

    def get_budget(self, budget_id: str) -> Budget | None:
        return _find(self._state.budgets, budget_id)

    def today(self) -> date:
        """Return the current calendar date according to the store clock."""
        return self._clock().date()

    def load(self) -> LedgerSnapshot:
        """Replace the in-memory state with the persisted collections.

        Returns:
            LedgerSnapshot: The freshly loaded state.
        """
        with self._lock:
            try:
                state = LedgerSnapshot(
                    accounts=tuple(self._persistence.accounts.get_all()),
                    categories=tuple(self._persistence.categories.get_all()),
                    transactions=tuple(
                        self._persistence.transactions.get_all()
                    ),
                    recurring_transactions=tuple(
                        self._persistence.recurring_transactions.get_all()
                    ),
                    budgets=tuple(self._persistence.budgets.get_all()),
                )
            except PersistenceError:
                self._logger.error("Loading the ledger failed")
                raise
            self._state = state
        self._logger.info(
            f"Loaded ledger: {len(state.accounts)} accounts, "
            f"{len(state.categories)} categories, "
            f"{len(state.transactions)} transactions, "
            f"{len(state.recurring_transactions)} recurring, "
            f"{len(state.budgets)} budgets"
        )
        return state

    def add_account(self, new: NewAccount) -> Account:
        """Open an account with a caller-supplied starting balance.

        Args:
            new: Account fields; ``balance`` is the starting value.

        Returns:
            Account: The stored account.
        """
        with self._lock:
            now = self._clock()
            account = Account(
                id=self._id_factory(),
                name=new.name,
                account_type=new.account_type,
                balance=new.balance,
                goal_amount=new.goal_amount,
                color=new.color,
                created_at=now,
                updated_at=now,
            )
            account = self._validate_account(account)
            with self._unit_of_work("add_account"):
                self._persistence.accounts.add(account)
            self._commit(accounts=self._state.accounts + (account,))
        self._logger.info(f"Added account {account.id} ({account.name})")
        return account

    def update_account(
        self,
        account_id: str,
        update: AccountUpdate,
    ) -> Account:
        """Merge provided fields into an account.

        An explicit ``balance`` is treated as a manual correction.

        Raises:
            NotFoundError: If the account does not exist.
        """
        with self._lock:
            current = self.get_account(account_id)
            if current is None:
                raise NotFoundError("accounts", account_id)
            updated = merge(current, update, updated_at=self._clock())
            updated = self._validate_account(updated)
            with self._unit_of_work("update_account"):
                self._persistence.accounts.update(updated)
            self._commit(
                accounts=_replace_item(self._state.accounts, updated)
            )
        self._logger.info(f"Updated account {account_id}")
        return updated

    def delete_account(self, account_id: str) -> None:
        """Remove an account; its transactions become orphaned."""
        with self._lock:
            if self.get_account(account_id) is None:
                return
            with self._unit_of_work("delete_account"):
                self._persistence.accounts.delete(account_id)
            self._commit(
                accounts=_remove_item(self._state.accounts, account_id)
            )
        self._logger.info(f"Deleted account {account_id}")

    def add_category(self, new: NewCategory) -> Category:
        with self._lock:
            category = Category(
                id=self._id_factory(),
                name=new.name,
                category_type=new.category_type,
                icon=new.icon,
                color=new.color,
                created_at=self._clock(),
            )
            self._validate_category(category)
            with self._unit_of_work("add_category"):
                self._persistence.categories.add(category)
            self._commit(categories=self._state.categories + (category,))
        self._logger.info(f"Added category {category.id} ({category.name})")
        return category

    def update_category(
        self,
        category_id: str,
        update: CategoryUpdate,
    ) -> Category:
        """Merge provided fields into a category.

        Raises:
            NotFoundError: If the category does not exist.
        """
        with self._lock:
            current = self.get_category(category_id)
            if current is None:
                raise NotFoundError("categories", category_id)
            updated = merge(current, update)
            self._validate_category(updated)
            with self._unit_of_work("update_category"):
                self._persistence.categories.update(updated)
            self._commit(
                categories=_replace_item(self._state.categories, updated)
            )
        self._logger.info(f"Updated category {category_id}")
        return updated

    def delete_category(self, category_id: str) -> None:
        with self._lock:
            if self.get_category(category_id) is None:
                return
            with self._unit_of_work("delete_category"):
                self._persistence.categories.delete(category_id)
            self._commit(
                categories=_remove_item(self._state.categories, category_id)
            )
        self._logger.info(f"Deleted category {category_id}")

    def add_transaction(self, new: NewTransaction) -> Transaction:
        """Record a transaction and apply its signed delta.

        The owning account's balance moves by ``+amount`` for income and
        ``-amount`` for expense; an orphaned account is skipped.

        Args:
            new: Transaction fields.

        Returns:
            Transaction: The stored transaction.
        """
        with self._lock:
            now = self._clock()
            transaction = self._validate_transaction(
                self._build_transaction(new, now)
            )
            accounts = self._account_map()
            touched: dict[str, Account] = {}
            self._stage_delta(
                accounts,
                touched,
                transaction.account_id,
                signed_delta(transaction.amount, transaction.transaction_type),
                now,
            )
            with self._unit_of_work("add_transaction"):
                self._persistence.transactions.add(transaction)
                self._write_accounts(touched)
            self._commit(
                transactions=self._state.transactions + (transaction,),
                accounts=tuple(accounts.values()),
            )
        self._logger.info(
            f"Added {transaction.transaction_type} transaction "
            f"{transaction.id} of {transaction.amount}"
        )
        return transaction

    def update_transaction(
        self,
        transaction_id: str,
        update: TransactionUpdate,
    ) -> Transaction:
        """Merge provided fields into a transaction.

        When the amount, type, or account changes, the old signed delta is
        reverted on the old account and the new one applied on the new
        account, in that order, even when both accounts are the same.

        Raises:
            NotFoundError: If the transaction does not exist.
        """
        with self._lock:
            current = self.get_transaction(transaction_id)
            if current is None:
                raise NotFoundError("transactions", transaction_id)
            now = self._clock()
            updated = merge(current, update, updated_at=now)
            updated = self._validate_transaction(updated)
            accounts = self._account_map()
            touched: dict[str, Account] = {}
            if update.touches_balance():
                self._stage_delta(
                    accounts,
                    touched,
                    current.account_id,
                    -signed_delta(current.amount, current.transaction_type),
                    now,
                )
                self._stage_delta(
                    accounts,
                    touched,
                    updated.account_id,
                    signed_delta(updated.amount, updated.transaction_type),
                    now,
                )
            with self._unit_of_work("update_transaction"):
                self._persistence.transactions.update(updated)
                self._write_accounts(touched)
            self._commit(
                transactions=_replace_item(self._state.transactions, updated),
                accounts=tuple(accounts.values()),
            )
        self._logger.info(f"Updated transaction {transaction_id}")
        return updated

    def delete_transaction(self, transaction_id: str) -> None:
        """Remove a transaction after reverting its signed delta.

        Unknown ids are ignored.
        """
        with self._lock:
            current = self.get_transaction(transaction_id)
            if current is None:
                return
            accounts = self._account_map()
            touched: dict[str, Account] = {}
            self._stage_delta(
                accounts,
                touched,
                current.account_id,
                -signed_delta(current.amount, current.transaction_type),
                self._clock(),
            )
            with self._unit_of_work("delete_transaction"):
                self._write_accounts(touched)
                self._persistence.transactions.delete(transaction_id)
            self._commit(
                transactions=_remove_item(
                    self._state.transactions,
                    transaction_id,
                ),
                accounts=tuple(accounts.values()),
            )
        self._logger.info(f"Deleted transaction {transaction_id}")

    def add_recurring_transaction(
        self,
        new: NewRecurringTransaction,
    ) -> RecurringTransaction:
        with self._lock:
            now = self._clock()
            recurring = RecurringTransaction(
                id=self._id_factory(),
                account_id=new.account_id,
                category_id=new.category_id,
                amount=new.amount,
                transaction_type=new.transaction_type,
                description=new.description,
                frequency=new.frequency,
                next_date=new.next_date,
                active=new.active,
                created_at=now,
                updated_at=now,
            )
            recurring = self._validate_recurring(recurring)
            with self._unit_of_work("add_recurring_transaction"):
                self._persistence.recurring_transactions.add(recurring)
            self._commit(
                recurring_transactions=(
                    self._state.recurring_transactions + (recurring,)
                )
            )
        self._logger.info(
            f"Added {recurring.frequency} recurring transaction "
            f"{recurring.id}, next on {recurring.next_date}"
        )
        return recurring

    def update_recurring_transaction(
        self,
        recurring_id: str,
        update: RecurringTransactionUpdate,
    ) -> RecurringTransaction:
        """Merge provided fields into a recurring schedule.

        Raises:
            NotFoundError: If the schedule does not exist.
        """
        with self._lock:
            current = self.get_recurring_transaction(recurring_id)
            if current is None:
                raise NotFoundError("recurring_transactions", recurring_id)
            updated = merge(current, update, updated_at=self._clock())
            updated = self._validate_recurring(updated)
            with self._unit_of_work("update_recurring_transaction"):
                self._persistence.recurring_transactions.update(updated)
            self._commit(
                recurring_transactions=_replace_item(
                    self._state.recurring_transactions,
                    updated,
                )
            )
        self._logger.info(f"Updated recurring transaction {recurring_id}")
        return updated

    def delete_recurring_transaction(self, recurring_id: str) -> None:
        """Remove a schedule; transactions it generated are kept."""
        with self._lock:
            if self.get_recurring_transaction(recurring_id) is None:
                return
            with self._unit_of_work("delete_recurring_transaction"):
                self._persistence.recurring_transactions.delete(recurring_id)
            self._commit(
                recurring_transactions=_remove_item(
                    self._state.recurring_transactions,
                    recurring_id,
                )
            )
        self._logger.info(f"Deleted recurring transaction {recurring_id}")

    def materialize_occurrence(
        self,
        recurring_id: str,
    ) -> tuple[Transaction, RecurringTransaction]:
        """Turn a schedule's due occurrence into a transaction.

        The transaction is dated on the schedule's ``next_date`` and tagged
        with the schedule id; the schedule then advances by one frequency
        step. The transaction, the balance change, and the new ``next_date``
        commit together.

        Args:
            recurring_id: Schedule to materialize.

        Returns:
            tuple[Transaction, RecurringTransaction]: The generated
            transaction and the advanced schedule.

        Raises:
            NotFoundError: If the schedule does not exist.
        """
        with self._lock:
            schedule = self.get_recurring_transaction(recurring_id)
            if schedule is None:
                raise NotFoundError("recurring_transactions", recurring_id)
            now = self._clock()
            transaction = self._build_transaction(
                NewTransaction(
                    account_id=schedule.account_id,
                    category_id=schedule.category_id,
                    amount=schedule.amount,
                    transaction_type=schedule.transaction_type,
                    description=schedule.description,
                    date=schedule.next_date,
                    recurring_transaction_id=schedule.id,
                ),
                now,
            )
            transaction = self._validate_transaction(transaction)
            advanced = replace(
                schedule,
                next_date=advance_date(schedule.next_date, schedule.frequency),
                updated_at=now,
            )
            accounts = self._account_map()
            touched: dict[str, Account] = {}
            self._stage_delta(
                accounts,
                touched,
                transaction.account_id,
                signed_delta(transaction.amount, transaction.transaction_type),
                now,
            )
            with self._unit_of_work("materialize_occurrence"):
                self._persistence.transactions.add(transaction)
                self._write_accounts(touched)
                self._persistence.recurring_transactions.update(advanced)
            self._commit(
                transactions=self._state.transactions + (transaction,),
                accounts=tuple(accounts.values()),
                recurring_transactions=_replace_item(
                    self._state.recurring_transactions,
                    advanced,
                ),
            )
        self._logger.info(
            f"Materialized recurring transaction {recurring_id} on "
            f"{transaction.date}; next on {advanced.next_date}"
        )
        return transaction, advanced

    def set_budget(
        self,
        category_id: str,
        amount: Decimal,
        month: date | None = None,
    ) -> Budget:
        """Insert or update the budget of a category for a month.

        Args:
            category_id: Budgeted category.
            amount: Monthly ceiling, zero or more.
            month: Any day of the budget month; defaults to today's month.

        Returns:
            Budget: The stored budget.
        """
        amount = validate_amount(amount, allow_zero=True)
        with self._lock:
            budget_month = month_start(
                validate_date(month, "month") if month else self.today()
            )
            budgets = list(self._state.budgets)
            budget, is_new = self._stage_budget(
                budgets,
                category_id,
                amount,
                budget_month,
                self._clock(),
            )
            with self._unit_of_work("set_budget"):
                if is_new:
                    self._persistence.budgets.add(budget)
                else:
                    self._persistence.budgets.update(budget)
            self._commit(budgets=tuple(budgets))
        self._logger.info(
            f"Set budget for category {category_id} in {budget_month:%Y-%m} "
            f"to {amount}"
        )
        return budget

    def delete_budget(self, budget_id: str) -> None:
        with self._lock:
            if self.get_budget(budget_id) is None:
                return
            with self._unit_of_work("delete_budget"):
                self._persistence.budgets.delete(budget_id)
            self._commit(budgets=_remove_item(self._state.budgets, budget_id))
        self._logger.info(f"Deleted budget {budget_id}")

    def import_snapshot(self, incoming: LedgerSnapshot) -> LedgerSnapshot:
        """Insert a batch of complete records in one unit of work.

        Records are stored verbatim: balances are taken as given and
        transactions do not re-apply their deltas. Budgets go through the
        (category, month) upsert.

        Args:
            incoming: Records with identities already assigned.

        Returns:
            LedgerSnapshot: The records written, budgets as upserted.
        """
        for category in incoming.categories:
            self._validate_category(category)
        incoming = replace(
            incoming,
            accounts=tuple(
                self._validate_account(account)
                for account in incoming.accounts
            ),
            transactions=tuple(
                self._validate_transaction(transaction, check_category=False)
                for transaction in incoming.transactions
            ),
            recurring_transactions=tuple(
                self._validate_recurring(recurring, check_category=False)
                for recurring in incoming.recurring_transactions
            ),
            budgets=tuple(
                replace(
                    budget,
                    amount=validate_amount(budget.amount, allow_zero=True),
                )
                for budget in incoming.budgets
            ),
        )

        with self._lock:
            budgets = list(self._state.budgets)
            written_budgets: list[Budget] = []
            inserted_ids: set[str] = set()
            for incoming_budget in incoming.budgets:
                budget, is_new = self._stage_budget(
                    budgets,
                    incoming_budget.category_id,
                    incoming_budget.amount,
                    month_start(incoming_budget.month),
                    incoming_budget.updated_at,
                    new_id=incoming_budget.id,
                    created_at=incoming_budget.created_at,
                )
                if is_new:
                    inserted_ids.add(budget.id)
                written_budgets = [
                    item for item in written_budgets if item.id != budget.id
                ] + [budget]

            with self._unit_of_work("import_snapshot"):
                for account in incoming.accounts:
                    self._persistence.accounts.add(account)
                for category in incoming.categories:
                    self._persistence.categories.add(category)
                for transaction in incoming.transactions:
                    self._persistence.transactions.add(transaction)
                for recurring in incoming.recurring_transactions:
                    self._persistence.recurring_transactions.add(recurring)
                for budget in written_budgets:
                    if budget.id in inserted_ids:
                        self._persistence.budgets.add(budget)
                    else:
                        self._persistence.budgets.update(budget)

            self._commit(
                accounts=self._state.accounts + tuple(incoming.accounts),
                categories=self._state.categories + tuple(incoming.categories),
                transactions=(
                    self._state.transactions + tuple(incoming.transactions)
                ),
                recurring_transactions=(
                    self._state.recurring_transactions
                    + tuple(incoming.recurring_transactions)
                ),
                budgets=tuple(budgets),
            )
        written = replace(incoming, budgets=tuple(written_budgets))
        self._logger.info(
            f"Imported {len(written.accounts)} accounts, "
            f"{len(written.categories)} categories, "
            f"{len(written.transactions)} transactions, "
            f"{len(written.recurring_transactions)} recurring, "
            f"{len(written.budgets)} budgets"
        )
        return written

    def clear_all(self) -> None:
        """Delete every record of every collection."""
        with self._lock:
            with self._unit_of_work("clear_all"):
                self._persistence.transactions.clear()
                self._persistence.recurring_transactions.clear()
                self._persistence.budgets.clear()
                self._persistence.accounts.clear()
                self._persistence.categories.clear()
            self._state = LedgerSnapshot()
        self._logger.warning("Cleared every ledger collection")

    @contextmanager
    def _unit_of_work(self, operation: str) -> Iterator[None]:
        try:
            with self._persistence.atomic():
                yield
        except PersistenceError as exc:
            self._logger.error(
                f"{operation} failed; ledger state left unchanged: {exc}"
            )
            raise

    def _commit(self, **changes) -> None:
        self._state = replace(self._state, **changes)

    def _account_map(self) -> dict[str, Account]:
        return {account.id: account for account in self._state.accounts}

    def _stage_delta(
        self,
        accounts: dict[str, Account],
        touched: dict[str, Account],
        account_id: str,
        delta: Decimal,
        now: datetime,
    ) -> None:
        account = accounts.get(account_id)
        if account is None:
            self._logger.debug(
                f"Skipping balance update for orphaned account {account_id}"
            )
            return
        updated = replace(
            account,
            balance=account.balance + delta,
            updated_at=now,
        )
        accounts[account_id] = updated
        touched[account_id] = updated

    def _write_accounts(self, touched: dict[str, Account]) -> None:
        for account in touched.values():
            self._persistence.accounts.update(account)

    def _stage_budget(
        self,
        budgets: list[Budget],
        category_id: str,
        amount: Decimal,
        month: date,
        now: datetime,
        new_id: str | None = None,
        created_at: datetime | None = None,
    ) -> tuple[Budget, bool]:
        for index, existing in enumerate(budgets):
            if existing.category_id == category_id and existing.month == month:
                updated = replace(existing, amount=amount, updated_at=now)
                budgets[index] = updated
                return updated, False
        budget = Budget(
            id=new_id or self._id_factory(),
            category_id=category_id,
            amount=amount,
            month=month,
            created_at=created_at or now,
            updated_at=now,
        )
        budgets.append(budget)
        return budget, True

    def _build_transaction(
        self,
        new: NewTransaction,
        now: datetime,
    ) -> Transaction:
        return Transaction(
            id=self._id_factory(),
            account_id=new.account_id,
            category_id=new.category_id,
            amount=new.amount,
            transaction_type=new.transaction_type,
            description=new.description,
            date=new.date,
            notes=new.notes,
            recurring_transaction_id=new.recurring_transaction_id,
            created_at=now,
            updated_at=now,
        )

    def _validate_account(self, account: Account) -> Account:
        validate_account_type(account.account_type)
        goal_amount = account.goal_amount
        if goal_amount is not None:
            goal_amount = validate_amount(goal_amount, allow_zero=True)
        return replace(
            account,
            balance=validate_decimal(account.balance, "Balance"),
            goal_amount=goal_amount,
        )

    def _validate_category(self, category: Category) -> None:
        validate_choice(
            category.category_type,
            TRANSACTION_TYPES,
            "category type",
        )

    def _validate_transaction(
        self,
        transaction: Transaction,
        check_category: bool = True,
    ) -> Transaction:
        """Check a transaction and return it with a Decimal amount."""
        amount = validate_amount(transaction.amount)
        validate_transaction_type(transaction.transaction_type)
        validate_date(transaction.date)
        if check_category:
            validate_category_type(
                transaction.transaction_type,
                self.get_category(transaction.category_id),
            )
        return replace(transaction, amount=amount)

    def _validate_recurring(
        self,
        recurring: RecurringTransaction,
        check_category: bool = True,
    ) -> RecurringTransaction:
        amount = validate_amount(recurring.amount)
        validate_transaction_type(recurring.transaction_type)
        validate_frequency(recurring.frequency)
        validate_date(recurring.next_date, "next date")
        if check_category:
            validate_category_type(
                recurring.transaction_type,
                self.get_category(recurring.category_id),
            )
        return replace(recurring, amount=amount)


__all__ = ["LedgerStore"]
