import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.models.bill import Bill
from app.models.income import Income
from app.models.transaction import Transaction
from app.models.user import BudgetLimits

logger = logging.getLogger(__name__)

# Initialize DynamoDB resource
dynamodb = boto3.resource(
    "dynamodb",
    region_name=settings.DYNAMO_REGION,
    endpoint_url=settings.DYNAMO_ENDPOINT_URL,
)

# Get table references
users_table = dynamodb.Table(settings.DYNAMO_TABLE_USERS)
transactions_table = dynamodb.Table(settings.DYNAMO_TABLE_TRANSACTIONS)
bills_table = dynamodb.Table(settings.DYNAMO_TABLE_BILLS)
incomes_table = dynamodb.Table(settings.DYNAMO_TABLE_INCOMES)

# Transaction sort keys are "<timestamp>#<uuid>" so a date range is a key range.
SORT_KEY_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"
SORT_KEY_UPPER_SUFFIX = "#~"

STORE_ERRORS = (ClientError, BotoCoreError)


class RecordStoreError(Exception):
    """A DynamoDB call failed. Reports surface this as a 500."""


def transaction_sort_key(moment: datetime) -> str:
    return moment.strftime(SORT_KEY_FORMAT)


def _error_message(error: Exception) -> str:
    response = getattr(error, "response", None) or {}
    return response.get("Error", {}).get("Message", str(error))


def _query_all(table, **kwargs) -> List[Dict[str, Any]]:
    """Run a query (or scan when no key condition is given) across every page."""
    operation = table.query if "KeyConditionExpression" in kwargs else table.scan
    items: List[Dict[str, Any]] = []
    while True:
        response = operation(**kwargs)
        items.extend(response.get("Items", []))
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return [_from_dynamo(item) for item in items]
        kwargs["ExclusiveStartKey"] = last_key


class DynamoRecordStore:
    """
    Read side of the Transactions, Bills, Incomes and Users tables.

    Every query is scoped to a single user. Failures are logged and raised
    as RecordStoreError so the calling report fails as a whole.
    """

    def __init__(self, users=None, transactions=None, bills=None, incomes=None):
        self.users = users or users_table
        self.transactions = transactions or transactions_table
        self.bills = bills or bills_table
        self.incomes = incomes or incomes_table

    def transactions_for_user(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        transaction_type: Optional[str] = None,
    ) -> List[Transaction]:
        condition = Key("user_id").eq(user_id)
        if start and end:
            condition &= Key("transaction_id").between(
                transaction_sort_key(start), transaction_sort_key(end) + SORT_KEY_UPPER_SUFFIX
            )
        elif start:
            condition &= Key("transaction_id").gte(transaction_sort_key(start))
        elif end:
            condition &= Key("transaction_id").lte(transaction_sort_key(end) + SORT_KEY_UPPER_SUFFIX)

        kwargs: Dict[str, Any] = {"KeyConditionExpression": condition}
        if transaction_type:
            kwargs["FilterExpression"] = Attr("type").eq(transaction_type)

        try:
            items = _query_all(self.transactions, **kwargs)
        except STORE_ERRORS as e:
            logger.error(f"transactions_for_user failed: {_error_message(e)}")
            raise RecordStoreError("transactions query failed") from e
        return [Transaction(**item) for item in items]

    def recent_transactions(self, user_id: str, limit: int = 5) -> List[Transaction]:
        """Newest first, straight off the sort key."""
        try:
            response = self.transactions.query(
                KeyConditionExpression=Key("user_id").eq(user_id),
                ScanIndexForward=False,
                Limit=limit,
            )
        except STORE_ERRORS as e:
            logger.error(f"recent_transactions failed: {_error_message(e)}")
            raise RecordStoreError("recent transactions query failed") from e
        return [Transaction(**_from_dynamo(item)) for item in response.get("Items", [])]

    def bills_for_user(self, user_id: str, active_only: bool = True) -> List[Bill]:
        kwargs: Dict[str, Any] = {"KeyConditionExpression": Key("user_id").eq(user_id)}
        if active_only:
            kwargs["FilterExpression"] = Attr("is_active").eq(True)
        try:
            items = _query_all(self.bills, **kwargs)
        except STORE_ERRORS as e:
            logger.error(f"bills_for_user failed: {_error_message(e)}")
            raise RecordStoreError("bills query failed") from e
        return [Bill(**item) for item in items]

    def incomes_for_user(self, user_id: str, active_only: bool = True) -> List[Income]:
        kwargs: Dict[str, Any] = {"KeyConditionExpression": Key("user_id").eq(user_id)}
        if active_only:
            kwargs["FilterExpression"] = Attr("is_active").eq(True)
        try:
            items = _query_all(self.incomes, **kwargs)
        except STORE_ERRORS as e:
            logger.error(f"incomes_for_user failed: {_error_message(e)}")
            raise RecordStoreError("incomes query failed") from e
        return [Income(**item) for item in items]

    def budget_limits_for_user(self, user_id: str) -> BudgetLimits:
        """Budget limits live under the user's preferences; missing means no limits."""
        try:
            response = self.users.get_item(Key={"user_id": user_id})
        except STORE_ERRORS as e:
            logger.error(f"budget_limits_for_user failed: {_error_message(e)}")
            raise RecordStoreError("user lookup failed") from e

        item = _from_dynamo(response.get("Item") or {})
        limits = (item.get("preferences") or {}).get("budget_limits") or {}
        return BudgetLimits(**limits)

    def mark_overdue_bills(self, before: datetime) -> int:
        """
        Flip active pending bills due before ``before`` to overdue.
        Returns the number of bills updated.
        """
        updated = 0
        try:
            items = _query_all(
                self.bills,
                FilterExpression=Attr("status").eq("pending")
                & Attr("is_active").eq(True)
                & Attr("due_date").lt(before.isoformat()),
            )
            for item in items:
                self.bills.update_item(
                    Key={"user_id": item["user_id"], "bill_id": item["bill_id"]},
                    UpdateExpression="SET #s = :overdue",
                    ExpressionAttributeNames={"#s": "status"},
                    ExpressionAttributeValues={":overdue": "overdue"},
                )
                updated += 1
        except STORE_ERRORS as e:
            logger.error(
                f"mark_overdue_bills failed after marking {updated} bill(s) overdue: {_error_message(e)}"
            )
            raise RecordStoreError("overdue sweep failed") from e
        return updated

    def ping(self) -> Dict[str, Dict[str, str]]:
        """Reachability of every table, for the status endpoint."""
        tables = {
            "users": self.users,
            "transactions": self.transactions,
            "bills": self.bills,
            "incomes": self.incomes,
        }
        result = {}
        for name, table in tables.items():
            try:
                table.scan(Limit=1)
                result[name] = {"name": table.name, "status": "accessible"}
            except STORE_ERRORS as e:
                result[name] = {"name": table.name, "status": "error", "error": _error_message(e)}
        return result


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj


record_store = DynamoRecordStore()


def get_record_store() -> DynamoRecordStore:
    return record_store
