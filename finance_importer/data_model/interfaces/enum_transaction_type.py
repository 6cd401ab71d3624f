from enum import Enum


class TransactionType(str, Enum):
    """
    Direction of a money movement. Serialized by value ("INCOME"/"EXPENSE").
    """
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @classmethod
    def from_amount(cls, signed_amount) -> "TransactionType":
        """Positive amounts are income; zero and negatives are expenses."""
        return cls.INCOME if signed_amount > 0 else cls.EXPENSE
