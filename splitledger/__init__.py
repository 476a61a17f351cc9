"""
splitledger - split calculation and settlement engine for shared-expense groups.
"""

import logging

from splitledger.models import (
    DEFAULT_CATEGORIES,
    Debt,
    Group,
    Member,
    MemberStatus,
    Payment,
    Split,
    SplitInput,
    SplitPolicy,
    Transaction,
)
from splitledger.settlement import compute_balances, compute_debts, settle_group
from splitledger.splitter import (
    ValidationResult,
    calculate_splits,
    get_default_split_inputs,
    validate_splits,
)
from splitledger.utils import EPSILON

logging.getLogger(__name__).addHandler(logging.NullHandler())
