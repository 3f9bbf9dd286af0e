"""Fixed values shared by the allocation engine."""

from decimal import Decimal

# Decimal places kept for every stored amount and percentage
CALCULATION_PRECISION = 10

# Decimal places shown to people; never used for invariant checks
DISPLAY_PRECISION = 1

TOTAL_PERCENTAGE = Decimal("100")

# Margin when comparing a percentage sum against 100
PERCENTAGE_TOLERANCE = Decimal("0.01")

# Residue above which the rebalancer corrects the absorber installment
REBALANCE_THRESHOLD = Decimal("0.001")

DEFAULT_CURRENCY = "USD"
DEFAULT_LOAN_TOTAL = Decimal("182")

TITLE_ADVANCE = "Advance"
TITLE_NEW = "New"

STORAGE_KEY_PREFIX = "installment_plan"
STORAGE_KEY_LOAN_INDEX = f"{STORAGE_KEY_PREFIX}:loans"
STORAGE_KEY_SELECTED_LOAN = f"{STORAGE_KEY_PREFIX}:selected_loan"
