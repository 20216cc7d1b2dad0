"""Receipt reference numbers"""
import random
from datetime import datetime


def generate_receipt_number(now=None, rng=random):
    """Human-facing reference in the form RCP-YYMMDD-NNNN.

    Not a key: two receipts on the same day can collide (about 1 in 10000).
    The payment row id stays the durable identifier.
    """
    now = now or datetime.now()
    return f"RCP-{now:%y%m%d}-{rng.randint(0, 9999):04d}"
