"""Amount to words for receipts"""

ONES = ['', 'One', 'Two', 'Three', 'Four', 'Five', 'Six', 'Seven', 'Eight', 'Nine', 'Ten',
        'Eleven', 'Twelve', 'Thirteen', 'Fourteen', 'Fifteen', 'Sixteen', 'Seventeen', 'Eighteen',
        'Nineteen']
TENS = ['', '', 'Twenty', 'Thirty', 'Forty', 'Fifty', 'Sixty', 'Seventy', 'Eighty', 'Ninety']

SCALES = [
    (1000000000, 'Billion'),
    (1000000, 'Million'),
    (1000, 'Thousand'),
]


def number_to_words(num):
    """Convert a non-negative whole amount to English words.

    ``number_to_words(1234)`` gives ``'One Thousand Two Hundred and Thirty Four'``.
    Fractions are not handled; round before calling. Negative amounts raise
    ``ValueError``.
    """
    if isinstance(num, bool) or not isinstance(num, int):
        raise TypeError(f"Expected a whole number, got {num!r}")
    if num < 0:
        raise ValueError(f"Cannot convert a negative amount to words: {num}")
    if num == 0:
        return 'Zero'
    return _convert(num)


def _convert(n):
    if n < 20:
        return ONES[n]
    if n < 100:
        return TENS[n // 10] + (' ' + ONES[n % 10] if n % 10 else '')
    if n < 1000:
        return ONES[n // 100] + ' Hundred' + (' and ' + _convert(n % 100) if n % 100 else '')

    for value, name in SCALES:
        if n >= value:
            words = _convert(n // value) + ' ' + name
            remainder = n % value
            if remainder:
                words += ' ' + _convert(remainder)
            return words
