# backend/feedr/services/ingredient_scaler.py

import logging
import re
from fractions import Fraction
from typing import List, Sequence, Union

from feedr.core.schemas import Ingredient

logger = logging.getLogger(__name__)

UNICODE_FRACTIONS = {
    "½": "1/2",
    "⅓": "1/3",
    "⅔": "2/3",
    "¼": "1/4",
    "¾": "3/4",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

_GLYPHS = "".join(UNICODE_FRACTIONS)
# "3½" is three and a half, not 31/2
_GLYPH_AFTER_DIGIT = re.compile(rf"(\d)([{_GLYPHS}])")

# Bounded digit runs keep exponent notation and huge integers out of Fraction
MAX_DIGITS = 30
_DIGITS = rf"\d{{1,{MAX_DIGITS}}}"
_DECIMAL = re.compile(rf"^-?(?:{_DIGITS}(?:\.{_DIGITS})?|\.{_DIGITS})$")
_FRACTION = re.compile(rf"^(-?)({_DIGITS})\s*/\s*({_DIGITS})$")
_MIXED_NUMBER = re.compile(rf"^(-?)({_DIGITS})\s+({_DIGITS})\s*/\s*({_DIGITS})$")

Multiplier = Union[Fraction, int, float, str]


def normalize_fraction_string(text: str) -> str:
    """Replace Unicode vulgar fractions (e.g. "½") with ASCII fractions ("1/2")."""
    if not text:
        return ""
    for glyph, ascii_fraction in UNICODE_FRACTIONS.items():
        if glyph in text:
            text = text.replace(glyph, ascii_fraction)
    return text


def parse_quantity(text: str) -> Fraction:
    """
    Parse a free-text quantity into an exact rational.

    Accepts integers, decimals, "a/b", mixed numbers ("1 1/2"), an optional
    leading minus sign, and any of those written with vulgar fraction glyphs
    ("1 ¼", "3½"). Exponents and digit runs longer than MAX_DIGITS are rejected.

    Raises:
        ValueError: If the text is not a quantity.
    """
    if text is None:
        raise ValueError("Quantity is missing")

    normalized = normalize_fraction_string(_GLYPH_AFTER_DIGIT.sub(r"\1 \2", text)).strip()
    if not normalized:
        raise ValueError("Quantity is empty")

    if _DECIMAL.match(normalized):
        return Fraction(normalized)

    mixed = _MIXED_NUMBER.match(normalized)
    fraction = _FRACTION.match(normalized)
    if mixed:
        sign, whole, numerator, denominator = mixed.groups()
    elif fraction:
        sign, numerator, denominator = fraction.groups()
        whole = "0"
    else:
        raise ValueError(f"Not a quantity: {text!r}")

    if int(denominator) == 0:
        raise ValueError(f"Quantity has a zero denominator: {text!r}")
    value = int(whole) + Fraction(int(numerator), int(denominator))
    return -value if sign else value


def format_quantity(value: Fraction) -> str:
    """Render a rational as "2", "3/4" or the mixed form "1 1/4"."""
    if value.denominator == 1:
        return str(value.numerator)

    sign = "-" if value < 0 else ""
    whole, remainder = divmod(abs(value.numerator), value.denominator)
    if whole == 0:
        return f"{sign}{remainder}/{value.denominator}"
    return f"{sign}{whole} {remainder}/{value.denominator}"


def to_multiplier(multiplier: Multiplier) -> Fraction:
    """Convert a scaling factor to a positive rational."""
    if isinstance(multiplier, bool):
        raise ValueError("Multiplier must be a number")
    if isinstance(multiplier, Fraction):
        factor = multiplier
    elif isinstance(multiplier, int):
        factor = Fraction(multiplier)
    elif isinstance(multiplier, float):
        # str() keeps 1.1 as 11/10 rather than its binary expansion
        factor = Fraction(str(multiplier))
    elif isinstance(multiplier, str):
        factor = parse_quantity(multiplier)
    else:
        raise ValueError(f"Unsupported multiplier type: {type(multiplier).__name__}")

    if factor <= 0:
        raise ValueError(f"Multiplier must be positive, got {multiplier!r}")
    if max(factor.numerator, factor.denominator) >= 10 ** MAX_DIGITS:
        raise ValueError(f"Multiplier is out of range: {multiplier!r}")
    return factor


def scale_ingredients(ingredients: Sequence[Ingredient], multiplier: Multiplier) -> List[Ingredient]:
    """
    Scale every ingredient quantity by the given multiplier.

    Quantities that cannot be parsed are kept as they are. Order and all other
    fields are preserved.

    Raises:
        ValueError: If the multiplier is not a positive rational.
    """
    factor = to_multiplier(multiplier)

    scaled = []
    for ingredient in ingredients:
        if not ingredient.quantity:
            scaled.append(ingredient)
            continue
        try:
            quantity = format_quantity(parse_quantity(ingredient.quantity) * factor)
        except ValueError as e:
            logger.warning(
                "Error scaling quantity for %s: %r (%s)", ingredient.name, ingredient.quantity, e
            )
            scaled.append(ingredient)
            continue
        scaled.append(ingredient.model_copy(update={"quantity": quantity}))
    return scaled
