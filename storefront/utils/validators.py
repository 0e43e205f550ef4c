import re

MIN_PHONE_DIGITS = 10

def phone_digits(v: str) -> int:
    return len(re.findall(r"\d", v or ""))

def validate_phone_digits(v: str) -> str:
    if phone_digits(v) < MIN_PHONE_DIGITS:
        raise ValueError(f"Phone number must contain at least {MIN_PHONE_DIGITS} digits")
    return v

def is_blank(v) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())
