import re
from datetime import datetime, time

import pytz
from dateutil import parser as date_parser

SAO_PAULO_TZ = pytz.timezone('America/Sao_Paulo')

NON_DIGITS = re.compile(r'\D')


def only_digits(value):
    if not value:
        return ''
    return NON_DIGITS.sub('', str(value))


def _cpf_check_digit(digits, weight_start):
    total = sum(int(d) * (weight_start - i) for i, d in enumerate(digits))
    remainder = (total * 10) % 11
    return 0 if remainder in (10, 11) else remainder


def is_valid_cpf(cpf):
    """
    Validate a CPF number, masked or not.
    Example: "529.982.247-25" -> True, "111.111.111-11" -> False
    """
    digits = only_digits(cpf)
    if len(digits) != 11:
        return False
    # Sequences like 000.000.000-00 pass the checksum but are not issued
    if digits == digits[0] * 11:
        return False

    if _cpf_check_digit(digits[:9], 10) != int(digits[9]):
        return False
    if _cpf_check_digit(digits[:10], 11) != int(digits[10]):
        return False
    return True


def format_cpf(value):
    """
    Apply the CPF mask progressively over the first 11 digits.
    Example: "12345678901" -> "123.456.789-01", "1234" -> "123.4"
    """
    digits = only_digits(value)[:11]
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"{digits[:3]}.{digits[3:]}"
    if len(digits) <= 9:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:]}"
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def format_phone(value):
    """
    Apply the phone mask progressively over the first 11 digits.
    Example: "11999999999" -> "(11) 99999-9999"
    """
    digits = only_digits(value)[:11]
    if len(digits) <= 2:
        return digits
    if len(digits) <= 7:
        return f"({digits[:2]}) {digits[2:]}"
    return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"


def make_aware_sao_paulo(dt):
    if dt is None:
        return None
    if dt.tzinfo is not None and dt.tzinfo.utcoffset(dt) is not None:
        return dt
    return SAO_PAULO_TZ.localize(dt)


def parse_filter_datetime(value, end_of_day=False):
    """
    Parse a date filter coming from the panel or the API.

    Accepts "2026-01-31" or a full ISO timestamp. Date-only values are taken
    as São Paulo local days; with ``end_of_day`` the bound covers the whole day.
    Raises ValueError for anything else.
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None

    parsed = date_parser.isoparse(value)
    date_only = len(value) <= 10 and 'T' not in value
    if date_only:
        parsed = datetime.combine(parsed.date(), time.max if end_of_day else time.min)
    return make_aware_sao_paulo(parsed)
