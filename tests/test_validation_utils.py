from utils.validation_utils import compare_params, normalize_email, normalize_phone, sanitize_input


def test_compare_params_reports_missing_in_order():
    missing = compare_params(["name", "email", "password", "phone"], {"email": "a@b.c"})
    assert missing == ["name", "password", "phone"]


def test_compare_params_counts_presence_not_value():
    assert compare_params(["name", "phone"], {"name": "", "phone": None}) == []


def test_normalize_email():
    assert normalize_email("  Jane@Example.COM ") == "jane@example.com"
    assert normalize_email(None) == ""


def test_normalize_phone():
    assert normalize_phone("+1 (555) 123-4567") == "+15551234567"
    assert normalize_phone(5551234567) == "5551234567"


def test_sanitize_input():
    assert sanitize_input("  Jane   <b>Doe</b> ") == "Jane bDoe/b"
    assert sanitize_input(None) == ""
