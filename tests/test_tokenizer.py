from invoice_reconstruction.parser import tokenize


def test_tokenize_trims_and_drops_blank_lines():
    assert tokenize("  Account Number \n\n\t12345\r\n   \nTotal") == [
        "Account Number",
        "12345",
        "Total",
    ]


def test_tokenize_handles_empty_input():
    assert tokenize("") == []
    assert tokenize(None) == []
    assert tokenize(" \n \r\n ") == []


def test_tokenize_accepts_mixed_line_breaks_and_bytes():
    assert tokenize("a\rb\r\nc d\u2028e\u2029f") == ["a", "b", "c d", "e", "f"]
    assert tokenize("Service Period\nJan 1".encode("utf-8")) == ["Service Period", "Jan 1"]


def test_tokenize_keeps_inner_whitespace():
    assert tokenize("Digital access   C$12.34") == ["Digital access   C$12.34"]


def test_tokenize_keeps_control_characters_inside_lines():
    assert tokenize("Gift\x0ccard\x0b$5.00\x85\x1cnote\nTotal") == [
        "Gift\x0ccard\x0b$5.00\x85\x1cnote",
        "Total",
    ]
