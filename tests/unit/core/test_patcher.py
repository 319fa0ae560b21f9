"""Tests for recording and applying edits."""

import pytest

from splicekit import (
    ConflictError,
    Edit,
    ErrorKind,
    NegativeLengthError,
    NegativeOffsetError,
    OutOfRangeError,
    PatchError,
    Patcher,
)


def check_error(patcher, original, error_type, phrase, *edits):
    """Apply and check error type, phrase and rendered edits."""
    with pytest.raises(error_type) as excinfo:
        patcher.apply(original)

    message = str(excinfo.value)
    assert phrase in message
    for edit in edits:
        assert edit in message
    return excinfo.value


# ============================================================
# EMPTINESS AND RESET
# ============================================================

def test_passthrough():
    """Test that a fresh patcher returns the input unchanged."""
    assert Patcher().apply("abc") == "abc"


def test_passthrough_bytes():
    """Test that a fresh patcher returns equal bytes."""
    assert Patcher().apply(b"abc") == b"abc"


def test_empty():
    """Test is_empty before recording, after recording and after reset."""
    patcher = Patcher()
    assert patcher.is_empty()

    patcher.delete(1, 1)
    assert not patcher.is_empty()
    assert len(patcher) == 1

    patcher.reset()
    assert patcher.is_empty()


def test_empty_zero_length():
    """Test that zero-length operations do not record edits."""
    patcher = Patcher()
    patcher.insert(1, "")
    patcher.insert(1, b"")
    patcher.rewrite(2, 0, "")
    patcher.delete(3, 0)

    assert patcher.is_empty()


def test_reset():
    """Test that edits recorded after reset apply alone."""
    patcher = Patcher()
    patcher.rewrite(1, 1, "xyz")
    patcher.reset()
    patcher.insert(3, "z")

    assert patcher.apply("abc") == "abcz"


def test_reset_then_passthrough():
    """Test that apply after reset returns the input unchanged."""
    patcher = Patcher()
    patcher.delete(0, 2)
    patcher.reset()

    assert patcher.apply("abc") == "abc"


# ============================================================
# DELETE
# ============================================================

def test_delete():
    """Test deleting a span."""
    patcher = Patcher()
    patcher.delete(1, 2)

    assert patcher.apply("abcde") == "ade"


def test_delete_negative_offset():
    """Test that a negative offset is reported."""
    patcher = Patcher()
    patcher.delete(-1, 2)

    check_error(
        patcher, "abcde", NegativeOffsetError, "negative offset", "(-1,2,)"
    )


def test_delete_negative_length():
    """Test that a negative length is reported."""
    patcher = Patcher()
    patcher.delete(2, -1)

    check_error(
        patcher, "abcde", NegativeLengthError, "negative length", "(2,-1,)"
    )


def test_delete_nothing_at_end():
    """Test that a zero-length delete at the end is a no-op."""
    patcher = Patcher()
    patcher.delete(5, 0)

    assert patcher.apply("abcde") == "abcde"


def test_delete_out_of_range():
    """Test that a delete past the end is reported."""
    patcher = Patcher()
    patcher.delete(5, 1)

    check_error(patcher, "abcde", OutOfRangeError, "out of range", "(5,1,)")


def test_delete_touching():
    """Test that deletes sharing a boundary do not conflict."""
    patcher = Patcher()
    patcher.delete(1, 2)
    patcher.delete(3, 1)

    assert patcher.apply("abcde") == "ae"


def test_delete_out_of_order():
    """Test that recording order does not matter for distinct offsets."""
    patcher = Patcher()
    patcher.delete(3, 1)
    patcher.delete(1, 1)

    assert patcher.apply("abcde") == "ace"


def test_delete_conflict():
    """Test that overlapping deletes report both edits."""
    patcher = Patcher()
    patcher.delete(1, 3)
    patcher.delete(2, 1)

    error = check_error(
        patcher, "abcde", ConflictError, "conflict", "(2,1,)", "(1,3,)"
    )
    assert error.edits == (Edit(1, 3), Edit(2, 1))


# ============================================================
# INSERT
# ============================================================

def test_insert():
    """Test inserting text."""
    patcher = Patcher()
    patcher.insert(1, "bcd")

    assert patcher.apply("ae") == "abcde"


def test_insert_negative_offset():
    """Test that an insert before the start is reported."""
    patcher = Patcher()
    patcher.insert(-1, "z")

    check_error(
        patcher, "abcde", NegativeOffsetError, "negative offset", "(-1,0,z)"
    )


def test_insert_at_end():
    """Test that inserting at the input length is valid."""
    patcher = Patcher()
    patcher.insert(4, "e")

    assert patcher.apply("abcd") == "abcde"


def test_insert_out_of_range():
    """Test that an insert past the end is reported."""
    patcher = Patcher()
    patcher.insert(10, "z")

    check_error(patcher, "abcde", OutOfRangeError, "out of range", "(10,0,z)")


def test_insert_multiple():
    """Test that inserts at one offset keep their recording order."""
    patcher = Patcher()
    patcher.insert(1, "b")
    patcher.insert(1, "c")
    patcher.insert(1, "d")

    assert patcher.apply("ae") == "abcde"


def test_insert_out_of_order():
    """Test inserts recorded in descending offset order."""
    patcher = Patcher()
    patcher.insert(2, "d")
    patcher.insert(1, "b")

    assert patcher.apply("ace") == "abcde"


# ============================================================
# REWRITE
# ============================================================

def test_rewrite():
    """Test replacing a span with longer text."""
    patcher = Patcher()
    patcher.rewrite(1, 1, "xyz")

    assert patcher.apply("abc") == "axyzc"


def test_rewrite_insert():
    """Test that a zero-length rewrite inserts."""
    patcher = Patcher()
    patcher.rewrite(1, 0, "b")

    assert patcher.apply("ac") == "abc"


def test_rewrite_delete():
    """Test that a rewrite with empty data deletes."""
    patcher = Patcher()
    patcher.rewrite(1, 1, "")

    assert patcher.apply("abc") == "ac"


def test_rewrite_touching():
    """Test that adjacent rewrites do not conflict."""
    patcher = Patcher()
    patcher.rewrite(0, 2, "x")
    patcher.rewrite(2, 1, "yz")

    assert patcher.apply("abc") == "xyz"


def test_rewrite_conflict():
    """Test that overlapping rewrites report both edits."""
    patcher = Patcher()
    patcher.rewrite(0, 2, "x")
    patcher.rewrite(1, 1, "yz")

    check_error(
        patcher, "abc", ConflictError, "conflict", "(0,2,x)", "(1,1,yz)"
    )


# ============================================================
# COMBINED
# ============================================================

def test_combined():
    """Test inserts sharing an offset with a following rewrite."""
    patcher = Patcher()
    patcher.insert(3, "k")
    patcher.delete(1, 1)
    patcher.insert(3, "l")
    patcher.rewrite(3, 1, "xyz")

    assert patcher.apply("abcde") == "acklxyze"


def test_combined_conflict():
    """Test that the first conflict in offset order is reported."""
    patcher = Patcher()
    patcher.insert(0, "g")
    patcher.insert(4, "f")
    patcher.delete(1, 1)
    patcher.rewrite(2, 1, "uvw")
    patcher.rewrite(3, 2, "xyz")

    check_error(
        patcher, "abcde", ConflictError, "conflict", "(4,0,f)", "(3,2,xyz)"
    )


def test_insert_after_rewrite_at_same_offset_conflicts():
    """Test an insert recorded after a rewrite at the same offset.

    The rewrite sorts first and its span runs past the insert offset.
    """
    patcher = Patcher()
    patcher.rewrite(1, 1, "x")
    patcher.insert(1, "y")

    check_error(patcher, "abc", ConflictError, "conflict", "(1,1,x)", "(1,0,y)")


def test_insert_at_rewrite_end():
    """Test an insert touching the end of a rewrite."""
    patcher = Patcher()
    patcher.rewrite(1, 1, "x")
    patcher.insert(2, "y")

    assert patcher.apply("abc") == "axyc"


def test_example():
    """Test the full example sentence."""
    original = "The brown fox jumps twice over the lazy horse"

    patcher = Patcher()
    patcher.insert(3, " quick")
    patcher.delete(original.index("twice "), len("twice "))
    patcher.rewrite(40, 5, "dog")

    assert patcher.apply(original) == (
        "The quick brown fox jumps over the lazy dog"
    )


# ============================================================
# REUSE
# ============================================================

def test_apply_twice_same_result():
    """Test that applying twice gives the same output."""
    patcher = Patcher()
    patcher.insert(2, "X")
    patcher.insert(2, "Y")
    patcher.delete(0, 1)

    first = patcher.apply("abcd")
    second = patcher.apply("abcd")

    assert first == second == "bXYcd"


def test_apply_to_different_inputs():
    """Test that one patcher applies to inputs of different lengths."""
    patcher = Patcher()
    patcher.rewrite(0, 1, "A")
    patcher.insert(3, "!")

    assert patcher.apply("abc") == "Abc!"
    assert patcher.apply("xyzw") == "Ayz!w"


def test_failed_apply_keeps_edits():
    """Test that a failed apply leaves edits usable for a longer input."""
    patcher = Patcher()
    patcher.delete(4, 2)

    with pytest.raises(OutOfRangeError):
        patcher.apply("abcd")

    assert len(patcher) == 1
    assert patcher.apply("abcdef") == "abcd"


def test_recording_order_independence():
    """Test that permuted recording yields identical output."""
    original = "0123456789"
    forward = Patcher()
    forward.delete(1, 2)
    forward.rewrite(4, 1, "four")
    forward.insert(9, "-")

    backward = Patcher()
    backward.insert(9, "-")
    backward.rewrite(4, 1, "four")
    backward.delete(1, 2)

    assert forward.apply(original) == backward.apply(original) == (
        "03four5678-9"
    )


def test_input_not_mutated():
    """Test that a bytearray input is left untouched."""
    original = bytearray(b"abcde")
    patcher = Patcher()
    patcher.rewrite(0, 5, "zzz")

    assert patcher.apply(original) == b"zzz"
    assert original == bytearray(b"abcde")


# ============================================================
# ERRORS
# ============================================================

def test_error_attributes():
    """Test kind and edits on a raised error."""
    patcher = Patcher()
    patcher.insert(7, "q")

    with pytest.raises(PatchError) as excinfo:
        patcher.apply("abc")

    error = excinfo.value
    assert isinstance(error, ValueError)
    assert error.kind is ErrorKind.OUT_OF_RANGE
    assert error.edits == (Edit(7, 0, b"q"),)
    assert str(error) == "out of range: (7,0,q)"


def test_conflict_message_format():
    """Test that conflicts render both edits joined by 'vs'."""
    patcher = Patcher()
    patcher.delete(0, 3)
    patcher.insert(1, "x")

    with pytest.raises(ConflictError) as excinfo:
        patcher.apply("abc")

    assert str(excinfo.value) == "conflict: (0,3,) vs (1,0,x)"
    assert excinfo.value.kind == "conflict"


def test_negative_offset_checked_before_input():
    """Test that a negative offset is reported even for empty input."""
    patcher = Patcher()
    patcher.delete(-3, 1)
    patcher.delete(0, 100)

    check_error(patcher, "", NegativeOffsetError, "negative offset", "(-3,1,)")


# ============================================================
# BYTES AND ENCODING
# ============================================================

def test_bytes_edits_on_bytes_input():
    """Test recording bytes and applying to bytes."""
    patcher = Patcher()
    patcher.insert(1, b"\x00\xff")
    patcher.delete(2, 1)

    assert patcher.apply(b"abcd") == b"a\x00\xffbd"


def test_patch_bytes_accepts_text_edits():
    """Test that str edits and bytes input mix."""
    patcher = Patcher()
    patcher.rewrite(0, 1, "é")

    assert patcher.patch_bytes(b"abc") == "é".encode() + b"bc"


def test_offsets_are_byte_based():
    """Test that offsets count encoded bytes, not characters."""
    original = "héllo"  # é is two bytes in UTF-8
    patcher = Patcher()
    patcher.rewrite(1, 2, "e")

    assert patcher.patch_string(original) == "hello"


def test_split_character_round_trips():
    """Test that deleting half a character still yields a str."""
    original = "aéb"
    patcher = Patcher()
    patcher.delete(1, 1)

    output = patcher.apply(original)

    assert isinstance(output, str)
    assert output.encode("utf-8", errors="surrogateescape") == b"a\xa9b"


def test_custom_encoding():
    """Test a patcher using a single-byte encoding."""
    patcher = Patcher(encoding="latin-1")
    patcher.rewrite(1, 1, "ü")

    assert patcher.apply("aéb") == "aüb"


def test_custom_encoding_in_error_text():
    """Test that error text shows data decoded with the patcher encoding."""
    patcher = Patcher(encoding="latin-1")
    patcher.insert(10, "ü")

    with pytest.raises(OutOfRangeError) as excinfo:
        patcher.apply("abc")

    assert str(excinfo.value) == "out of range: (10,0,ü)"


# ============================================================
# REPLACEMENT DATA OWNERSHIP
# ============================================================

def test_data_held_by_reference():
    """Test that later changes to a recorded buffer show up in output."""
    data = bytearray(b"xy")
    patcher = Patcher()
    patcher.insert(1, data)

    data[0:2] = b"QR"

    assert patcher.apply(b"ab") == b"aQRb"


def test_copy_data_snapshots_buffer():
    """Test that copy_data isolates recorded edits from the caller."""
    data = bytearray(b"xy")
    patcher = Patcher(copy_data=True)
    patcher.insert(1, data)

    data[0:2] = b"QR"

    assert patcher.apply(b"ab") == b"axyb"
