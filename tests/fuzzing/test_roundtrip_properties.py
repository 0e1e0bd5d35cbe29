"""
Hypothesis-based property tests for the row codec.

Properties checked:
- Round-trip: unmarshal(marshal(E)) == E for every supported kind
- Header derivation does not depend on field values
- Column matching is independent of column order
- Unsupported fields fail in both directions, never coerced
- Finite 32-bit fields never produce or accept infinity
- Arbitrary text never crashes decode; failures are collected per row
"""

import math
import struct

from hypothesis import given, settings
from hypothesis import strategies as st

from records_codec import marshal, unmarshal
from records_kernel.exceptions import FieldCodecError, UnsupportedKindError

from tests.codec.entries import AllKinds, Employee, Gauge, Person, WithNested

INT64 = st.integers(min_value=-(2**63), max_value=2**63 - 1)


def _f32(x: float) -> float:
    return struct.unpack("f", struct.pack("f", x))[0]


all_kinds = st.builds(
    AllKinds,
    i=INT64,
    i8=st.integers(min_value=-128, max_value=127),
    i32=st.integers(min_value=-(2**31), max_value=2**31 - 1),
    u8=st.integers(min_value=0, max_value=255),
    u16=st.integers(min_value=0, max_value=2**16 - 1),
    u64=st.integers(min_value=0, max_value=2**64 - 1),
    f=st.floats(allow_nan=False),
    f32=st.floats(width=32, allow_nan=False),
    b=st.booleans(),
    s=st.text(),
    skipped=st.just(0),
)

persons = st.builds(Person, age=INT64, name=st.text(), is_employee=st.booleans())


@settings(max_examples=200)
@given(st.lists(all_kinds, max_size=10))
def test_round_trip_all_kinds(entries):
    rows = marshal(entries, entry_type=AllKinds)
    assert rows.success
    assert all(len(row) == len(rows.header) for row in rows.rows)

    decoded = unmarshal(rows.rows, AllKinds)
    assert decoded.success
    assert decoded.entries == entries


@given(st.lists(st.floats(allow_nan=True, allow_infinity=True), min_size=1, max_size=5))
def test_float_text_round_trips_bit_for_bit(values):
    entries = [AllKinds(0, 0, 0, 0, 0, 0, v, _f32(0.5), False, "") for v in values]
    decoded = unmarshal(marshal(entries).rows, AllKinds).entries
    for original, restored in zip(entries, decoded):
        if math.isnan(original.f):
            assert math.isnan(restored.f)
        else:
            assert struct.pack("d", restored.f) == struct.pack("d", original.f)


@given(persons, persons)
def test_header_independent_of_values(a, b):
    assert marshal([a]).header == marshal([b]).header == ["age", "name", "isEmployee"]


@given(st.lists(persons, min_size=1, max_size=5), st.permutations([0, 1, 2]))
def test_column_order_independent(entries, order):
    rows = marshal(entries).rows
    shuffled = [[row[i] for i in order] for row in rows]
    assert unmarshal(shuffled, Person).entries == unmarshal(rows, Person).entries == entries


@given(st.lists(st.text(), min_size=1, max_size=5))
def test_unannotated_fields_zero_after_round_trip(names):
    entries = [Employee(age=len(n) + 1, name=n, is_employee=True) for n in names]
    decoded = unmarshal(marshal(entries).rows, Employee).entries
    assert [e.age for e in decoded] == [0] * len(names)
    assert [e.name for e in decoded] == names


@given(st.text(), st.text())
def test_unsupported_fields_fail_both_directions(name, cell):
    encoded = marshal([WithNested(name=name, address=None)])
    assert any(isinstance(e, UnsupportedKindError) and e.field_name == "address" for e in encoded.errors)

    decoded = unmarshal([["name", "address"], [name, cell]], WithNested)
    assert isinstance(decoded.error, UnsupportedKindError)
    assert decoded.entries[0].name == name


@given(st.lists(st.lists(st.text(max_size=8), max_size=12), min_size=1, max_size=6))
def test_arbitrary_text_never_crashes(rows):
    header = ["i", "i8", "u8", "f", "f32", "b", "s", "missing"]
    result = unmarshal([header] + rows, AllKinds)
    assert len(result.entries) == len(rows)
    assert all(isinstance(e, FieldCodecError) for e in result.errors)
    assert all(1 <= e.row <= len(rows) for e in result.errors)


@given(st.floats(allow_nan=False, allow_infinity=False))
def test_float32_finite_values_stay_finite(value):
    result = marshal([Gauge(value)])
    cell = result.rows[1][0]
    if result.success:
        decoded = unmarshal(result.rows, Gauge)
        assert decoded.success
        assert decoded.entries[0].reading == _f32(value)
        assert math.isfinite(decoded.entries[0].reading)
    else:
        assert cell == ""
        assert isinstance(result.error, UnsupportedKindError)
        assert "32-bit" in str(result.error)
