"""Tests for WebRecord — version, commitment, validation and typed fields."""

from decimal import Decimal

import pytest

from bitnames.errors import CommitmentMismatch, UnsupportedVersion, ValidationError
from bitnames.models.record import SUPPORTED_VERSION, WebRecord


SAMPLE_JSON = b"""{
    "version": "0.0.1",
    "telegram": "@alice",
    "introductions": {"telegram": "1.50", "fee": "2.00"}
}"""

# sha256 of {"introductions":{"fee":"2.00","telegram":"1.50"},"telegram":"@alice","version":"0.0.1"}
SAMPLE_COMMITMENT = bytes.fromhex(
    "f48d289880b922e5f3c6253b1dc5d3dcc773b4c8c4b71c8c3ddd312e5ea486ab"
)


def _record(**fields) -> WebRecord:
    return WebRecord({"version": SUPPORTED_VERSION, **fields})


class TestMapping:
    def test_read_only_mapping(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        assert record["telegram"] == "@alice"
        assert len(record) == 3
        assert list(record) == ["version", "telegram", "introductions"]
        with pytest.raises(TypeError):
            record["telegram"] = "@mallory"  # type: ignore[index]

    def test_copies_input(self) -> None:
        document = {"version": "0.0.1"}
        record = WebRecord(document)
        document["version"] = "0.0.2"
        assert record.version_ok()

    def test_copies_nested_input(self) -> None:
        introductions = {"fee": "2.00"}
        record = _record(introductions=introductions)
        before = record.commitment()
        introductions["fee"] = "999"
        assert record.commitment() == before
        assert record.introduction_fee() == Decimal("2.00")

    def test_introductions_result_is_detached(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        record.introductions()["fee"] = "999"
        assert record.commitment() == SAMPLE_COMMITMENT

    def test_item_access_is_detached(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        record["introductions"]["telegram"] = "0"
        record.get("introductions").clear()
        assert record.commitment() == SAMPLE_COMMITMENT
        assert record.introduction_fee() == Decimal("1.50")

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(TypeError):
            WebRecord([("version", "0.0.1")])

    def test_non_string_key_rejected(self) -> None:
        with pytest.raises(TypeError):
            WebRecord({"version": "0.0.1", 1: "x"})

    def test_out_of_model_value_rejected(self) -> None:
        with pytest.raises(TypeError):
            _record(introductions={"fee": Decimal("2.00")})

    def test_lone_surrogate_rejected(self) -> None:
        with pytest.raises(ValueError):
            _record(telegram="@al\ud800ice")


class TestCommitment:
    def test_known_commitment(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        assert record.commitment() == SAMPLE_COMMITMENT
        assert record.commitment_hex() == SAMPLE_COMMITMENT.hex()

    def test_canonical_bytes(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        assert record.canonical_bytes() == (
            b'{"introductions":{"fee":"2.00","telegram":"1.50"},'
            b'"telegram":"@alice","version":"0.0.1"}'
        )

    def test_independent_of_key_order_and_whitespace(self) -> None:
        reordered = WebRecord.from_json(
            '{"introductions":{"fee":"2.00","telegram":"1.50"},'
            '"version":"0.0.1","telegram":"@alice"}'
        )
        assert reordered.commitment() == SAMPLE_COMMITMENT

    def test_repeatable(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        assert record.commitment() == record.commitment()

    def test_commitment_ok(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        assert record.commitment_ok(record.commitment())

    def test_single_bit_flip_fails(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        flipped = bytearray(record.commitment())
        flipped[0] ^= 0x01
        assert not record.commitment_ok(bytes(flipped))

    def test_content_change_fails(self) -> None:
        original = WebRecord.from_json(SAMPLE_JSON)
        tampered = _record(telegram="@alicf", introductions={"telegram": "1.50", "fee": "2.00"})
        assert not tampered.commitment_ok(original.commitment())

    def test_wrong_length_expected_does_not_match(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        assert not record.commitment_ok(record.commitment()[:31])


class TestVersion:
    def test_supported(self) -> None:
        assert WebRecord({"version": "0.0.1"}).version_ok()

    @pytest.mark.parametrize(
        "version",
        ["0.0.2", "0.0.1 ", "0.0", "", 0, 1, None, True, ["0.0.1"], {"v": "0.0.1"}],
    )
    def test_unsupported(self, version) -> None:
        assert not WebRecord({"version": version}).version_ok()

    def test_missing(self) -> None:
        assert not WebRecord({"telegram": "@alice"}).version_ok()


class TestValidate:
    def test_unpinned_passes_on_version_alone(self) -> None:
        record = _record(anything=[1, 2, {"x": None}])
        assert record.validate() is None
        assert record.validate(None) is None

    def test_pinned_passes(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        record.validate(SAMPLE_COMMITMENT)

    def test_unsupported_version(self) -> None:
        record = WebRecord({"version": "0.0.2"})
        with pytest.raises(UnsupportedVersion) as exc_info:
            record.validate()
        assert exc_info.value.version == "0.0.2"

    def test_version_checked_before_commitment(self) -> None:
        record = WebRecord({"version": 1})
        with pytest.raises(UnsupportedVersion):
            record.validate(record.commitment())

    def test_commitment_mismatch(self) -> None:
        record = _record(telegram="@alice")
        expected = b"\x00" * 32
        with pytest.raises(CommitmentMismatch) as exc_info:
            record.validate(expected)
        assert exc_info.value.expected == expected
        assert exc_info.value.actual == record.commitment()

    def test_errors_are_validation_errors(self) -> None:
        with pytest.raises(ValidationError):
            WebRecord({}).validate()

    def test_is_valid(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        assert record.is_valid()
        assert record.is_valid(SAMPLE_COMMITMENT)
        assert not record.is_valid(b"\x00" * 32)
        assert not WebRecord({}).is_valid()


class TestHandle:
    def test_present(self) -> None:
        assert _record(telegram="@alice").handle() == "@alice"

    def test_telegram_alias(self) -> None:
        assert _record(telegram="@alice").telegram() == "@alice"

    def test_missing(self) -> None:
        assert _record().handle() is None

    @pytest.mark.parametrize("value", [None, 42, ["@alice"], {"name": "@alice"}])
    def test_wrong_type(self, value) -> None:
        assert _record(telegram=value).handle() is None


class TestIntroductions:
    def test_object(self) -> None:
        assert _record(introductions={"fee": "1"}).introductions() == {"fee": "1"}

    @pytest.mark.parametrize("value", [None, "fee", 3, ["fee"]])
    def test_wrong_type(self, value) -> None:
        assert _record(introductions=value).introductions() is None


class TestIntroductionFee:
    def test_specific_handle(self) -> None:
        record = _record(introductions={"alice": "1.50", "fee": "2.00"})
        assert record.introduction_fee("alice") == Decimal("1.50")

    def test_falls_back_to_generic_fee(self) -> None:
        record = _record(introductions={"alice": "1.50", "fee": "2.00"})
        assert record.introduction_fee("bob") == Decimal("2.00")

    def test_empty_introductions(self) -> None:
        assert _record(introductions={}).introduction_fee("alice") is None

    def test_no_introductions(self) -> None:
        assert _record().introduction_fee() is None

    def test_default_is_telegram(self) -> None:
        record = WebRecord.from_json(SAMPLE_JSON)
        assert record.introduction_fee() == Decimal("1.50")

    def test_exact_decimal(self) -> None:
        record = _record(introductions={"fee": "0.1"})
        fee = record.introduction_fee()
        assert fee == Decimal("0.1")
        assert fee + fee + fee == Decimal("0.3")

    def test_present_but_invalid_specific_does_not_fall_back(self) -> None:
        record = _record(introductions={"alice": 5, "fee": "2.00"})
        assert record.introduction_fee("alice") is None

    def test_null_specific_does_not_fall_back(self) -> None:
        record = _record(introductions={"alice": None, "fee": "2.00"})
        assert record.introduction_fee("alice") is None

    @pytest.mark.parametrize(
        "fee", ["", "abc", "NaN", "Infinity", "1e3", " 1.5", "1.5 ", "1,5", "١٢"]
    )
    def test_unparseable_fee(self, fee) -> None:
        assert _record(introductions={"fee": fee}).introduction_fee() is None

    @pytest.mark.parametrize(
        "fee, expected",
        [("2", Decimal("2")), ("-0.25", Decimal("-0.25")), ("+3.", Decimal("3")), (".5", Decimal("0.5"))],
    )
    def test_plain_decimal_forms(self, fee, expected) -> None:
        assert _record(introductions={"fee": fee}).introduction_fee() == expected

    def test_numeric_fee_rejected(self) -> None:
        assert _record(introductions={"fee": 2.0}).introduction_fee() is None
