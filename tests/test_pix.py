from dataclasses import replace

import pytest
from kungfu import Ok, Error

from vitrine.pix import (
    MAX_NAME,
    ConfigurationProblem,
    DecodedPayload,
    Initiation,
    PaymentFields,
    PixConfig,
    PixErrorKind,
    crc16,
    checksum,
    decode,
    encode,
    issue,
    join_tlv,
    split_tlv,
    tlv,
    verify_checksum,
)

from tests.conftest import failure, ok

BCB_EXAMPLE = (
    "00020126580014br.gov.bcb.pix0136123e4567-e12b-12d1-a456-426655440000"
    "5204000053039865802BR5913Fulano de Tal6008BRASILIA62070503***63041D3D"
)

FIELDS = PaymentFields(
    payee_key="pix@vitrine.com.br",
    merchant_name="Vitrine Pagamentos",
    merchant_city="SAO PAULO",
    reference="ORD000001",
)

CONFIG = PixConfig(key="pix@vitrine.com.br", merchant_name="Vitrine Pagamentos", city="SAO PAULO")


def encoded(fields: PaymentFields) -> str:
    match encode(fields):
        case Ok(payload):
            return payload
        case Error(e):
            pytest.fail(f"encode failed: {e}")


def decoded(payload: str) -> DecodedPayload:
    match decode(payload):
        case Ok(result):
            return result
        case Error(e):
            pytest.fail(f"decode failed: {e}")


class TestChecksum:
    def test_check_value(self) -> None:
        assert crc16(b"123456789") == 0x29B1

    def test_hex_is_four_uppercase_digits(self) -> None:
        assert checksum("123456789") == "29B1"
        assert len(checksum("")) == 4

    def test_published_example(self) -> None:
        assert checksum(BCB_EXAMPLE[:-4]) == "1D3D"
        assert verify_checksum(BCB_EXAMPLE)
        assert verify_checksum(BCB_EXAMPLE[:-4] + "1d3d")

    def test_tampered_payload(self) -> None:
        assert not verify_checksum(BCB_EXAMPLE.replace("BRASILIA", "BRASILIO"))
        assert not verify_checksum("6304")


class TestTlv:
    def test_field(self) -> None:
        assert ok(tlv("00", "01")) == "000201"
        assert ok(tlv("59", "")) == "5900"

    def test_value_limit(self) -> None:
        assert ok(tlv("62", "x" * 99)) == "6299" + "x" * 99
        problem = failure(tlv("62", "x" * 100))
        assert problem.kind is PixErrorKind.FIELD_TOO_LONG
        assert problem.tag == "62"

    def test_bad_tag_raises(self) -> None:
        with pytest.raises(ValueError):
            tlv("5", "x")

    def test_join_and_split(self) -> None:
        assert ok(join_tlv([("00", "01"), ("01", "11")])) == "000201010211"
        assert ok(split_tlv("000201010211")) == [("00", "01"), ("01", "11")]

    def test_split_truncated(self) -> None:
        assert failure(split_tlv("0005ab")).kind is PixErrorKind.MALFORMED
        assert failure(split_tlv("00")).kind is PixErrorKind.MALFORMED


class TestDecode:
    def test_published_example(self) -> None:
        result = decoded(BCB_EXAMPLE)

        assert result.initiation is Initiation.STATIC
        assert result.payee_gui == "br.gov.bcb.pix"
        assert result.payee_key == "123e4567-e12b-12d1-a456-426655440000"
        assert result.merchant_name == "Fulano de Tal"
        assert result.merchant_city == "BRASILIA"
        assert result.currency == "986"
        assert result.country == "BR"
        assert result.amount is None
        assert result.reference == "***"
        assert result.crc == "1D3D"

    def test_bad_checksum(self) -> None:
        problem = failure(decode(BCB_EXAMPLE.replace("BRASILIA", "BRASILIO")))
        assert problem.kind is PixErrorKind.BAD_CHECKSUM

    @pytest.mark.parametrize("payload", ["", "hello", "000201"])
    def test_malformed(self, payload: str) -> None:
        assert failure(decode(payload)).kind is PixErrorKind.MALFORMED


class TestEncode:
    def test_layout(self) -> None:
        payload = encoded(FIELDS)

        assert payload.startswith("000201010211")
        assert "26400014br.gov.bcb.pix0118pix@vitrine.com.br" in payload
        assert "52040000" in payload
        assert "5303986" in payload
        assert "5802BR" in payload
        assert "5918Vitrine Pagamentos" in payload
        assert "6009SAO PAULO" in payload
        assert "62130509ORD000001" in payload
        assert payload[-8:-4] == "6304"
        assert verify_checksum(payload)

    def test_deterministic(self) -> None:
        assert encoded(FIELDS) == encoded(FIELDS)

    def test_static_code_omits_amount(self) -> None:
        result = decoded(encoded(replace(FIELDS, amount=12340)))
        assert result.amount is None
        assert "54" not in dict(result.tags)

    def test_round_trip(self) -> None:
        result = decoded(encoded(FIELDS))

        assert result.payee_key == FIELDS.payee_key
        assert result.merchant_name == FIELDS.merchant_name
        assert result.merchant_city == FIELDS.merchant_city
        assert result.reference == FIELDS.reference
        assert result.initiation is Initiation.STATIC

    def test_long_values_truncated(self) -> None:
        fields = PaymentFields(
            payee_key="pix@vitrine.com.br",
            merchant_name="Vitrine Pagamentos Multimarcas",
            merchant_city="Sao Jose dos Campos",
            reference="R" * 40,
        )
        result = decoded(encoded(fields))

        assert result.merchant_name == "Vitrine Pagamentos Multim"
        assert len(result.merchant_name) == MAX_NAME
        assert result.merchant_city == "Sao Jose dos Ca"
        assert result.reference == "R" * 25

    def test_uppercase_name(self) -> None:
        fields = PaymentFields(
            payee_key="pix@vitrine.com.br",
            merchant_name="Vitrine Pagamentos",
            merchant_city="SAO PAULO",
            reference="",
            uppercase_name=True,
        )
        result = decoded(encoded(fields))

        assert result.merchant_name == "VITRINE PAGAMENTOS"
        assert result.reference == "***"

    def test_dynamic_code_carries_amount(self) -> None:
        fields = PaymentFields(
            payee_key="pix@vitrine.com.br",
            merchant_name="Vitrine",
            merchant_city="SAO PAULO",
            reference="ORD000001",
            initiation=Initiation.DYNAMIC,
            amount=12340,
        )
        payload = encoded(fields)

        assert payload.startswith("000201010212")
        assert "5406123.40" in payload
        assert decoded(payload).amount == 12340

    def test_dynamic_code_needs_amount(self) -> None:
        fields = PaymentFields(
            payee_key="pix@vitrine.com.br",
            merchant_name="Vitrine",
            merchant_city="SAO PAULO",
            reference="ORD000001",
            initiation=Initiation.DYNAMIC,
        )
        problem = failure(encode(fields))
        assert problem.kind is PixErrorKind.MISSING_FIELD
        assert problem.tag == "54"

    @pytest.mark.parametrize(
        ("override", "tag"),
        [({"payee_key": " "}, "26"), ({"merchant_name": ""}, "59"), ({"merchant_city": ""}, "60")],
    )
    def test_missing_required(self, override: dict[str, str], tag: str) -> None:
        problem = failure(encode(replace(FIELDS, **override)))
        assert problem.kind is PixErrorKind.MISSING_FIELD
        assert problem.tag == tag


class TestIssue:
    def test_bound_to_order(self) -> None:
        match issue("ORD000001", 12340, CONFIG):
            case Ok(code):
                assert code.bound_order_id == "ORD000001"
                assert code.initiation is Initiation.STATIC
                assert decoded(code.payload).reference == "ORD000001"
            case Error(e):
                pytest.fail(f"unexpected {e}")

    def test_same_order_same_payload(self) -> None:
        assert ok(issue("ORD000001", 12340, CONFIG)) == ok(issue("ORD000001", 12340, CONFIG))

    def test_dynamic_initiation_binds_amount(self) -> None:
        match issue("ORD000001", 12340, replace(CONFIG, initiation=Initiation.DYNAMIC)):
            case Ok(code):
                assert code.initiation is Initiation.DYNAMIC
                assert decoded(code.payload).amount == 12340
            case Error(e):
                pytest.fail(f"unexpected {e}")

    @pytest.mark.parametrize("key", [None, "", "   "])
    def test_missing_key_is_configuration_problem(self, key: str | None) -> None:
        assert failure(issue("ORD000001", 12340, replace(CONFIG, key=key))) == ConfigurationProblem(
            "pix_key", "PIX key is not configured"
        )

    def test_oversize_key_names_the_setting(self) -> None:
        match issue("ORD000001", 12340, replace(CONFIG, key="k" * 80)):
            case Error(ConfigurationProblem(setting=setting)):
                assert setting == "pix_key"
            case other:
                pytest.fail(f"unexpected {other}")

    def test_initiation_parse(self) -> None:
        assert Initiation.parse("Dynamic") is Initiation.DYNAMIC
        assert Initiation.parse("11") is Initiation.STATIC
        with pytest.raises(ValueError):
            Initiation.parse("once")
