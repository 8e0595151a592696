import pytest

from vitrine.__main__ import main

BCB_EXAMPLE = (
    "00020126580014br.gov.bcb.pix0136123e4567-e12b-12d1-a456-426655440000"
    "5204000053039865802BR5913Fulano de Tal6008BRASILIA62070503***63041D3D"
)


class TestPix:
    def test_encode_then_decode(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main([
            "pix", "encode",
            "--key", "pix@vitrine.com.br",
            "--name", "Vitrine",
            "--city", "Sao Paulo",
            "--reference", "ORD000001",
            "--amount", "123.40",
            "--dynamic",
        ])
        payload = capsys.readouterr().out.strip()

        assert code == 0
        assert payload.startswith("000201010212")
        assert "5406123.40" in payload

        assert main(["pix", "decode", payload]) == 0
        out = capsys.readouterr().out
        assert "dynamic" in out
        assert "123.40" in out
        assert "ORD000001" in out

    def test_dynamic_without_amount(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["pix", "encode", "--key", "k", "--name", "n", "--city", "c", "--dynamic"])

        assert code == 1
        assert "error" in capsys.readouterr().err

    def test_decode_published_example(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["pix", "decode", BCB_EXAMPLE]) == 0
        out = capsys.readouterr().out
        assert "Fulano de Tal" in out
        assert "BRASILIA" in out
        assert "1D3D" in out

    def test_decode_tampered(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["pix", "decode", BCB_EXAMPLE.replace("Fulano", "Fulana")]) == 1
        assert "bad_checksum" in capsys.readouterr().err


class TestChecks:
    def test_tax_id(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["tax-id", "52998224725"]) == 0
        assert capsys.readouterr().out.strip() == "529.982.247-25 valid"

        assert main(["tax-id", "111.111.111-11"]) == 1
        assert capsys.readouterr().out.strip() == "111.111.111-11 invalid"

    def test_postal_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["postal-code", "01310100"]) == 0
        assert capsys.readouterr().out.strip() == "01310-100 valid"

        assert main(["postal-code", "0131"]) == 1


class TestTotals:
    def test_two_stores(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["totals", "--delivery-fee", "20", "--service-fee", "3.40", "a:50.00", "b:30.00"]) == 0
        out = capsys.readouterr().out

        assert "R$ 80,00" in out
        assert "R$ 40,00" in out
        assert "(2 stores)" in out
        assert "R$ 123,40" in out

    def test_bad_line(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["totals", "a"]) == 1
        assert "MERCHANT:PRICE" in capsys.readouterr().err
