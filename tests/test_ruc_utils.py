import pytest

from sunat_xml.utils.ruc_utils import calcular_digito_verificador_ruc, es_dni_valido, es_ruc_valido


@pytest.mark.parametrize("ruc", ["20131312955", "20100070970"])
def test_ruc_valido(ruc):
    assert es_ruc_valido(ruc) is True


@pytest.mark.parametrize("ruc", ["20131312954", "2013131295", "2013131295A", "", None])
def test_ruc_invalido(ruc):
    assert es_ruc_valido(ruc) is False


def test_digito_verificador():
    assert calcular_digito_verificador_ruc("2013131295") == 5
    # 11 - (89 % 11) = 10 -> 0
    assert calcular_digito_verificador_ruc("2010007097") == 0
    assert calcular_digito_verificador_ruc("123") is None


def test_dni():
    assert es_dni_valido("45678912") is True
    assert es_dni_valido(" 45678912 ") is True
    assert es_dni_valido("4567891") is False
    assert es_dni_valido("4567891X") is False
