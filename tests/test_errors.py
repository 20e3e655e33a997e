import pytest

from relaykit.errors import ProxyError, must


def test_base_appends_cause_message():
    err = ProxyError("failed to dial").base(ValueError("refused"))
    assert str(err) == "failed to dial | refused"


def test_base_with_none_keeps_message():
    err = ProxyError("empty")
    assert err.base(None) is err
    assert str(err) == "empty"


def test_base_chains():
    err = ProxyError("a").base(ProxyError("b")).base(KeyError("c"))
    assert str(err).startswith("a | b | ")
    assert str(err).count(" | ") == 2


def test_must_with_none_returns_none(capsys):
    assert must(None) is None
    assert capsys.readouterr().out == ""


def test_must_raises_given_error_and_prints(capsys):
    err = ProxyError("no option left")
    with pytest.raises(ProxyError) as info:
        must(err)
    assert info.value is err
    assert "no option left" in capsys.readouterr().out