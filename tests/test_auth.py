"""Tests for resolving credentials into a CallingContext."""

import pytest

from lnbits_scrum.auth import resolve_context
from lnbits_scrum.config import Configuration
from lnbits_scrum.errors import ConfigurationError


def test_token_only_gives_bearer_header_and_no_usr():
    ctx = resolve_context(Configuration(access_token="tok123"))
    assert ctx.headers == {"Authorization": "Bearer tok123"}
    assert "usr" not in ctx.params()


def test_user_id_only_gives_usr_param_and_no_header():
    ctx = resolve_context(Configuration(user_id="u-1"))
    assert ctx.headers == {}
    assert ctx.params() == {"usr": "u-1"}


def test_token_and_user_id_coexist():
    ctx = resolve_context(Configuration(access_token="tok", user_id="u-1"))
    assert ctx.headers == {"Authorization": "Bearer tok"}
    assert ctx.params() == {"usr": "u-1"}


def test_neither_raises_configuration_error():
    with pytest.raises(ConfigurationError):
        resolve_context(Configuration())


def test_wallet_alone_is_not_authentication():
    with pytest.raises(ConfigurationError):
        resolve_context(Configuration(wallet_id="w-1"))


def test_params_merges_extra_with_usr():
    ctx = resolve_context(Configuration(user_id="u-1"))
    assert ctx.params({"limit": 10, "offset": 0}) == {
        "limit": 10,
        "offset": 0,
        "usr": "u-1",
    }


def test_params_does_not_mutate_context():
    ctx = resolve_context(Configuration(user_id="u-1"))
    merged = ctx.params({"scrum_id": "s1"})
    merged["extra"] = "x"
    assert ctx.params() == {"usr": "u-1"}


def test_legacy_usr_alias_resolves_to_usr_param():
    config = Configuration.from_dict({"usr": "legacy-id"})
    ctx = resolve_context(config)
    assert ctx.params() == {"usr": "legacy-id"}
