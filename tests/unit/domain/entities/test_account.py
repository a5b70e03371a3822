import pytest

from storefront.domain.entities import OAuthIdentity


def test_identity_requires_provider_fields():
    with pytest.raises(ValueError, match="Provider account ID"):
        OAuthIdentity(provider="google", provider_account_id="", email="a@b.com", name="A")

    with pytest.raises(ValueError, match="Email"):
        OAuthIdentity(provider="google", provider_account_id="1", email="", name="A")


def test_identity_defaults():
    identity = OAuthIdentity(provider="google", provider_account_id="1", email="a@b.com", name="A")

    assert identity.image is None
    assert identity.provider_refresh_token is None
