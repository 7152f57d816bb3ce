"""MERIT proof token registry tests."""

import pytest

from core.tokens.registry import InMemoryTokenRegistry


class TestInMemoryTokenRegistry:
    def test_mint_and_owner(self):
        registry = InMemoryTokenRegistry()
        assert registry.mint(1, "alice") is True
        assert registry.owner_of(1) == "alice"
        assert registry.exists(1)
        assert registry.token_count == 1

    def test_reused_id_refused(self):
        registry = InMemoryTokenRegistry()
        registry.mint(1, "alice")
        assert registry.mint(1, "bob") is False
        assert registry.owner_of(1) == "alice"

    @pytest.mark.parametrize("token_id, owner", [
        (0, "alice"),
        (-3, "alice"),
        (True, "alice"),
        (1, ""),
        (1, None),
    ])
    def test_invalid_mint(self, token_id, owner):
        registry = InMemoryTokenRegistry()
        assert registry.mint(token_id, owner) is False
        assert registry.token_count == 0

    def test_tokens_of(self):
        registry = InMemoryTokenRegistry()
        registry.mint(3, "alice")
        registry.mint(1, "alice")
        registry.mint(2, "bob")
        assert registry.tokens_of("alice") == (1, 3)
        assert registry.tokens_of("carol") == ()

    def test_no_transfer_operation(self):
        assert not hasattr(InMemoryTokenRegistry(), "transfer")
