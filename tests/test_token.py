"""
Tests for token estimation
"""
from chatkeep.utils.token import encoding_for_model, estimate_tokens


def test_empty_text():
    assert estimate_tokens("") == 0
    assert estimate_tokens(None) == 0


def test_character_estimate_without_tokenizer():
    # The test environment disables tiktoken encodings
    assert estimate_tokens("abcd" * 10) == 10
    assert estimate_tokens("hi") == 1


def test_encoding_for_model():
    assert encoding_for_model("claude-sonnet-4-20250514") == "cl100k_base"
    assert encoding_for_model("gpt-4o-mini") == "o200k_base"
    assert encoding_for_model("gpt-4-turbo") == "cl100k_base"


def test_server_estimate_used_when_tokens_omitted(client, make_conversation, add_message):
    convo = make_conversation()
    message = add_message(convo["id"], "x" * 40)
    assert message["tokens"] == 10
