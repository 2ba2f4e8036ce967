# tests/test_core.py
import pytest

from starledger.core.canon import canonical_json, canonical_json_str
from starledger.core.config import LedgerConfig
from starledger.core.encoding import DEFAULT_CODEC, b64url_decode, b64url_encode
from starledger.core.errors import DecodeError
from starledger.core.types import Block, GenesisMarker, OwnedRecord, UnknownPayload, classify_payload

STAR = {"star": {"ra": "16h 29m 1.0s", "dec": "68° 52' 56.9"}}


@pytest.fixture
def sealed_block():
    block = Block.from_payload({"owner": "addr1", "star": STAR["star"]})
    block.height = 3
    block.timestamp = 1_700_000_000
    block.previous_hash = "ab" * 32
    block.seal()
    return block


def test_new_block_defaults():
    block = Block.from_payload(STAR)
    assert block.hash is None
    assert block.height == 0
    assert block.timestamp == 0
    assert block.previous_hash is None
    assert not block.is_sealed
    assert isinstance(block.body, str) and block.body


def test_payload_roundtrip():
    assert Block.from_payload(STAR).decode_payload() == STAR


def test_large_integers_roundtrip_exactly():
    payload = {"star": {"n": 2**60 + 1, "neg": -(2**64), "name": "Étoile ☆"}}
    assert Block.from_payload(payload).decode_payload() == payload


def test_encoding_is_deterministic():
    assert Block.from_payload({"b": 1, "a": [1, 2]}).body == Block.from_payload({"a": [1, 2], "b": 1}).body


def test_unsealed_block_does_not_validate():
    assert Block.from_payload(STAR).validate() is False


def test_validate_after_seal(sealed_block):
    assert len(sealed_block.hash) == 64
    assert sealed_block.validate() is True
    # hash is left in place
    assert sealed_block.hash == sealed_block.compute_hash()


@pytest.mark.parametrize("field,value", [
    ("height", 4),
    ("body", DEFAULT_CODEC.encode({"owner": "mallory", "star": "stolen"})),
    ("timestamp", 1_700_000_001),
    ("previous_hash", "cd" * 32),
])
def test_any_field_change_breaks_validation(sealed_block, field, value):
    setattr(sealed_block, field, value)
    assert sealed_block.validate() is False


def test_hash_excluded_from_digest_input(sealed_block):
    assert "hash" not in sealed_block.content_fields()
    assert set(sealed_block.content_fields()) == {"height", "body", "timestamp", "previous_hash"}


def test_sealed_genesis_has_no_payload():
    genesis = Block.from_payload({"data": "Genesis Block"})
    genesis.seal()
    assert genesis.decode_payload() is None
    assert genesis.record() == GenesisMarker({"data": "Genesis Block"})


@pytest.mark.parametrize("body", ["", b64url_encode(b"{not json"), b64url_encode(b"\xff\xfe\x00")])
def test_corrupted_body_raises_decode_error(body):
    block = Block(body=body)
    with pytest.raises(DecodeError):
        block.decode_payload()


def test_non_text_body_raises_decode_error():
    with pytest.raises(DecodeError):
        Block(body=None).decode_payload()


def test_classify_payload():
    assert classify_payload({"owner": "addr1", "star": {"ra": "1"}}, 5) == OwnedRecord("addr1", {"ra": "1"})
    assert classify_payload({"owner": "addr1"}, 5) == UnknownPayload({"owner": "addr1"})
    assert classify_payload({"owner": 7, "star": {}}, 5) == UnknownPayload({"owner": 7, "star": {}})
    assert classify_payload({"owner": "addr1", "star": {}}, 0) == GenesisMarker({"owner": "addr1", "star": {}})


def test_block_dict_roundtrip(sealed_block):
    clone = Block.from_dict(sealed_block.to_dict())
    assert clone == sealed_block
    assert clone.validate()


def test_block_from_incomplete_dict():
    with pytest.raises(DecodeError):
        Block.from_dict({"hash": "00", "height": 1})


def test_base64url_roundtrip():
    original = b'{"hello":"world"}'
    encoded = b64url_encode(original)
    assert b64url_decode(encoded) == original
    assert "=" not in encoded  # no padding


def test_canonical_json_sorting():
    messy = {"z": 1, "a": "hello", "nested": {"b": 2, "a": 1}}
    assert canonical_json_str(messy) == '{"a":"hello","nested":{"a":1,"b":2},"z":1}'
    assert canonical_json(messy) == canonical_json(dict(reversed(list(messy.items()))))


def test_config_defaults(monkeypatch):
    monkeypatch.delenv("STARLEDGER_CHALLENGE_WINDOW", raising=False)
    monkeypatch.delenv("STARLEDGER_CHALLENGE_SUFFIX", raising=False)
    config = LedgerConfig.load()
    assert config.challenge_window == 300
    assert config.challenge_clock_skew == 30
    assert config.challenge_suffix == "starRegistry"
    assert config.genesis_payload == {"data": "Genesis Block"}


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("STARLEDGER_CHALLENGE_WINDOW", "60")
    monkeypatch.setenv("STARLEDGER_CHALLENGE_SUFFIX", "myRegistry")
    config = LedgerConfig.load()
    assert config.challenge_window == 60
    assert config.challenge_suffix == "myRegistry"


def test_config_bad_env_falls_back(monkeypatch):
    monkeypatch.setenv("STARLEDGER_CHALLENGE_WINDOW", "five minutes")
    monkeypatch.setenv("STARLEDGER_CHALLENGE_SUFFIX", "a:b")
    config = LedgerConfig.load()
    assert config.challenge_window == 300
    assert config.challenge_suffix == "starRegistry"
