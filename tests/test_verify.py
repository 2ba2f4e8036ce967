# tests/test_verify.py
import json
from dataclasses import replace

import pytest

from starledger.core.errors import DecodeError
from starledger.verify.verifier import ChainReport, load_blocks, scan_chain, verify_blocks, verify_file


@pytest.fixture
def chain(ledger, alice, bob, submit):
    for i in range(4):
        submit(ledger, alice if i % 2 == 0 else bob, {"ra": str(i)})
    return ledger.blocks()


def test_valid_chain(chain):
    report = verify_blocks(chain)
    assert report.is_valid is True
    assert bool(report) is True
    assert report.length == 5
    assert "valid" in str(report)


def test_empty_chain_is_valid():
    assert scan_chain([]) == []


def test_tamper_content(chain):
    tampered = chain.copy()
    tampered[2] = replace(tampered[2], timestamp=tampered[2].timestamp + 60)
    report = verify_blocks(tampered)
    assert not report
    assert report.first_finding.height == 2
    assert report.first_finding.category == "tamper"


def test_broken_hash_link(chain):
    tampered = chain.copy()
    # re-seal so only the link is wrong, not the block's own hash
    forged = replace(tampered[3], previous_hash="deadbeef" * 8, hash=None)
    forged.seal()
    tampered[3] = forged
    findings = scan_chain(tampered)
    assert [(f.height, f.category) for f in findings] == [(3, "linkage"), (4, "linkage")]


def test_removed_block_breaks_chain(chain):
    tampered = chain[:2] + chain[3:]
    categories = {f.category for f in scan_chain(tampered)}
    assert {"height", "linkage"} <= categories


def test_every_block_is_examined(chain):
    tampered = [replace(b, body=b.body + "A") for b in chain]
    findings = scan_chain(tampered)
    assert sorted(f.height for f in findings if f.category in ("tamper", "genesis")) == [0, 1, 2, 3, 4]


def test_report_str_lists_findings(chain):
    tampered = chain.copy()
    tampered[1] = replace(tampered[1], body="")
    text = str(verify_blocks(tampered))
    assert "FAILED" in text
    assert "[1] tamper" in text


def test_verify_exported_file(chain, tmp_path):
    path = tmp_path / "chain.jsonl"
    path.write_text("".join(json.dumps(b.to_dict()) + "\n" for b in chain), encoding="utf-8")
    report = verify_file(path)
    assert isinstance(report, ChainReport)
    assert report.is_valid
    assert report.length == len(chain)


def test_load_blocks_rejects_garbage():
    with pytest.raises(DecodeError):
        load_blocks(["{not json"])
    with pytest.raises(DecodeError):
        load_blocks(["[1, 2, 3]"])
    with pytest.raises(DecodeError):
        load_blocks(['{"height": 0}'])


def test_load_blocks_skips_blank_lines(chain):
    lines = ["\n"] + [json.dumps(b.to_dict()) for b in chain] + ["   "]
    assert load_blocks(lines) == chain
