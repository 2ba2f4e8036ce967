# examples/registry_demo.py
# Run with: python examples/registry_demo.py
#
# Walks two owners through the challenge → sign → submit flow, then shows what a
# tampered block looks like to the chain scan.

from starledger import AgentKeyPair
from starledger.integration.registry import StarRegistry


def register(registry: StarRegistry, keys: AgentKeyPair, star: dict):
    identity = keys.public_key_b64url()
    challenge = registry.request_challenge(identity).value
    outcome = registry.submit(identity, challenge, keys.sign_text(challenge), star)
    if outcome.ok:
        print(f"  + height {outcome.value.height}: {star['story']}")
    else:
        print(f"  ! rejected ({outcome.error_kind}): {outcome.error}")
    return outcome


def main():
    registry = StarRegistry()
    alice, bob = AgentKeyPair.generate(), AgentKeyPair.generate()

    print("Registering stars...")
    register(registry, alice, {"ra": "16h 29m 1.0s", "dec": "68° 52' 56.9", "story": "Alice's first star"})
    register(registry, bob, {"ra": "13h 03m 33.35s", "dec": "-49° 31' 38.1", "story": "Bob's star"})
    register(registry, alice, {"ra": "05h 14m 32.3s", "dec": "-08° 12' 06.0", "story": "Alice's second star"})

    print("\nForged signature (bob signs alice's challenge):")
    identity = alice.public_key_b64url()
    challenge = registry.request_challenge(identity).value
    outcome = registry.submit(identity, challenge, bob.sign_text(challenge), {"story": "stolen"})
    print(f"  ! rejected ({outcome.error_kind})")

    print(f"\nAlice owns {len(registry.get_by_owner(identity).value)} stars; height is {registry.get_height().value}")

    ledger = registry.ledger
    print(f"Chain findings before tampering: {ledger.validate_chain()}")
    ledger.lookup_by_height(2).body = ledger.codec.encode({"owner": identity, "star": {"story": "rewritten"}})
    for finding in ledger.validate_chain():
        print(f"  • {finding}")


if __name__ == "__main__":
    main()
