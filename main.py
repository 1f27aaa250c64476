#!/usr/bin/env python3
"""
hoare demo - inject contracts into examples/contracts.py and exercise them
"""

from pathlib import Path

from hoare import load_file, rewrite_file

EXAMPLE = Path(__file__).parent / "examples" / "contracts.py"


def show_rewrite():
    """Print the rewritten source of half()"""
    print("\n" + "=" * 70)
    print("Rewritten module")
    print("=" * 70)

    result = rewrite_file(EXAMPLE, debug_assertions=True)
    print(result.source)
    print(f"Rewritten: {', '.join(result.rewritten)}")
    return result


def exercise_contracts():
    """Call the checked functions, including one contract violation"""
    print("\n" + "=" * 70)
    print("Running checked functions")
    print("=" * 70)

    module = load_file(EXAMPLE, debug_assertions=True)

    print(f"half(-5)           = {module.half(-5)}")
    print(f"clamp(15, 0, 10)   = {module.clamp(15, 0, 10)}")
    print(f"index_of([4, 2], 2) = {module.index_of([4, 2], 2)}")

    try:
        module.half(-200)
    except AssertionError as e:
        print(f"half(-200)         -> AssertionError: {e}")

    account = module.Account(10)
    try:
        account.withdraw(20)
    except AssertionError as e:
        print(f"withdraw(20)       -> AssertionError: {e}")


def main():
    """Run the demo"""
    print("\n" + "╔" + "=" * 68 + "╗")
    print("║" + " " * 20 + "hoare - contract injection" + " " * 22 + "║")
    print("╚" + "=" * 68 + "╝")

    show_rewrite()
    exercise_contracts()
    return 0


if __name__ == "__main__":
    exit(main())
