#!/usr/bin/env python3
"""
Demo: Classify the example toolchain snapshots and print the results.

Shows the resolved revision, the "at least" prefix, any dialect, and the
#define block each result renders to.
"""

from stdladder import classify
from stdladder.backends import generate_header
from stdladder.examples import build_example_snapshots


def main():
    print("=" * 70)
    print("STANDARD CLASSIFIER DEMO")
    print("=" * 70)

    for name, snapshot in build_example_snapshots().items():
        result = classify(snapshot)

        print(f"\n{name}")
        print("-" * 70)
        print(f"  Resolved:  {result.resolved_name} ({result.source.value})")
        print(f"  At least:  {', '.join(result.at_least_names) or '-'}")
        if result.dialects:
            print(f"  Dialect:   {', '.join(sorted(result.dialects))}")
        if result.excluded_capabilities:
            print(f"  Excludes:  {', '.join(sorted(c.value for c in result.excluded_capabilities))}")
        if result.applied_quirk:
            print(f"  Quirk:     {result.applied_quirk}")

        header = generate_header(result)
        if header.strip():
            print()
            for line in header.splitlines():
                print(f"    {line}")

    print("\n" + "=" * 70)
    print("Classify a real compiler:")
    print("  cc -dM -E - </dev/null | stdladder classify --macros -")
    print("=" * 70)


if __name__ == "__main__":
    main()
