from __future__ import annotations
from typing import Optional, Set

RULE_WIDTH = 90


def header(title: str) -> str:
    rule = "=" * RULE_WIDTH
    return f"\n{rule}\n{title}\n{rule}"


def print_header(title: str) -> None:
    print(header(title))


def fmt_float(x: float) -> str:
    return f"{x:0.2f}"


def pause() -> None:
    input("\nPress Enter to continue...")


def ask_int(prompt: str, default: Optional[int] = None, valid: Optional[Set[int]] = None) -> int:
    while True:
        raw = input(prompt).strip()
        if raw == "" and default is not None:
            return default
        try:
            v = int(raw)
        except ValueError:
            print("Please enter an integer.")
            continue
        if valid is not None and v not in valid:
            print(f"Please choose one of: {sorted(valid)}")
            continue
        return v
