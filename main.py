from __future__ import annotations

from staffing.ui import staffing_menu


def main() -> None:
    staffing_menu()
    print("Goodbye.")


if __name__ == "__main__":
    main()
