from typing import Any, List


def _continue() -> None:
    """Asks the user to continue."""
    answer = input("Continue Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting deployment!")
        exit(-1)


def _confirm_deployment(contract_name: str, args: List[Any]) -> None:
    """Asks the user to confirm the deployment of a single contract."""
    if not args:
        print(f"\n(i) No constructor arguments for {contract_name}")
    else:
        print(f"\nConstructor arguments for {contract_name}")
        for position, value in enumerate(args):
            print(f"\t[{position}]={value}")

    answer = input(f"Deploy {contract_name} Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting deployment!")
        exit(-1)
