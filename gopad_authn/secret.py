# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Random secret generation."""

import secrets

LETTERS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def generate(length: int) -> str:
    """Generate a random alphanumeric secret.

    Each character is drawn independently and uniformly from the 62 letters
    using a range-bounded draw from the OS CSPRNG, so there is no modulo bias.

    Args:
        length: Number of characters to produce

    Returns:
        Random string of the requested length
    """
    if length < 0:
        raise ValueError("length must not be negative")

    return "".join(LETTERS[secrets.randbelow(len(LETTERS))] for _ in range(length))
