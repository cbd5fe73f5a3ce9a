#!/usr/bin/env python3
"""
Gaia — Telegram companion agent
===============================
Answers when addressed, remembers each chat in a local JSON file,
and answers /sol balance|tx|slot lookups against a Solana RPC node.

Architecture: Telegram Polling → address check → /sol router | (memory → LLM → memory) → Reply
"""

from gaia import main

if __name__ == "__main__":
    main()
