"""
Pneuma - On-chain interaction layer for nomen.

Provides the wallet provider abstraction, an async JSON-RPC transport,
ABI loading and transaction utilities for the NameStorage registry.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
