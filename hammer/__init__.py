"""
Hammer - auction pricing and phase-state engine

Core of an on-chain auction marketplace supporting:
- Ascending (English) auctions
- Linear, exponential and logarithmic reverse Dutch auctions
- Sealed-bid (Vickrey) commit-reveal auctions
"""

__version__ = "0.1.0"
