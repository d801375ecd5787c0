"""Auction House: fixed-price game marketplace backend."""
